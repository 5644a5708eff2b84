"""
Display formatting utilities for CLI output.
"""


def value_bar(value: int, max_value: int = 255, width: int = 8) -> str:
    """
    Create a text-based bar graphic for a value.

    Args:
        value: Current value
        max_value: Maximum value
        width: Bar width in characters

    Returns:
        Formatted string like "192 [██████░░]"
    """
    if max_value <= 0:
        max_value = 1

    clamped = max(0, min(value, max_value))
    fill_count = int((clamped / max_value) * width)
    bar = "█" * fill_count + "░" * (width - fill_count)

    return f"{value:3d} [{bar}]"


def pan_to_string(pan: int) -> str:
    """
    Convert a ULT pan nibble (0 = left, 15 = right) to a readable string.

    7 and 8 straddle the center and are shown as L1/R1.
    """
    if pan <= 7:
        return f"L{8 - pan}"
    return f"R{pan - 7}"


def format_size(size: int) -> str:
    """Format a byte count, e.g. 1536 -> '1.5 KB'."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"
