"""
Error types and data validation utilities for module data.
"""

from typing import Optional


class ModuleFormatError(Exception):
    """Base class for errors raised while reading, converting or writing modules."""

    pass


class TruncatedInput(ModuleFormatError):
    """Raised when the input ends before a fixed-size field is complete."""

    def __init__(self, field: str, wanted: int, available: int, offset: Optional[int] = None):
        self.field = field
        self.wanted = wanted
        self.available = available
        self.offset = offset
        where = f" at offset 0x{offset:X}" if offset is not None else ""
        super().__init__(
            f"Truncated input reading {field}{where}: need {wanted} bytes, got {available}"
        )


class InvalidSampleRange(ModuleFormatError):
    """Raised when a sample's end offset lies before its start offset."""

    pass


class CapacityExceeded(ModuleFormatError):
    """Raised when a count does not fit the fixed-size table that stores it."""

    pass


def validate_byte(value: int, name: str = "value") -> None:
    """
    Validate that a value fits in one unsigned byte (0-255).

    Args:
        value: The value to validate
        name: Name of the value for error messages

    Raises:
        ValueError: If value is out of range
    """
    if not 0 <= value <= 0xFF:
        raise ValueError(f"{name} must be 0-255, got {value}")


def validate_sample_range(start: int, end: int, name: str = "sample") -> int:
    """
    Validate a sample's data bounds.

    Args:
        start: Start offset of the sample data
        end: End offset (exclusive) of the sample data
        name: Sample name for error messages

    Returns:
        The sample length (end - start)

    Raises:
        InvalidSampleRange: If end < start
    """
    if end < start:
        raise InvalidSampleRange(f"{name}: end offset {end} is before start offset {start}")
    return end - start


def validate_count(count: int, low: int, high: int, name: str) -> None:
    """
    Validate that a count fits the capacity of its on-disk table.

    Args:
        count: The count to check
        low: Smallest storable count
        high: Largest storable count
        name: Name of the count for error messages

    Raises:
        CapacityExceeded: If count is outside low..high
    """
    if not low <= count <= high:
        raise CapacityExceeded(f"{name} must be {low}-{high}, got {count}")
