"""
Text listing of XMF section data.

Renders the played sections row by row, one column per track, the way a
tracker shows them:

    [0001]  |  060 001 [0C(40), 00(00)]  |                            |
"""

from typing import List, Set

from xmfconv.models.xmf import Instruction, VoiceControlFlags, XMFModule

SET_GLOBAL_VOLUME = 0x10
EMPTY_COLUMN = " " * 24


def format_instruction(instr: Instruction) -> str:
    """Format one instruction, or blanks if it is empty."""
    if instr.is_empty:
        return EMPTY_COLUMN
    return (
        f"{instr.note:03d} {instr.sample_number:03d} "
        f"[{instr.func1:02X}({instr.func1_param:02X}), {instr.func2:02X}({instr.func2_param:02X})]"
    )


def global_volume_usage(module: XMFModule) -> List[Set[str]]:
    """
    Collect the distinct Set Global Volume commands of each effect slot.

    Returns:
        Two sets of "10 - PP" strings, for slot 1 and slot 2
    """
    slot1: Set[str] = set()
    slot2: Set[str] = set()

    for section in module.sections:
        for row in section.rows:
            for instr in row.columns:
                if instr.func1 == SET_GLOBAL_VOLUME:
                    slot1.add(f"{instr.func1:02X} - {instr.func1_param:02X}")
                if instr.func2 == SET_GLOBAL_VOLUME:
                    slot2.add(f"{instr.func2:02X} - {instr.func2_param:02X}")

    return [slot1, slot2]


def render_track_listing(module: XMFModule) -> str:
    """
    Render every played section of a module as text.

    Rows are numbered continuously across the played sections. The listing
    ends with the Set Global Volume commands found in each effect slot.

    Args:
        module: Loaded XMF module

    Returns:
        The listing text
    """
    lines = []
    row_number = 1

    for index in module.section_indexes:
        if index >= len(module.sections):
            lines.append(f"[----]  |  missing section {index}")
            continue

        for row in module.sections[index].rows:
            cells = "".join(f"{format_instruction(instr)}  |  " for instr in row.columns)
            lines.append(f"[{row_number:04d}]  |  {cells}".rstrip())
            row_number += 1
        lines.append("")

    lines.append("--")
    for usage in global_volume_usage(module):
        lines.extend(sorted(usage))
        lines.append("--")

    return "\n".join(lines) + "\n"


def describe_voice_flags(flags: int) -> str:
    """
    Describe GUS voice control flags.

    Example:
        >>> describe_voice_flags(0x08)
        ' 8 Bit|Loop|Forward Playback|Increasing'
    """
    flags = VoiceControlFlags(flags)
    parts = [
        "16 Bit" if flags & VoiceControlFlags.DATA_16_BIT else " 8 Bit",
        "Loop" if flags & VoiceControlFlags.LOOP_ENABLE else "Once",
        "BiDi Playback" if flags & VoiceControlFlags.BIDIRECTIONAL else "Forward Playback",
        "Decreasing" if flags & VoiceControlFlags.DECREASING else "Increasing",
    ]
    return "|".join(parts)
