"""
XMF module data model.

XMF is the music format of Imperium Galactica. It mirrors the layout the game
uploads into Gravis Ultrasound memory: a 256-slot sample registry of GUS
memory offsets, a played-section list and a matrix of reusable sections.
"""

from dataclasses import dataclass, field
from enum import IntFlag
from typing import List

ROWS_PER_SECTION = 64
REGISTRY_SLOTS = 256
SECTION_INDEX_SLOTS = 256
SECTION_END = 0xFF


class VoiceControlFlags(IntFlag):
    """GUS voice control register bits stored with each registry entry."""

    VOICE_STOPPED = 0x01
    STOP_VOICE = 0x02
    DATA_16_BIT = 0x04
    LOOP_ENABLE = 0x08
    BIDIRECTIONAL = 0x10
    IRQ_ENABLE = 0x20
    DECREASING = 0x40
    IRQ_PENDING = 0x80


@dataclass
class SampleRegistry:
    """
    One sample registry entry.

    Attributes:
        playback_shift: Playback start relative to start_offset
        start_shift: Shift applied to start_offset
        start_offset: Where the sample is loaded in GUS memory
        end_offset_plus1: Where the sample ends in GUS memory (exclusive)
        param0: Default volume
        voice_control_flags: GUS voice control bits
        frequency: Playback frequency in Hz
        data: Raw signed 8-bit PCM
    """

    playback_shift: int = 0
    start_shift: int = 0
    start_offset: int = 0
    end_offset_plus1: int = 0
    param0: int = 0
    voice_control_flags: int = 0
    frequency: int = 0
    data: bytes = field(default=b"", repr=False)

    @property
    def length(self) -> int:
        return self.end_offset_plus1 - self.start_offset

    @property
    def flags(self) -> VoiceControlFlags:
        return VoiceControlFlags(self.voice_control_flags)


@dataclass
class Instruction:
    """
    One cell of a section row.

    Field order matches the file: the parameters come after both effect codes
    and in reverse order (func2_param before func1_param).
    """

    note: int = 0
    sample_number: int = 0
    func1: int = 0
    func2: int = 0
    func2_param: int = 0
    func1_param: int = 0

    @property
    def is_empty(self) -> bool:
        return not (
            self.note
            or self.sample_number
            or self.func1
            or self.func1_param
            or self.func2
            or self.func2_param
        )


@dataclass
class InstructionRow:
    """One row of a section: one instruction per sample column."""

    columns: List[Instruction] = field(default_factory=list)


@dataclass
class InstructionSection:
    """A reusable block of 64 rows."""

    rows: List[InstructionRow] = field(default_factory=list)


@dataclass
class XMFModule:
    """
    Complete XMF module.

    Attributes:
        version: Format version byte
        samples: Registry entries with a positive length, in slot order
        section_indexes: Played sections in order (sentinel removed)
        sample_count: Number of sample columns (tracks)
        section_count: Number of stored sections
        control_flags: One byte per sample column
        sections: Stored sections
    """

    version: int = 0
    samples: List[SampleRegistry] = field(default_factory=list)
    section_indexes: List[int] = field(default_factory=list)
    sample_count: int = 1
    section_count: int = 1
    control_flags: List[int] = field(default_factory=list)
    sections: List[InstructionSection] = field(default_factory=list, repr=False)

    def get_instruction(self, section: int, row: int, column: int) -> Instruction:
        return self.sections[section].rows[row].columns[column]

    @classmethod
    def create_empty(cls, sample_count: int = 1, section_count: int = 1) -> "XMFModule":
        """
        Create a module with empty sections.

        Args:
            sample_count: Number of sample columns
            section_count: Number of sections

        Returns:
            New XMFModule instance
        """
        sections = [
            InstructionSection(
                rows=[
                    InstructionRow(columns=[Instruction() for _ in range(sample_count)])
                    for _ in range(ROWS_PER_SECTION)
                ]
            )
            for _ in range(section_count)
        ]
        return cls(
            sample_count=sample_count,
            section_count=section_count,
            control_flags=[0] * sample_count,
            sections=sections,
        )

    def __repr__(self) -> str:
        return (
            f"XMFModule(version={self.version}, samples={len(self.samples)}, "
            f"columns={self.sample_count}, sections={self.section_count}, "
            f"played={len(self.section_indexes)})"
        )
