"""
UltraTracker (ULT) module data model.
"""

from dataclasses import dataclass, field
from typing import List

ROWS_PER_PATTERN = 64
ORDER_TABLE_SIZE = 256
UNUSED_ORDER = 0xFF


@dataclass(frozen=True)
class ULTCell:
    """
    One note/instrument/effect record of a ULT track.

    Stored as 5 bytes: note, sample, effects, param2, param1. The effects byte
    holds two effect codes, effect 1 in the high nibble and effect 2 in the
    low nibble. The parameter of the second effect is stored first.
    """

    note: int = 0
    sample: int = 0
    effects: int = 0
    param2: int = 0
    param1: int = 0

    @property
    def effect1(self) -> int:
        return self.effects >> 4

    @property
    def effect2(self) -> int:
        return self.effects & 0x0F

    @property
    def is_empty(self) -> bool:
        return not (self.note or self.sample or self.effects or self.param1 or self.param2)

    def to_bytes(self) -> bytes:
        return bytes([self.note, self.sample, self.effects, self.param2, self.param1])

    @classmethod
    def from_bytes(cls, data: bytes) -> "ULTCell":
        return cls(data[0], data[1], data[2], data[3], data[4])

    @classmethod
    def from_effects(
        cls, note: int, sample: int, effect1: int, param1: int, effect2: int, param2: int
    ) -> "ULTCell":
        """
        Build a cell from separate effect codes.

        Effect codes must fit in a nibble (0-15).
        """
        if not (0 <= effect1 <= 0x0F and 0 <= effect2 <= 0x0F):
            raise ValueError(f"Effect codes must be 0-15, got {effect1:#x} and {effect2:#x}")
        return cls(note, sample, (effect1 << 4) | effect2, param2, param1)


EMPTY_CELL = ULTCell()


@dataclass
class ULTSample:
    """
    ULT sample descriptor with its PCM payload.

    Attributes:
        name: Display name (32 characters on disk)
        dos_name: Short file name (12 characters on disk)
        loop_start: Loop start
        loop_end: Loop end
        size_start: Offset of the first sample byte
        size_end: Offset past the last sample byte
        volume: Default volume
        flags: Combined bidirectional/loop flags
        frequency: Playback frequency in Hz
        finetune: Finetune setting
        data: Raw signed 8-bit PCM, size_end - size_start bytes
    """

    name: str = ""
    dos_name: str = ""
    loop_start: int = 0
    loop_end: int = 0
    size_start: int = 0
    size_end: int = 0
    volume: int = 0
    flags: int = 0
    frequency: int = 0
    finetune: int = 0
    data: bytes = field(default=b"", repr=False)

    @property
    def length(self) -> int:
        """Declared sample length in bytes."""
        return self.size_end - self.size_start


@dataclass
class ULTModule:
    """
    Complete ULT module.

    Track data is kept decoded: one list of cells per track, each holding
    pattern_count * 64 cells, pattern-major.

    Attributes:
        magic: File magic ("MAS_UTrack_")
        version: Four-character version tag ("V004")
        title: Song title (32 characters on disk)
        texts: Free-text lines (32 characters each on disk)
        samples: Sample descriptors in file order
        pattern_orders: 256-entry order table, 0xFF marks unused slots
        track_count: Number of tracks (channels)
        pattern_count: Number of patterns
        track_pans: One pan value per track
        track_data: Decoded cells per track
    """

    MAGIC = "MAS_UTrack_"
    VERSION = "V004"

    magic: str = MAGIC
    version: str = VERSION
    title: str = ""
    texts: List[str] = field(default_factory=list)
    samples: List[ULTSample] = field(default_factory=list)
    pattern_orders: List[int] = field(default_factory=lambda: [UNUSED_ORDER] * ORDER_TABLE_SIZE)
    track_count: int = 1
    pattern_count: int = 1
    track_pans: List[int] = field(default_factory=list)
    track_data: List[List[ULTCell]] = field(default_factory=list, repr=False)

    @property
    def cell_count(self) -> int:
        """Number of cells in each track."""
        return self.pattern_count * ROWS_PER_PATTERN

    @property
    def active_patterns(self) -> int:
        """Number of used order slots."""
        return sum(1 for order in self.pattern_orders if order != UNUSED_ORDER)

    def reset_track_data(self) -> None:
        """Replace all track data with empty cells."""
        self.track_data = [[EMPTY_CELL] * self.cell_count for _ in range(self.track_count)]

    def get_cell(self, track: int, pattern: int, row: int) -> ULTCell:
        return self.track_data[track][pattern * ROWS_PER_PATTERN + row]

    def set_cell(self, track: int, pattern: int, row: int, cell: ULTCell) -> None:
        self.track_data[track][pattern * ROWS_PER_PATTERN + row] = cell

    def validate(self) -> List[str]:
        """
        Validate module structure.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if len(self.pattern_orders) != ORDER_TABLE_SIZE:
            errors.append(
                f"Order table has {len(self.pattern_orders)} entries (need {ORDER_TABLE_SIZE})"
            )

        if len(self.track_pans) != self.track_count:
            errors.append(f"{len(self.track_pans)} pan values for {self.track_count} tracks")

        if len(self.track_data) != self.track_count:
            errors.append(f"Track data for {len(self.track_data)} of {self.track_count} tracks")

        for track, cells in enumerate(self.track_data):
            if len(cells) != self.cell_count:
                errors.append(f"Track {track} has {len(cells)} cells (need {self.cell_count})")

        for number, sample in enumerate(self.samples, start=1):
            if sample.length < 0:
                errors.append(f"Sample {number} has negative length {sample.length}")
            elif len(sample.data) != sample.length:
                errors.append(
                    f"Sample {number} has {len(sample.data)} data bytes "
                    f"(declared {sample.length})"
                )

        return errors

    def __repr__(self) -> str:
        return (
            f"ULTModule(title={self.title.rstrip()!r}, samples={len(self.samples)}, "
            f"tracks={self.track_count}, patterns={self.pattern_count})"
        )
