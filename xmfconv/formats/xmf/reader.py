"""
XMF file reader.

XMF File Structure (all integers little-endian):
    Offset  Size        Description
    0x0000  1           Version
    0x0001  256 * 16    Sample registry (empty slots have zero length)
    0x1001  256         Played-section list, terminated by 0xFF
    0x1101  1           Sample count - 1
    0x1102  1           Section count - 1
    0x1103  samples     Control flags, one per sample column
    ...     sections * 64 * samples * 6
                        Section instructions
    ...                 PCM data of every non-empty registry slot

Registry slot (16 bytes):
    0   3   Playback shift
    3   3   Start shift
    6   3   Start offset
    9   3   End offset + 1
    12  1   Param 0 (volume)
    13  1   GUS voice control flags
    14  2   Frequency

Instruction (6 bytes):
    note, sample number, func1, func2, func2 param, func1 param
"""

import io
import logging
from pathlib import Path
from typing import BinaryIO, List, Union

from xmfconv.models.xmf import (
    REGISTRY_SLOTS,
    ROWS_PER_SECTION,
    SECTION_END,
    SECTION_INDEX_SLOTS,
    Instruction,
    InstructionRow,
    InstructionSection,
    SampleRegistry,
    XMFModule,
)
from xmfconv.utils.binary_io import ByteReader

logger = logging.getLogger("xmfconv.formats.xmf")


class XMFReader:
    """
    Reader for XMF module files.

    Example:
        module = XMFReader.read("MAIN1.XMF")
        print(f"{len(module.samples)} samples, {module.section_count} sections")
    """

    OFFSET_SIZE = 3
    REGISTRY_ENTRY_SIZE = 16
    INSTRUCTION_SIZE = 6

    # Bytes before the control flags: version, registry, section list, counts
    FIXED_HEADER_SIZE = 1 + REGISTRY_SLOTS * REGISTRY_ENTRY_SIZE + SECTION_INDEX_SLOTS + 2

    def __init__(self):
        self._reader: ByteReader = ByteReader(io.BytesIO())

    @classmethod
    def read(cls, filepath: Union[str, Path]) -> XMFModule:
        """
        Read an XMF file and return an XMFModule.

        Args:
            filepath: Path to .XMF file

        Returns:
            Parsed XMFModule
        """
        reader = cls()
        return reader.parse_file(filepath)

    def parse_file(self, filepath: Union[str, Path]) -> XMFModule:
        filepath = Path(filepath)

        if not filepath.exists():
            raise FileNotFoundError(f"File not found: {filepath}")

        with open(filepath, "rb") as f:
            return self.parse_stream(f)

    def parse_bytes(self, data: bytes) -> XMFModule:
        return self.parse_stream(io.BytesIO(data))

    def parse_stream(self, stream: BinaryIO) -> XMFModule:
        """
        Parse an XMF module from a binary stream.

        Args:
            stream: Stream positioned at the start of the module

        Returns:
            Parsed XMFModule

        Raises:
            TruncatedInput: If the stream ends inside a field
        """
        self._reader = ByteReader(stream)
        r = self._reader
        module = XMFModule()

        module.version = r.read_u8("version")
        module.samples = self._read_registry()
        module.section_indexes = self._read_section_indexes()
        module.sample_count = r.read_u8("sample count") + 1
        module.section_count = r.read_u8("section count") + 1
        module.control_flags = list(r.read_bytes(module.sample_count, "control flags"))
        module.sections = [
            self._read_section(index, module.sample_count)
            for index in range(module.section_count)
        ]

        for number, sample in enumerate(module.samples, start=1):
            sample.data = r.read_bytes(sample.length, f"sample {number} data")

        logger.debug(
            "Read XMF v%d: %d samples, %d columns, %d sections, %d played, %d bytes",
            module.version,
            len(module.samples),
            module.sample_count,
            module.section_count,
            len(module.section_indexes),
            r.position,
        )
        return module

    def _read_registry(self) -> List[SampleRegistry]:
        """Read all registry slots, keeping the ones with a positive length."""
        r = self._reader
        samples = []

        for slot in range(REGISTRY_SLOTS):
            field = f"registry slot {slot}"
            entry = SampleRegistry(
                playback_shift=r.read_uint(self.OFFSET_SIZE, field),
                start_shift=r.read_uint(self.OFFSET_SIZE, field),
                start_offset=r.read_uint(self.OFFSET_SIZE, field),
                end_offset_plus1=r.read_uint(self.OFFSET_SIZE, field),
                param0=r.read_u8(field),
                voice_control_flags=r.read_u8(field),
                frequency=r.read_u16(field),
            )
            if entry.length > 0:
                samples.append(entry)

        return samples

    def _read_section_indexes(self) -> List[int]:
        """
        Read the played-section list.

        Indexes are collected up to the first 0xFF, but all 256 bytes are
        consumed; whatever follows the terminator is ignored.
        """
        raw = self._reader.read_bytes(SECTION_INDEX_SLOTS, "section indexes")
        end = raw.find(SECTION_END)
        return list(raw if end < 0 else raw[:end])

    def _read_section(self, index: int, columns: int) -> InstructionSection:
        """Read one section of 64 rows."""
        r = self._reader
        field = f"section {index}"
        section = InstructionSection()

        for _ in range(ROWS_PER_SECTION):
            row = InstructionRow()
            for _ in range(columns):
                note, sample, func1, func2, func2_param, func1_param = r.read_bytes(
                    self.INSTRUCTION_SIZE, field
                )
                row.columns.append(
                    Instruction(
                        note=note,
                        sample_number=sample,
                        func1=func1,
                        func2=func2,
                        func2_param=func2_param,
                        func1_param=func1_param,
                    )
                )
            section.rows.append(row)

        return section

    @classmethod
    def can_read(cls, filepath: Union[str, Path]) -> bool:
        """
        Check if a file could be an XMF module.

        XMF has no magic, so this checks that the file is large enough to
        hold the header and the section matrix it declares.

        Args:
            filepath: Path to check

        Returns:
            True if the file size is consistent with an XMF module
        """
        filepath = Path(filepath)

        if not filepath.is_file():
            return False

        size = filepath.stat().st_size
        if size < cls.FIXED_HEADER_SIZE:
            return False

        with open(filepath, "rb") as f:
            f.seek(cls.FIXED_HEADER_SIZE - 2)
            counts = f.read(2)

        samples = counts[0] + 1
        sections = counts[1] + 1
        needed = (
            cls.FIXED_HEADER_SIZE
            + samples
            + sections * ROWS_PER_SECTION * samples * cls.INSTRUCTION_SIZE
        )
        return size >= needed
