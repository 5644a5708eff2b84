"""
UltraTracker ULT file reader.

ULT File Structure (V004, all integers little-endian):
    Size            Description
    11              Magic "MAS_UTrack_"
    4               Version tag "V004"
    32              Song title
    1               Text line count N
    N * 32          Text lines
    1               Sample count S
    S * 66          Sample descriptors
    256             Pattern order table (0xFF = unused)
    1               Track count - 1
    1               Pattern count - 1
    tracks          Pan value per track
    ...             RLE track data, tracks * patterns * 64 cells
    ...             Sample PCM data in descriptor order
"""

import io
import logging
from pathlib import Path
from typing import BinaryIO, Union

from xmfconv.models.ult import ORDER_TABLE_SIZE, ULTCell, ULTModule, ULTSample
from xmfconv.utils.binary_io import ByteReader
from xmfconv.utils.rle import decode_track
from xmfconv.utils.validation import validate_sample_range

logger = logging.getLogger("xmfconv.formats.ult")


class ULTReader:
    """
    Reader for UltraTracker module files.

    Example:
        module = ULTReader.read("song.ult")
        print(f"Title: {module.title}, tracks: {module.track_count}")
    """

    MAGIC = b"MAS_UTrack_"

    # Fixed field widths
    VERSION_SIZE = 4
    TITLE_SIZE = 32
    TEXT_SIZE = 32
    SAMPLE_NAME_SIZE = 32
    SAMPLE_DOS_NAME_SIZE = 12
    SAMPLE_HEADER_SIZE = 66

    def __init__(self):
        self._reader: ByteReader = ByteReader(io.BytesIO())

    @classmethod
    def read(cls, filepath: Union[str, Path]) -> ULTModule:
        """
        Read a ULT file and return a ULTModule.

        Args:
            filepath: Path to .ULT file

        Returns:
            Parsed ULTModule
        """
        reader = cls()
        return reader.parse_file(filepath)

    def parse_file(self, filepath: Union[str, Path]) -> ULTModule:
        filepath = Path(filepath)

        if not filepath.exists():
            raise FileNotFoundError(f"File not found: {filepath}")

        with open(filepath, "rb") as f:
            return self.parse_stream(f)

    def parse_bytes(self, data: bytes) -> ULTModule:
        return self.parse_stream(io.BytesIO(data))

    def parse_stream(self, stream: BinaryIO) -> ULTModule:
        """
        Parse a ULT module from a binary stream.

        Args:
            stream: Stream positioned at the start of the module

        Returns:
            Parsed ULTModule

        Raises:
            TruncatedInput: If the stream ends inside a field
            InvalidSampleRange: If a sample ends before it starts
        """
        self._reader = ByteReader(stream)
        r = self._reader
        module = ULTModule()

        module.magic = r.read_text(len(self.MAGIC), "magic")
        module.version = r.read_text(self.VERSION_SIZE, "version")
        module.title = r.read_text(self.TITLE_SIZE, "title")

        text_count = r.read_u8("text count")
        module.texts = [r.read_text(self.TEXT_SIZE, f"text line {i}") for i in range(text_count)]

        sample_count = r.read_u8("sample count")
        module.samples = [self._read_sample(i + 1) for i in range(sample_count)]

        module.pattern_orders = list(r.read_bytes(ORDER_TABLE_SIZE, "pattern orders"))
        module.track_count = r.read_u8("track count") + 1
        module.pattern_count = r.read_u8("pattern count") + 1
        module.track_pans = list(r.read_bytes(module.track_count, "track pans"))

        module.track_data = [
            [ULTCell.from_bytes(cell) for cell in decode_track(r, module.cell_count, track)]
            for track in range(module.track_count)
        ]

        for number, sample in enumerate(module.samples, start=1):
            sample.data = r.read_bytes(sample.length, f"sample {number} data")

        logger.debug(
            "Read ULT %r: %d samples, %d tracks, %d patterns, %d bytes",
            module.title.rstrip(),
            len(module.samples),
            module.track_count,
            module.pattern_count,
            r.position,
        )
        return module

    def _read_sample(self, number: int) -> ULTSample:
        """Read one sample descriptor (payload comes later in the file)."""
        r = self._reader
        field = f"sample {number} header"

        sample = ULTSample(
            name=r.read_text(self.SAMPLE_NAME_SIZE, field),
            dos_name=r.read_text(self.SAMPLE_DOS_NAME_SIZE, field),
            loop_start=r.read_u32(field),
            loop_end=r.read_s32(field),
            size_start=r.read_s32(field),
            size_end=r.read_s32(field),
            volume=r.read_u8(field),
            flags=r.read_u8(field),
            frequency=r.read_u16(field),
            finetune=r.read_u16(field),
        )
        validate_sample_range(sample.size_start, sample.size_end, f"Sample {number}")
        return sample

    @classmethod
    def can_read(cls, filepath: Union[str, Path]) -> bool:
        """
        Check if a file looks like a ULT module.

        Args:
            filepath: Path to check

        Returns:
            True if the file starts with the ULT magic
        """
        filepath = Path(filepath)

        if not filepath.is_file():
            return False

        with open(filepath, "rb") as f:
            return f.read(len(cls.MAGIC)) == cls.MAGIC

    @classmethod
    def get_file_info(cls, filepath: Union[str, Path]) -> dict:
        """
        Get basic information about a ULT file without full parsing.

        Args:
            filepath: Path to .ULT file

        Returns:
            Dictionary with file info
        """
        filepath = Path(filepath)

        with open(filepath, "rb") as f:
            data = f.read(len(cls.MAGIC) + cls.VERSION_SIZE + cls.TITLE_SIZE)

        info = {
            "valid": data[: len(cls.MAGIC)] == cls.MAGIC,
            "size": filepath.stat().st_size,
        }

        if len(data) >= len(cls.MAGIC) + cls.VERSION_SIZE:
            info["version"] = data[len(cls.MAGIC) : len(cls.MAGIC) + cls.VERSION_SIZE].decode(
                "latin-1"
            )

        if len(data) == len(cls.MAGIC) + cls.VERSION_SIZE + cls.TITLE_SIZE:
            info["title"] = data[-cls.TITLE_SIZE :].decode("latin-1").rstrip()

        return info
