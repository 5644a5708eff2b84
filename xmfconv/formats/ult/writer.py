"""
UltraTracker ULT file writer.

Writes ULTModule objects in the V004 layout read by ULTReader.
"""

import io
import logging
import os
import tempfile
from pathlib import Path
from typing import BinaryIO, Union

from xmfconv.models.ult import ORDER_TABLE_SIZE, ULTModule, ULTSample
from xmfconv.utils.binary_io import ByteWriter
from xmfconv.utils.rle import encode_track
from xmfconv.utils.validation import (
    InvalidSampleRange,
    CapacityExceeded,
    validate_count,
    validate_sample_range,
)

logger = logging.getLogger("xmfconv.formats.ult")


class ULTWriter:
    """
    Writer for UltraTracker module files.

    Example:
        ULTWriter.write(module, "song.ult")
    """

    MAGIC_SIZE = 11
    VERSION_SIZE = 4
    TITLE_SIZE = 32
    TEXT_SIZE = 32
    SAMPLE_NAME_SIZE = 32
    SAMPLE_DOS_NAME_SIZE = 12

    MAX_TEXTS = 0xFF
    MAX_SAMPLES = 0xFF
    MAX_TRACKS = 256
    MAX_PATTERNS = 256

    def __init__(self, compress: bool = False):
        """
        Initialize writer.

        Args:
            compress: Coalesce runs of identical cells in track data
        """
        self.compress = compress

    @classmethod
    def write(
        cls, module: ULTModule, filepath: Union[str, Path], compress: bool = False
    ) -> None:
        """
        Write a ULTModule to a file.

        The module is written to a temporary file next to the destination and
        renamed into place once complete, so a failed write leaves no partial
        output behind.

        Args:
            module: Module to write
            filepath: Output file path
            compress: Coalesce runs of identical cells in track data
        """
        writer = cls(compress=compress)
        data = writer.to_bytes(module)

        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        fd, temp_name = tempfile.mkstemp(
            prefix=f".{filepath.name}.", suffix=".tmp", dir=filepath.parent
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(temp_name, filepath)
        except BaseException:
            os.unlink(temp_name)
            raise

        logger.debug("Wrote %s (%d bytes)", filepath, len(data))

    def to_bytes(self, module: ULTModule) -> bytes:
        """
        Convert a ULTModule to ULT binary format.

        Args:
            module: Module to convert

        Returns:
            Complete ULT file data

        Raises:
            CapacityExceeded: If a count does not fit its on-disk field
            InvalidSampleRange: If a sample range or payload is inconsistent
        """
        buffer = io.BytesIO()
        self.write_stream(module, buffer)
        return buffer.getvalue()

    def write_stream(self, module: ULTModule, stream: BinaryIO) -> None:
        """
        Serialize a ULTModule into a binary stream.

        The module is checked completely before the first byte is written.
        """
        self._check_module(module)
        w = ByteWriter(stream)

        w.write_text(module.magic, self.MAGIC_SIZE)
        w.write_text(module.version, self.VERSION_SIZE)
        w.write_text(module.title, self.TITLE_SIZE)

        w.write_u8(len(module.texts))
        for text in module.texts:
            w.write_text(text, self.TEXT_SIZE)

        w.write_u8(len(module.samples))
        for sample in module.samples:
            self._write_sample(w, sample)

        w.write_bytes(bytes(module.pattern_orders))
        w.write_u8(module.track_count - 1)
        w.write_u8(module.pattern_count - 1)
        w.write_bytes(bytes(module.track_pans))

        for cells in module.track_data:
            w.write_bytes(encode_track([cell.to_bytes() for cell in cells], self.compress))

        for sample in module.samples:
            w.write_bytes(sample.data)

    def _write_sample(self, w: ByteWriter, sample: ULTSample) -> None:
        """Write one sample descriptor."""
        w.write_text(sample.name, self.SAMPLE_NAME_SIZE)
        w.write_text(sample.dos_name, self.SAMPLE_DOS_NAME_SIZE)
        w.write_u32(sample.loop_start)
        w.write_s32(sample.loop_end)
        w.write_s32(sample.size_start)
        w.write_s32(sample.size_end)
        w.write_u8(sample.volume)
        w.write_u8(sample.flags)
        w.write_u16(sample.frequency)
        w.write_u16(sample.finetune)

    def _check_module(self, module: ULTModule) -> None:
        """Check every count and sample range against the file layout."""
        validate_count(len(module.texts), 0, self.MAX_TEXTS, "Text line count")
        validate_count(len(module.samples), 0, self.MAX_SAMPLES, "Sample count")
        validate_count(module.track_count, 1, self.MAX_TRACKS, "Track count")
        validate_count(module.pattern_count, 1, self.MAX_PATTERNS, "Pattern count")

        if len(module.pattern_orders) != ORDER_TABLE_SIZE:
            raise CapacityExceeded(
                f"Pattern order table has {len(module.pattern_orders)} entries "
                f"(need {ORDER_TABLE_SIZE})"
            )

        if len(module.track_pans) != module.track_count:
            raise CapacityExceeded(
                f"{len(module.track_pans)} pan values for {module.track_count} tracks"
            )

        if len(module.track_data) != module.track_count:
            raise CapacityExceeded(
                f"Track data for {len(module.track_data)} tracks "
                f"(track count is {module.track_count})"
            )

        for track, cells in enumerate(module.track_data):
            if len(cells) != module.cell_count:
                raise CapacityExceeded(
                    f"Track {track} has {len(cells)} cells (need {module.cell_count})"
                )

        for number, sample in enumerate(module.samples, start=1):
            length = validate_sample_range(sample.size_start, sample.size_end, f"Sample {number}")
            if len(sample.data) != length:
                raise InvalidSampleRange(
                    f"Sample {number}: {len(sample.data)} data bytes for declared length {length}"
                )


def create_empty_ult(title: str = "", tracks: int = 4) -> bytes:
    """
    Create an empty one-pattern ULT file.

    Args:
        title: Song title
        tracks: Number of tracks

    Returns:
        ULT file data
    """
    module = ULTModule(title=title, track_count=tracks, track_pans=[0x07] * tracks)
    module.pattern_orders[0] = 0
    module.reset_track_data()
    return ULTWriter().to_bytes(module)
