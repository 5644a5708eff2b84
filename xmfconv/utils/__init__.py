"""Utility functions for xmfconv."""

from xmfconv.utils.binary_io import ByteReader, ByteWriter, encode_text
from xmfconv.utils.rle import decode_track, encode_track
from xmfconv.utils.validation import (
    CapacityExceeded,
    InvalidSampleRange,
    ModuleFormatError,
    TruncatedInput,
)

__all__ = [
    "ByteReader",
    "ByteWriter",
    "encode_text",
    "decode_track",
    "encode_track",
    "ModuleFormatError",
    "TruncatedInput",
    "InvalidSampleRange",
    "CapacityExceeded",
]
