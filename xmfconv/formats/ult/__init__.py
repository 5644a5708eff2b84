"""ULT format handlers."""

from xmfconv.formats.ult.reader import ULTReader
from xmfconv.formats.ult.writer import ULTWriter

__all__ = ["ULTReader", "ULTWriter"]
