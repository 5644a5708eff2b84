"""Format handlers for ULT and XMF."""

from xmfconv.formats.ult import ULTReader, ULTWriter
from xmfconv.formats.xmf import XMFReader

__all__ = ["ULTReader", "ULTWriter", "XMFReader"]
