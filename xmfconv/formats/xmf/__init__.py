"""XMF format handlers."""

from xmfconv.formats.xmf.reader import XMFReader

__all__ = ["XMFReader"]
