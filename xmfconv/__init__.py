"""
xmfconv - Converter for Imperium Galactica XMF music modules.

This library provides tools to:
- Read XMF modules (.XMF)
- Read and write UltraTracker modules (.ULT)
- Convert XMF modules to ULT
- Export module samples as WAV

Example usage:
    from xmfconv import XMFReader, ULTWriter
    from xmfconv.converters import XMFToULTConverter

    # Read XMF module
    xmf = XMFReader.read("MAIN1.XMF")

    # Convert and write to ULT format
    ult = XMFToULTConverter().convert_module(xmf, "MAIN1.XMF")
    ULTWriter.write(ult, "MAIN1.XMF.ULT")
"""

__version__ = "0.1.0"
__author__ = "xmfconv Contributors"

from xmfconv.formats.ult.reader import ULTReader
from xmfconv.formats.ult.writer import ULTWriter
from xmfconv.formats.xmf.reader import XMFReader
from xmfconv.models.ult import ULTCell, ULTModule, ULTSample
from xmfconv.models.xmf import XMFModule
from xmfconv.utils.validation import (
    CapacityExceeded,
    InvalidSampleRange,
    ModuleFormatError,
    TruncatedInput,
)

__all__ = [
    "ULTReader",
    "ULTWriter",
    "XMFReader",
    "ULTCell",
    "ULTModule",
    "ULTSample",
    "XMFModule",
    "ModuleFormatError",
    "TruncatedInput",
    "InvalidSampleRange",
    "CapacityExceeded",
]
