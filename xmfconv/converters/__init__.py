"""
Module converters for XMF -> ULT conversion.

Example:
    from xmfconv.converters import convert_xmf_to_ult, convert_directory

    # Convert one module (writes MAIN1.XMF.ULT)
    convert_xmf_to_ult("MAIN1.XMF")

    # Convert every module in a directory
    results = convert_directory("music/")
"""

from xmfconv.converters.batch import ConversionResult, convert_directory, find_module_files
from xmfconv.converters.xmf_to_ult import (
    XMFToULTConverter,
    convert_xmf_to_ult,
    remap_effects,
)

__all__ = [
    "XMFToULTConverter",
    "convert_xmf_to_ult",
    "remap_effects",
    "ConversionResult",
    "convert_directory",
    "find_module_files",
]
