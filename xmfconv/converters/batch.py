"""
Batch conversion of every XMF module in a directory.

Each file is loaded, converted and saved on its own. A file that fails is
logged and recorded in the results; the remaining files are still processed.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from xmfconv.converters.xmf_to_ult import XMFToULTConverter, default_output_path
from xmfconv.utils.validation import ModuleFormatError

logger = logging.getLogger("xmfconv.batch")

XMF_EXTENSION = ".XMF"


@dataclass
class ConversionResult:
    """Outcome of converting one file."""

    source: Path
    output: Optional[Path] = None
    success: bool = False
    error: str = ""


def find_module_files(directory: Union[str, Path], extension: str = XMF_EXTENSION) -> List[Path]:
    """
    List files in a directory with the given extension.

    Args:
        directory: Directory to scan (not recursive)
        extension: File extension, matched case-insensitively

    Returns:
        Sorted list of matching files
    """
    directory = Path(directory)

    if not directory.is_dir():
        raise NotADirectoryError(f"Not a directory: {directory}")

    return sorted(
        path
        for path in directory.iterdir()
        if path.is_file() and path.suffix.upper() == extension.upper()
    )


def convert_file(
    source: Path,
    output_dir: Optional[Path] = None,
    converter: Optional[XMFToULTConverter] = None,
    compress: bool = False,
) -> ConversionResult:
    """
    Convert one file, capturing any failure in the result.

    Args:
        source: XMF file
        output_dir: Directory for the output (default: next to the source)
        converter: Converter to use
        compress: Coalesce runs of identical cells in track data

    Returns:
        ConversionResult for the file
    """
    converter = converter or XMFToULTConverter()
    output = default_output_path(source)
    if output_dir is not None:
        output = Path(output_dir) / output.name

    result = ConversionResult(source=source, output=output)

    try:
        converter.convert_and_save(source, output, compress=compress)
    except (ModuleFormatError, OSError) as e:
        logger.error("Converting %s failed: %s", source.name, e)
        result.error = str(e)
        return result

    logger.info("Converted %s -> %s", source.name, output.name)
    result.success = True
    return result


def convert_directory(
    directory: Union[str, Path],
    output_dir: Optional[Union[str, Path]] = None,
    pans: Optional[Sequence[int]] = None,
    compress: bool = False,
) -> List[ConversionResult]:
    """
    Convert every XMF file in a directory to ULT.

    Args:
        directory: Directory containing .XMF files
        output_dir: Directory for the outputs (default: next to each source)
        pans: Pan values per track
        compress: Coalesce runs of identical cells in track data

    Returns:
        One ConversionResult per file found
    """
    files = find_module_files(directory)
    if not files:
        logger.warning("No %s files found in %s", XMF_EXTENSION, directory)

    converter = XMFToULTConverter(pans)
    out = Path(output_dir) if output_dir is not None else None

    return [convert_file(source, out, converter, compress) for source in files]
