"""
XMF to ULT format converter.

Converts Imperium Galactica XMF modules to UltraTracker (V004) modules.

The conversion process:
1. Read the XMF module
2. Copy every registry sample into a ULT sample descriptor
3. Copy the played-section list into the ULT order table
4. Translate every section cell into a ULT cell, remapping effects
5. Write the ULT file

XMF uses FastTracker II effect numbering. The one effect ULT cannot express
is Set Global Volume (0x10). It is removed from the cell, and its value is
folded into later Set Volume (0x0C) commands on the same track:

    volume' = round(volume * global_volume / 15)

Each track keeps its own global volume, starting at 0, carried across
sections in the order they are stored.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Set, Tuple, Union

from xmfconv.formats.ult.writer import ULTWriter
from xmfconv.formats.xmf.reader import XMFReader
from xmfconv.models.ult import ORDER_TABLE_SIZE, UNUSED_ORDER, ULTCell, ULTModule, ULTSample
from xmfconv.models.xmf import InstructionSection, XMFModule
from xmfconv.utils.validation import CapacityExceeded

logger = logging.getLogger("xmfconv.converters")

# FastTracker II effect codes used by XMF
SET_VOLUME = 0x0C
SET_GLOBAL_VOLUME = 0x10
NO_EFFECT = 0x00

MAX_EFFECT = 0x0F
MAX_TRACKS = 256
MAX_PATTERNS = 256

SONG_TEXTS = ["Converted with xmfconv", "Open Imperium Galactica Project"]

# ULT pan nibbles (0 = left, 15 = right) in left/right/right/left order
DEFAULT_TRACK_PANS = [(0x03, 0x0C, 0x0C, 0x03)[i % 4] for i in range(MAX_TRACKS)]


def remap_effect(code: int, param: int, global_volume: int) -> Tuple[int, int, int]:
    """
    Remap one XMF effect for ULT.

    Args:
        code: XMF effect code
        param: Effect parameter
        global_volume: Current global volume of the track

    Returns:
        Tuple of (code, param, global_volume) after the remap
    """
    if code == SET_GLOBAL_VOLUME:
        return NO_EFFECT, 0, param

    if code == SET_VOLUME:
        return code, min(0xFF, round(param * global_volume / 15)), global_volume

    return code, param, global_volume


@dataclass
class RemapResult:
    """
    Output of the effect remap fold.

    Attributes:
        track_data: ULT cells per track, pattern-major
        global_volume: Global volume of each track after the last row
        unsupported_effects: Effect codes too large for a ULT effect nibble
    """

    track_data: List[List[ULTCell]] = field(default_factory=list)
    global_volume: List[int] = field(default_factory=list)
    unsupported_effects: Set[int] = field(default_factory=set)


def remap_effects(sections: Sequence[InstructionSection], track_count: int) -> RemapResult:
    """
    Translate XMF sections into ULT track data.

    Folds over (section, row, column) in stored order. Column n of every row
    becomes track n. Both effect slots of an instruction are remapped in
    turn against the same per-track global volume.

    Args:
        sections: XMF sections in stored order
        track_count: Number of tracks (XMF sample columns)

    Returns:
        RemapResult with the cells and the final per-track state
    """
    result = RemapResult(
        track_data=[[] for _ in range(track_count)],
        global_volume=[0] * track_count,
    )

    for section in sections:
        for row in section.rows:
            for track, instr in enumerate(row.columns):
                volume = result.global_volume[track]
                func1, param1, volume = remap_effect(instr.func1, instr.func1_param, volume)
                func2, param2, volume = remap_effect(instr.func2, instr.func2_param, volume)
                result.global_volume[track] = volume

                for code in (func1, func2):
                    if code > MAX_EFFECT:
                        result.unsupported_effects.add(code)

                result.track_data[track].append(
                    ULTCell.from_effects(
                        instr.note,
                        instr.sample_number,
                        func1 & MAX_EFFECT,
                        param1,
                        func2 & MAX_EFFECT,
                        param2,
                    )
                )

    return result


class XMFToULTConverter:
    """
    Converter from XMF modules to ULT modules.

    Attributes:
        pans: Pan source; the first track_count entries become the ULT pan table
    """

    def __init__(self, pans: Optional[Sequence[int]] = None):
        """
        Initialize converter.

        Args:
            pans: Pan values per track. If None, uses DEFAULT_TRACK_PANS.
        """
        self.pans = list(pans) if pans is not None else list(DEFAULT_TRACK_PANS)

    def convert(self, source_path: Union[str, Path]) -> ULTModule:
        """
        Convert an XMF file to a ULT module.

        Args:
            source_path: Path to .XMF file

        Returns:
            Converted ULTModule, titled with the source file name
        """
        source_path = Path(source_path)
        xmf = XMFReader.read(source_path)
        return self.convert_module(xmf, source_path.name)

    def convert_bytes(self, xmf_data: bytes, title: str = "") -> ULTModule:
        """
        Convert XMF bytes to a ULT module.

        Args:
            xmf_data: Raw XMF file data
            title: Title of the ULT module

        Returns:
            Converted ULTModule
        """
        xmf = XMFReader().parse_bytes(xmf_data)
        return self.convert_module(xmf, title)

    def convert_module(self, xmf: XMFModule, title: str = "") -> ULTModule:
        """
        Build a ULT module from a loaded XMF module.

        Args:
            xmf: Loaded XMF module
            title: Title of the ULT module

        Returns:
            Converted ULTModule

        Raises:
            CapacityExceeded: If tracks, patterns or played sections do not
                fit the ULT tables, or the pan source is too short
        """
        self._check_capacity(xmf)

        ult = ULTModule(title=title, texts=list(SONG_TEXTS))
        ult.samples = [
            ULTSample(
                name=f"Sample {number}",
                dos_name=f"Sample{number}.RAW",
                loop_start=entry.playback_shift,
                loop_end=entry.start_shift,
                size_start=entry.start_offset,
                size_end=entry.end_offset_plus1,
                volume=entry.param0,
                flags=entry.voice_control_flags,
                frequency=entry.frequency,
                finetune=0,
                data=entry.data,
            )
            for number, entry in enumerate(xmf.samples, start=1)
        ]

        ult.pattern_orders = list(xmf.section_indexes) + [UNUSED_ORDER] * (
            ORDER_TABLE_SIZE - len(xmf.section_indexes)
        )
        ult.track_count = xmf.sample_count
        ult.pattern_count = xmf.section_count
        ult.track_pans = self.pans[: ult.track_count]

        remapped = remap_effects(xmf.sections, ult.track_count)
        ult.track_data = remapped.track_data

        if remapped.unsupported_effects:
            logger.warning(
                "%s: effects %s do not fit a ULT effect nibble and were truncated",
                title or "module",
                ", ".join(f"0x{code:02X}" for code in sorted(remapped.unsupported_effects)),
            )

        logger.debug(
            "Converted %s: %d samples, %d tracks, %d patterns, %d orders",
            title or "module",
            len(ult.samples),
            ult.track_count,
            ult.pattern_count,
            ult.active_patterns,
        )
        return ult

    def _check_capacity(self, xmf: XMFModule) -> None:
        """Check that the XMF module fits the fixed ULT tables."""
        if xmf.sample_count > MAX_TRACKS:
            raise CapacityExceeded(f"{xmf.sample_count} tracks exceed the limit of {MAX_TRACKS}")

        if xmf.section_count > MAX_PATTERNS:
            raise CapacityExceeded(
                f"{xmf.section_count} patterns exceed the limit of {MAX_PATTERNS}"
            )

        if len(xmf.section_indexes) > ORDER_TABLE_SIZE:
            raise CapacityExceeded(
                f"{len(xmf.section_indexes)} played sections exceed the "
                f"{ORDER_TABLE_SIZE}-entry order table"
            )

        if len(self.pans) < xmf.sample_count:
            raise CapacityExceeded(
                f"Pan table has {len(self.pans)} entries for {xmf.sample_count} tracks"
            )

    def convert_and_save(
        self,
        source_path: Union[str, Path],
        output_path: Union[str, Path],
        compress: bool = False,
    ) -> None:
        """
        Convert an XMF file and save it as ULT.

        Args:
            source_path: Path to source .XMF file
            output_path: Path for output .ULT file
            compress: Coalesce runs of identical cells in track data
        """
        ult = self.convert(source_path)
        ULTWriter.write(ult, output_path, compress=compress)


def default_output_path(source_path: Union[str, Path]) -> Path:
    """Output path for a converted file: the source name with .ULT appended."""
    source_path = Path(source_path)
    return source_path.with_name(source_path.name + ".ULT")


def convert_xmf_to_ult(
    source_path: Union[str, Path],
    output_path: Optional[Union[str, Path]] = None,
    pans: Optional[Sequence[int]] = None,
    compress: bool = False,
) -> Path:
    """
    Convert an XMF file to ULT format.

    Convenience function for simple conversion.

    Args:
        source_path: Path to source .XMF file
        output_path: Path for output .ULT file (default: source name + ".ULT")
        pans: Pan values per track
        compress: Coalesce runs of identical cells in track data

    Returns:
        Path of the written file

    Example:
        convert_xmf_to_ult("MAIN1.XMF")  # writes MAIN1.XMF.ULT
    """
    output_path = Path(output_path) if output_path else default_output_path(source_path)
    converter = XMFToULTConverter(pans)
    converter.convert_and_save(source_path, output_path, compress=compress)
    return output_path
