"""
UltraTracker track-data run-length codec.

Each ULT track is stored as a stream of 5-byte cell records. A record may be
preceded by a repeat escape:

    FC <count> <b0> <b1> <b2> <b3> <b4>   -> count copies of the cell
    <b0> <b1> <b2> <b3> <b4>              -> one cell (b0 != FC)

A count of 0 is read as 1.

The escape byte is also a legal value for the first cell byte (the note), so
a literal record starting with 0xFC cannot be told apart from an escape. This
is a property of the format; the decoder always reads 0xFC as an escape. The
encoder never writes such a literal: cells whose first byte is 0xFC are
written as an escape with count 1.
"""

import logging
from typing import List, Sequence

from xmfconv.utils.binary_io import ByteReader

logger = logging.getLogger("xmfconv.rle")

CELL_SIZE = 5
REPEAT_MARKER = 0xFC
MAX_RUN = 0xFF


def decode_track(reader: ByteReader, cell_count: int, track: int = 0) -> List[bytes]:
    """
    Decode one track of RLE data.

    Args:
        reader: Reader positioned at the start of the track
        cell_count: Number of cells the track must expand to
        track: Track number, used in log and error messages

    Returns:
        List of exactly cell_count 5-byte cell records

    Raises:
        TruncatedInput: If the stream ends inside the track
    """
    cells: List[bytes] = []
    field = f"track {track} data"

    while len(cells) < cell_count:
        first = reader.read_u8(field)
        count = 1
        if first == REPEAT_MARKER:
            count = reader.read_u8(field) or 1
            first = reader.read_u8(field)
        cell = bytes([first]) + reader.read_bytes(CELL_SIZE - 1, field)

        remaining = cell_count - len(cells)
        if count > remaining:
            logger.warning(
                "Track %d: run of %d cells overshoots track end, clipped to %d",
                track,
                count,
                remaining,
            )
            count = remaining

        cells.extend([cell] * count)

    return cells


def encode_track(cells: Sequence[bytes], compress: bool = False) -> bytes:
    """
    Encode one track of cell records.

    By default every cell is written as a literal record; runs are only
    coalesced into repeat escapes when compress is set.

    Args:
        cells: 5-byte cell records
        compress: Coalesce runs of identical cells

    Returns:
        Encoded track data
    """
    result = bytearray()
    index = 0

    while index < len(cells):
        cell = bytes(cells[index])
        if len(cell) != CELL_SIZE:
            raise ValueError(f"Cell {index} has {len(cell)} bytes (expected {CELL_SIZE})")

        run = 1
        if compress:
            while (
                run < MAX_RUN
                and index + run < len(cells)
                and bytes(cells[index + run]) == cell
            ):
                run += 1

        if run > 1 or cell[0] == REPEAT_MARKER:
            result.append(REPEAT_MARKER)
            result.append(run)
        result.extend(cell)
        index += run

    return bytes(result)
