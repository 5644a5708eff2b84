"""Test configuration and fixtures."""

import struct
from typing import Dict, List, Optional, Sequence, Tuple

import pytest

from xmfconv.models.ult import ULTCell, ULTModule, ULTSample

# (note, sample, func1, func2, func2_param, func1_param) in file order
RawInstruction = Tuple[int, int, int, int, int, int]


def registry_entry(
    start: int,
    end: int,
    playback_shift: int = 0,
    start_shift: int = 0,
    param0: int = 0,
    flags: int = 0,
    frequency: int = 0,
) -> bytes:
    """Build one 16-byte XMF registry slot."""
    entry = b""
    for value in (playback_shift, start_shift, start, end):
        entry += value.to_bytes(3, "little")
    entry += bytes([param0, flags])
    entry += struct.pack("<H", frequency)
    return entry


def build_xmf(
    samples: Sequence[bytes] = (),
    frequencies: Optional[Sequence[int]] = None,
    section_indexes: Sequence[int] = (0,),
    sample_count: int = 1,
    section_count: int = 1,
    cells: Optional[Dict[Tuple[int, int, int], RawInstruction]] = None,
    registry: Optional[List[bytes]] = None,
    index_bytes: Optional[bytes] = None,
    control_flags: Optional[bytes] = None,
    version: int = 1,
) -> bytes:
    """Build a complete XMF file in memory.

    Args:
        samples: PCM payload per sample; registry slots are laid out back to back
        frequencies: Frequency per sample (default 8000)
        section_indexes: Played-section list (0xFF terminator is added)
        sample_count: Number of sample columns
        section_count: Number of sections
        cells: {(section, row, column): raw instruction}
        registry: Explicit list of registry slots (overrides samples layout)
        index_bytes: Explicit 256-byte section list (overrides section_indexes)
        control_flags: Explicit control flag bytes
        version: Version byte

    Returns:
        bytes: Complete XMF file.
    """
    cells = cells or {}
    frequencies = frequencies or [8000] * len(samples)

    buf = bytearray([version])

    if registry is None:
        registry = []
        offset = 0
        for data, frequency in zip(samples, frequencies):
            registry.append(
                registry_entry(offset, offset + len(data), param0=0x40, frequency=frequency)
            )
            offset += len(data)
    for slot in range(256):
        buf += registry[slot] if slot < len(registry) else bytes(16)

    if index_bytes is None:
        index_bytes = bytes(section_indexes) + b"\xff" * (256 - len(section_indexes))
    buf += index_bytes

    buf += bytes([sample_count - 1, section_count - 1])
    buf += control_flags if control_flags is not None else bytes(sample_count)

    for section in range(section_count):
        for row in range(64):
            for column in range(sample_count):
                buf += bytes(cells.get((section, row, column), (0, 0, 0, 0, 0, 0)))

    for data in samples:
        buf += data

    return bytes(buf)


def make_ult_module(tracks: int = 2, patterns: int = 1) -> ULTModule:
    """Build a well-formed ULT module with full-width text fields."""
    module = ULTModule(
        title="Test Song".ljust(32),
        texts=["First line".ljust(32), "Second line".ljust(32)],
        samples=[
            ULTSample(
                name="Kick".ljust(32),
                dos_name="KICK.RAW".ljust(12),
                loop_start=0,
                loop_end=4,
                size_start=0,
                size_end=4,
                volume=0x40,
                flags=0x08,
                frequency=8363,
                finetune=0,
                data=bytes([0x00, 0x7F, 0x80, 0xFF]),
            ),
            ULTSample(
                name="Snare".ljust(32),
                dos_name="SNARE.RAW".ljust(12),
                size_start=4,
                size_end=7,
                volume=0xFF,
                frequency=22050,
                finetune=3,
                data=bytes([0x10, 0x20, 0x30]),
            ),
        ],
        track_count=tracks,
        pattern_count=patterns,
        track_pans=[0x03, 0x0C][:tracks] + [0x07] * max(0, tracks - 2),
    )
    module.pattern_orders[: patterns] = list(range(patterns))
    module.reset_track_data()
    module.set_cell(0, 0, 0, ULTCell(60, 1, 0x0C, 0x00, 0x20))
    module.set_cell(1, 0, 16, ULTCell(48, 2, 0x00, 0x00, 0x00))
    module.set_cell(0, patterns - 1, 63, ULTCell(0xFC, 2, 0x31, 0x05, 0x06))
    return module


@pytest.fixture
def ult_module():
    """Return a small well-formed ULT module."""
    return make_ult_module()


@pytest.fixture
def xmf_data():
    """Return a one-sample, one-section XMF file."""
    return build_xmf(
        samples=[bytes([1, 2, 3, 4])],
        cells={(0, 0, 0): (60, 1, 0, 0, 0, 0)},
    )


@pytest.fixture
def xmf_file(tmp_path, xmf_data):
    """Return path to a one-sample, one-section XMF file."""
    path = tmp_path / "MAIN1.XMF"
    path.write_bytes(xmf_data)
    return path
