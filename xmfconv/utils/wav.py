"""
Minimal WAV export for raw module sample data.

Module samples are 8-bit signed mono PCM. WAV stores 8-bit audio unsigned,
so every byte is shifted by 128. RIFF chunks must be even sized; odd-length
data gets one silence byte (0x80) appended.
"""

import logging
import struct
from pathlib import Path
from typing import List, Optional, Union

logger = logging.getLogger("xmfconv.wav")

DEFAULT_SAMPLE_RATE = 22050
SILENCE = 0x80


def signed_to_unsigned(data: bytes) -> bytes:
    """Convert 8-bit signed PCM to 8-bit unsigned PCM."""
    return bytes((b + 128) & 0xFF for b in data)


def pcm_to_wav(data: bytes, sample_rate: int = DEFAULT_SAMPLE_RATE) -> bytes:
    """
    Build a complete WAV file from 8-bit signed PCM.

    Args:
        data: Raw signed 8-bit PCM
        sample_rate: Playback rate in Hz

    Returns:
        WAV file contents (44-byte header + even-length data)
    """
    samples = bytearray(signed_to_unsigned(data))
    if len(samples) & 1:
        samples.append(SILENCE)

    header = b"RIFF"
    header += struct.pack("<I", len(samples) + 36)
    header += b"WAVE"
    # fmt chunk: PCM, mono, 8-bit
    header += b"fmt "
    header += struct.pack("<I", 16)
    header += struct.pack("<H", 1)
    header += struct.pack("<H", 1)
    header += struct.pack("<I", sample_rate)
    header += struct.pack("<I", sample_rate)
    header += struct.pack("<H", 1)
    header += struct.pack("<H", 8)
    header += b"data"
    header += struct.pack("<I", len(samples))

    return header + bytes(samples)


def write_wav(
    filepath: Union[str, Path], data: bytes, sample_rate: int = DEFAULT_SAMPLE_RATE
) -> Path:
    """
    Write 8-bit signed PCM to a WAV file.

    Args:
        filepath: Output file path
        data: Raw signed 8-bit PCM
        sample_rate: Playback rate in Hz

    Returns:
        The written path
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    with open(filepath, "wb") as f:
        f.write(pcm_to_wav(data, sample_rate))

    return filepath


def export_samples(
    module,
    directory: Union[str, Path],
    stem: str,
    sample_rate: Optional[int] = None,
) -> List[Path]:
    """
    Export every sample of a loaded XMF module as WAV.

    Files are named <stem>_001.wav, <stem>_002.wav, ... in registry order.

    Args:
        module: Loaded XMFModule
        directory: Output directory
        stem: File name prefix
        sample_rate: Fixed rate for all samples; by default each sample's own
            frequency is used (or DEFAULT_SAMPLE_RATE when it is zero)

    Returns:
        List of written paths
    """
    directory = Path(directory)
    written = []

    for number, sample in enumerate(module.samples, start=1):
        rate = sample_rate or sample.frequency or DEFAULT_SAMPLE_RATE
        path = write_wav(directory / f"{stem}_{number:03d}.wav", sample.data, rate)
        logger.debug("Sample %d: %d bytes at %d Hz -> %s", number, len(sample.data), rate, path)
        written.append(path)

    return written
