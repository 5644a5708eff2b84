"""Data models for ULT and XMF module representation."""

from xmfconv.models.ult import ULTCell, ULTModule, ULTSample
from xmfconv.models.xmf import (
    Instruction,
    InstructionRow,
    InstructionSection,
    SampleRegistry,
    VoiceControlFlags,
    XMFModule,
)

__all__ = [
    "ULTCell",
    "ULTModule",
    "ULTSample",
    "Instruction",
    "InstructionRow",
    "InstructionSection",
    "SampleRegistry",
    "VoiceControlFlags",
    "XMFModule",
]
