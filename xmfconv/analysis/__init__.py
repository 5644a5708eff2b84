"""Analysis tools for module files."""

from xmfconv.analysis.track_listing import (
    describe_voice_flags,
    format_instruction,
    render_track_listing,
)

__all__ = ["describe_voice_flags", "format_instruction", "render_track_listing"]
