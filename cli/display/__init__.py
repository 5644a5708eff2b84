"""
CLI display modules.
"""

from cli.display.tables import (
    display_batch_results,
    display_ult_info,
    display_xmf_info,
)

__all__ = [
    "display_batch_results",
    "display_ult_info",
    "display_xmf_info",
]
