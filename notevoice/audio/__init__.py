"""Audio merging components.

This package joins ordered chunk audio into the final artifact bytes.
"""

from .merger import AudioMerger

__all__ = ["AudioMerger"]
