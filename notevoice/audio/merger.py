"""Audio merge stage.

Responsibilities:
- Merge chunk audio into one final stream.
- Preserve deterministic ordering by chunk index.
"""

from __future__ import annotations

from ..models.datatypes import AudioChunk


class AudioMerger:
    """Concatenate encoded MP3 chunks into one playable stream."""

    def merge(self, chunks: list[AudioChunk]) -> bytes:
        """Return chunk audio joined in index order, with no separators.

        MP3 frames are self-delimiting, so byte concatenation yields a valid
        stream without re-encoding.
        """

        ordered = sorted(chunks, key=lambda chunk: chunk.index)
        return b"".join(chunk.audio for chunk in ordered)
