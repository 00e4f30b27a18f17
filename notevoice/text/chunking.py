"""Sentence-aware chunk planning for speech synthesis.

Responsibilities:
- Split long text into ordered chunks that fit a provider request limit.
- Prefer sentence boundaries, then whitespace, then raw character cuts.
"""

from __future__ import annotations

import re

_SENTENCE_RE = re.compile(r"[^.!?。]*[.!?。]+\s*|[^.!?。]+$")


def split_sentences(text: str) -> list[str]:
    """Split text into sentence segments that concatenate back to `text`.

    Each segment keeps its terminal punctuation (`.`, `!`, `?`, or the
    East-Asian full stop `。`) and the whitespace that follows it.
    """

    return [segment for segment in _SENTENCE_RE.findall(text) if segment]


def plan_speech_chunks(text: str, max_chars: int) -> list[str]:
    """Pack `text` into ordered chunks of at most `max_chars` characters.

    Args:
        text: Text to split.
        max_chars: Maximum chunk length accepted by the synthesis backend.

    Returns:
        Non-empty, stripped chunks in original order. Text that already fits
        is returned as a single chunk.
    """

    if max_chars <= 0:
        raise ValueError("`max_chars` must be a positive integer.")

    stripped = text.strip()
    if not stripped:
        return []
    if len(stripped) <= max_chars:
        return [stripped]

    chunks: list[str] = []
    current = ""
    for segment in split_sentences(stripped):
        if len(segment.strip()) > max_chars:
            _flush(chunks, current)
            current = ""
            chunks.extend(_split_oversized_segment(segment, max_chars))
            continue
        if len((current + segment).strip()) > max_chars:
            _flush(chunks, current)
            current = segment
        else:
            current += segment
    _flush(chunks, current)
    return chunks


def _split_oversized_segment(segment: str, max_chars: int) -> list[str]:
    """Greedily pack whitespace-delimited tokens of one long sentence."""

    pieces: list[str] = []
    current = ""
    for token in segment.split():
        if len(token) > max_chars:
            _flush(pieces, current)
            current = ""
            pieces.extend(
                token[start : start + max_chars] for start in range(0, len(token), max_chars)
            )
            continue
        candidate = f"{current} {token}" if current else token
        if len(candidate) > max_chars:
            _flush(pieces, current)
            current = token
        else:
            current = candidate
    _flush(pieces, current)
    return pieces


def _flush(chunks: list[str], current: str) -> None:
    piece = current.strip()
    if piece:
        chunks.append(piece)
