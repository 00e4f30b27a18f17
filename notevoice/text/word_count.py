"""Spoken word-count estimation for mixed Korean/Latin text.

Responsibilities:
- Estimate how many spoken words a text contains.
- Derive the listening duration shown next to generated audio.
"""

from __future__ import annotations

import math
import re

_HANGUL_SYLLABLE_RE = re.compile(r"[\uAC00-\uD7AF]")
_SYLLABLES_PER_WORD = 2
_WORDS_PER_MINUTE = 150


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (2.5 -> 3)."""

    return math.floor(value + 0.5)


def count_words(text: str) -> int:
    """Return the estimated spoken word count of `text`.

    Hangul syllables are counted and divided by the average number of
    syllables per spoken word; remaining whitespace-delimited tokens count as
    one word each.
    """

    syllables = len(_HANGUL_SYLLABLE_RE.findall(text))
    latin_words = len(_HANGUL_SYLLABLE_RE.sub(" ", text).split())
    return round_half_up(syllables / _SYLLABLES_PER_WORD) + latin_words


def estimate_minutes(word_count: int) -> int:
    """Return the estimated listening time in whole minutes, at least one."""

    return max(1, round_half_up(word_count / _WORDS_PER_MINUTE))
