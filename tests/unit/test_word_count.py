"""Unit tests for spoken word-count estimation."""

from __future__ import annotations

import pytest

from notevoice.text.word_count import count_words, estimate_minutes, round_half_up


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("안녕하세요", 3),
        ("hello world", 2),
        ("안녕 world", 2),
        ("", 0),
        ("   \n\t ", 0),
        ("한국어 문장과 English words 섞기", 6),
    ],
)
def test_count_words_mixes_syllables_and_tokens(text: str, expected: int) -> None:
    """Hangul syllables count as half words, rounded half up; other tokens count once."""

    assert count_words(text) == expected


def test_round_half_up_differs_from_bankers_rounding() -> None:
    """Halves should always round up."""

    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(1.49) == 1


@pytest.mark.parametrize(
    ("words", "minutes"),
    [(0, 1), (74, 1), (150, 1), (225, 2), (375, 3), (3000, 20)],
)
def test_estimate_minutes_has_a_one_minute_floor(words: int, minutes: int) -> None:
    """Listening time should be words / 150 rounded half up, never below one."""

    assert estimate_minutes(words) == minutes
