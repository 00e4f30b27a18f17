"""Text preprocessing, word counting, and chunk planning components.

This package provides the deterministic text transformations that run before
and during speech synthesis.
"""

from .chunking import plan_speech_chunks, split_sentences
from .preprocessor import CODE_BLOCK_PLACEHOLDER, TextPreprocessor
from .word_count import count_words, estimate_minutes

__all__ = [
    "CODE_BLOCK_PLACEHOLDER",
    "TextPreprocessor",
    "count_words",
    "estimate_minutes",
    "plan_speech_chunks",
    "split_sentences",
]
