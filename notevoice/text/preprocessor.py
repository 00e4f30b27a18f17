"""Deterministic markdown-to-speech text cleaning rules.

Responsibilities:
- Provide composable cleanup rules that strip note formatting before TTS.
- Keep preprocessing predictable so repeated cleaning is a no-op.
"""

from __future__ import annotations

import re
from typing import Protocol

CODE_BLOCK_PLACEHOLDER = " 코드 예시 "


class CleanerRule(Protocol):
    """Protocol for text cleaning rules."""

    def apply(self, text: str) -> str:
        """Apply a single cleaning transformation."""


class StripHeadingMarkers:
    """Remove `#` heading markers at line start."""

    _PATTERN = re.compile(r"^#{1,6}\s+", re.MULTILINE)

    def apply(self, text: str) -> str:
        return self._PATTERN.sub("", text)


class UnwrapEmphasis:
    """Replace bold and italic spans with their inner text."""

    _PATTERNS = (
        re.compile(r"\*\*(.+?)\*\*"),
        re.compile(r"\*(.+?)\*"),
        re.compile(r"__(.+?)__"),
        re.compile(r"_(.+?)_"),
    )

    def apply(self, text: str) -> str:
        for pattern in self._PATTERNS:
            text = pattern.sub(r"\1", text)
        return text


class ReplaceCode:
    """Replace fenced code blocks with a spoken placeholder and unwrap inline code."""

    _FENCED = re.compile(r"```.*?```", re.DOTALL)
    _INLINE = re.compile(r"`([^`]+)`")

    def apply(self, text: str) -> str:
        text = self._FENCED.sub(CODE_BLOCK_PLACEHOLDER, text)
        return self._INLINE.sub(r"\1", text)


class UnwrapMarkdownLinks:
    """Rewrite `[label](url)` links to their label."""

    _PATTERN = re.compile(r"\[([^\]]+)\]\([^)]+\)")

    def apply(self, text: str) -> str:
        return self._PATTERN.sub(r"\1", text)


class RemoveUrlsAndEmails:
    """Drop bare URLs and email addresses."""

    _PATTERNS = (
        re.compile(r"https?://\S+"),
        re.compile(r"www\.\S+"),
        re.compile(r"[\w.-]+@[\w.-]+\.\w+"),
    )

    def apply(self, text: str) -> str:
        for pattern in self._PATTERNS:
            text = pattern.sub("", text)
        return text


class StripHtmlTags:
    """Remove HTML-like tags."""

    def apply(self, text: str) -> str:
        return re.sub(r"<[^>]+>", "", text)


class StripListMarkers:
    """Remove bullet and numbered list markers at line start, stacked ones included."""

    _BULLET = re.compile(r"^\s*[-*+]\s+(?:[-*+][ \t]+)*", re.MULTILINE)
    _NUMBERED = re.compile(r"^\s*\d+\.\s+(?:\d+\.[ \t]+)*", re.MULTILINE)

    def apply(self, text: str) -> str:
        text = self._BULLET.sub("", text)
        return self._NUMBERED.sub("", text)


class RewriteWikiSyntax:
    """Drop `![[embed]]` syntax and flatten `[[target|label]]` links.

    Labelled links become the label immediately followed by the target,
    matching audio generated by earlier releases.
    """

    _EMBED = re.compile(r"!\[\[.*?\]\]")
    _LINK = re.compile(r"\[\[([^\]|]+)\|?([^\]]*)\]\]")

    def apply(self, text: str) -> str:
        text = self._EMBED.sub("", text)
        return self._LINK.sub(r"\2\1", text)


class RemoveBrackets:
    """Remove square and curly brackets while keeping the enclosed text."""

    def apply(self, text: str) -> str:
        return re.sub(r"[\[\]{}]", "", text)


class CollapseWhitespace:
    """Collapse repeated spaces and blank lines."""

    def apply(self, text: str) -> str:
        text = re.sub(r" {2,}", " ", text)
        return re.sub(r"\n{2,}", "\n", text)


class StripFrontmatter:
    """Remove a leading `---` metadata block left in the text."""

    def apply(self, text: str) -> str:
        return re.sub(r"\A---.*?---\n?", "", text, count=1, flags=re.DOTALL)


class RemoveDecorativeCharacters:
    """Remove table and markup leftovers that TTS would read literally."""

    def apply(self, text: str) -> str:
        return re.sub(r"[|~^]", "", text)


class TextPreprocessor:
    """Apply a sequence of deterministic cleaner rules for speech synthesis.

    The full rule sequence is repeated until the text stops changing, because
    a later rule can expose markup for an earlier one (for example removing a
    `|` in front of a heading marker). Every default rule either shortens the
    text or consumes backticks, so the loop terminates.
    """

    def __init__(self, rules: list[CleanerRule] | None = None) -> None:
        """Initialize with custom rules or the default rule sequence."""

        self.rules = rules or [
            StripHeadingMarkers(),
            UnwrapEmphasis(),
            ReplaceCode(),
            UnwrapMarkdownLinks(),
            RemoveUrlsAndEmails(),
            StripHtmlTags(),
            StripListMarkers(),
            # Wiki links go before bracket removal so `[[a|b]]` reads as "ba".
            RewriteWikiSyntax(),
            RemoveBrackets(),
            CollapseWhitespace(),
            StripFrontmatter(),
            RemoveDecorativeCharacters(),
        ]

    def clean(self, text: str) -> str:
        """Return `text` stripped of formatting that should not be spoken."""

        current = self._apply_rules(text)
        while True:
            following = self._apply_rules(current)
            if following == current:
                return current
            current = following

    def _apply_rules(self, text: str) -> str:
        for rule in self.rules:
            text = rule.apply(text)
        return text.strip()
