"""Unit tests for speech-oriented markdown cleaning."""

from __future__ import annotations

import pytest

from notevoice.text.preprocessor import (
    CODE_BLOCK_PLACEHOLDER,
    RewriteWikiSyntax,
    StripListMarkers,
    TextPreprocessor,
)


@pytest.fixture
def preprocessor() -> TextPreprocessor:
    """Provide the default rule sequence."""

    return TextPreprocessor()


def test_strips_headings_and_emphasis(preprocessor: TextPreprocessor) -> None:
    """Heading markers and emphasis wrappers should disappear, keeping the words."""

    cleaned = preprocessor.clean("# Title\n\nSome **bold** and *italic* text.")

    assert cleaned == "Title\nSome bold and italic text."


def test_replaces_fenced_code_and_unwraps_inline_code(preprocessor: TextPreprocessor) -> None:
    """Fenced code should become a spoken placeholder; inline code keeps its text."""

    cleaned = preprocessor.clean("Intro `pip install`\n```python\nprint(1)\n```\nOutro")

    assert CODE_BLOCK_PLACEHOLDER.strip() in cleaned
    assert "print(1)" not in cleaned
    assert "pip install" in cleaned
    assert "`" not in cleaned


def test_links_urls_and_emails_are_removed(preprocessor: TextPreprocessor) -> None:
    """Markdown links keep their label; bare URLs and emails vanish."""

    cleaned = preprocessor.clean(
        "See [the docs](https://example.com/docs) or visit https://example.com today. "
        "Mail me@example.com please."
    )

    assert cleaned == "See the docs or visit today. Mail please."


def test_wiki_links_keep_label_followed_by_target(preprocessor: TextPreprocessor) -> None:
    """Labelled wiki links concatenate label and target; embeds are dropped."""

    assert preprocessor.clean("Read [[Target|Label]] now") == "Read LabelTarget now"
    assert preprocessor.clean("Read [[Page]] now") == "Read Page now"
    assert preprocessor.clean("![[diagram.png]] caption") == "caption"


def test_wiki_rule_runs_before_bracket_removal() -> None:
    """The wiki rule alone should flatten links without leaving brackets."""

    assert RewriteWikiSyntax().apply("[[a|b]]") == "ba"


def test_list_markers_html_and_brackets(preprocessor: TextPreprocessor) -> None:
    """List markers, tags, and brackets should be stripped while keeping content."""

    cleaned = preprocessor.clean("- first\n* second\n1. third\n<b>{bold}</b> [x]")

    assert cleaned == "first\nsecond\nthird\nbold x"


def test_stacked_list_markers_are_removed_in_one_clean(preprocessor: TextPreprocessor) -> None:
    """Repeated markers on one line should all go at once."""

    assert preprocessor.clean("- - - - - - - item text") == "item text"
    assert preprocessor.clean("1. 2. 3. 4. 5. 6. 7. step") == "step"
    assert StripListMarkers().apply("* + - item\n- next") == "item\nnext"


def test_leading_metadata_block_and_table_pipes(preprocessor: TextPreprocessor) -> None:
    """A leftover metadata block is removed and table pipes collapse to spaced words."""

    assert preprocessor.clean("---\ntitle: x\n---\nBody text") == "Body text"
    assert preprocessor.clean("| a | b |") == "a b"


@pytest.mark.parametrize(
    "sample",
    [
        "# Heading\n\n**Bold** [[Note|Alias]] and `code`.",
        "| # Not a heading | ~~strike~~ |",
        "---\ntype: 가이드\n---\n## 소개\n\n- 항목 하나\n- 항목 둘\n",
        "Text with <span>html</span> and {braces} and ![[embed.png]].",
        "- - - - - - - item text",
        "1. 2. 3. 4. 5. 6. 7. step",
        "   ",
        "",
    ],
)
def test_clean_is_idempotent(preprocessor: TextPreprocessor, sample: str) -> None:
    """Cleaning already-cleaned text should be a no-op."""

    once = preprocessor.clean(sample)

    assert preprocessor.clean(once) == once


def test_custom_rule_sequence_is_respected() -> None:
    """Callers can supply their own ordered rule list."""

    preprocessor = TextPreprocessor(rules=[RewriteWikiSyntax()])

    assert preprocessor.clean("  **[[a]]**  ") == "**a**"
