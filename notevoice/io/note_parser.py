"""Note parsing and audio-metadata mutation.

Responsibilities:
- Split a note into its leading `---` metadata block and body.
- Produce the updated note text after audio generation.

Notes:
- The metadata block is a minimal `key: value` / `- item` subset, not YAML.
  Anything outside that subset is left untouched in the body.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import mimetypes
import re

from loguru import logger

from ..models.datatypes import MetadataValue, NoteDocument
from ..text.word_count import estimate_minutes

_BLOCK_RE = re.compile(r"\A---\n(.*?)\n---\n?", re.DOTALL)
_AUDIO_FILE_KEY_RE = re.compile(r"^audio_file\s*:")
_LAST_MODIFIED_KEY_RE = re.compile(r"^last_modified\s*:")

KST = timezone(timedelta(hours=9))

AUDIO_SECTION_TEMPLATE = """## 🎙️ 오디오 버전 듣기

<audio controls style="width: 100%; margin: 15px 0 20px 0;">
  <source src="{audio_path}" type="{mime_type}">
  Your browser does not support the audio element.
</audio>

**이 노트의 요약을 음성으로 들을 수 있습니다** ({word_count}단어, 약 {minutes}분 소요)

---

"""


class MetadataBlockError(ValueError):
    """Raised when a metadata block contains lines outside the supported subset."""


def parse_note(raw_content: str) -> NoteDocument:
    """Parse raw note text into metadata and body.

    An absent or unparseable metadata block yields empty metadata and the
    full raw content as body. Parse failures are logged, never raised.
    """

    match = _BLOCK_RE.match(raw_content)
    if match is None:
        return NoteDocument(raw_content=raw_content, metadata={}, body=raw_content)

    try:
        metadata = parse_metadata_block(match.group(1))
    except MetadataBlockError as exc:
        logger.warning("Ignoring unparseable note metadata block: {}", exc)
        return NoteDocument(raw_content=raw_content, metadata={}, body=raw_content)

    return NoteDocument(
        raw_content=raw_content,
        metadata=metadata,
        body=raw_content[match.end() :],
    )


def parse_metadata_block(block: str) -> dict[str, MetadataValue]:
    """Parse the inside of a metadata block into scalar and list values.

    Indented lines that are not list items continue the previous value (folded
    or nested YAML) and are skipped.

    Raises:
        MetadataBlockError: If a non-blank, non-indented line is neither
            `key: value`, a `- item` line, nor a `#` comment.
    """

    metadata: dict[str, MetadataValue] = {}
    lines = block.split("\n")
    index = 0
    while index < len(lines):
        line = lines[index]
        stripped = line.strip()
        index += 1
        if not stripped or stripped.startswith("#") or _is_list_item(stripped):
            continue
        if _is_continuation(line):
            continue

        key, separator, raw_value = line.partition(":")
        key = key.strip()
        if not separator or not key:
            raise MetadataBlockError(f"line {index} is not a `key: value` pair: {stripped!r}")

        value = _unquote(raw_value.strip())
        if value:
            metadata[key] = value
            continue

        items: list[str] = []
        while index < len(lines):
            candidate = lines[index].strip()
            if _is_list_item(candidate):
                items.append(_unquote(candidate[1:].strip()))
            elif candidate and not _is_continuation(lines[index]):
                break
            index += 1
        metadata[key] = items if items else ""
    return metadata


def build_audio_section(audio_path: str, word_count: int) -> str:
    """Return the markdown section that embeds the generated audio."""

    mime_type = mimetypes.guess_type(audio_path)[0] or "audio/mpeg"
    return AUDIO_SECTION_TEMPLATE.format(
        audio_path=audio_path,
        mime_type=mime_type,
        word_count=word_count,
        minutes=estimate_minutes(word_count),
    )


def format_timestamp(moment: datetime) -> str:
    """Format a timestamp as ISO-8601 with milliseconds and a +09:00 offset."""

    return moment.astimezone(KST).isoformat(timespec="milliseconds")


def with_audio_metadata(
    document: NoteDocument,
    audio_path: str,
    word_count: int,
    now: datetime | None = None,
) -> str:
    """Return the full note text with the audio section and metadata applied.

    An existing `audio_file` value is never overwritten; an existing
    `last_modified` value is set to `now`. The body is kept verbatim.
    This does not detect an audio section from a previous call, so callers
    must skip notes that already have audio.
    """

    section = build_audio_section(audio_path, word_count)
    match = _BLOCK_RE.match(document.raw_content)
    if match is None:
        return section + document.raw_content

    block_lines = match.group(1).split("\n")
    if not any(_AUDIO_FILE_KEY_RE.match(line) for line in block_lines):
        block_lines.append(f'audio_file: "{audio_path}"')

    timestamp = format_timestamp(now or datetime.now(KST))
    for position, line in enumerate(block_lines):
        if _LAST_MODIFIED_KEY_RE.match(line):
            block_lines[position] = f'last_modified: "{timestamp}"'
            break

    header = "---\n" + "\n".join(block_lines) + "\n---"
    body = document.raw_content[match.end() :]
    return f"{header}\n\n{section}{body}"


def _is_list_item(stripped_line: str) -> bool:
    return stripped_line.startswith("- ") or stripped_line == "-"


def _is_continuation(line: str) -> bool:
    return line.startswith((" ", "\t"))


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
        return value[1:-1]
    return value
