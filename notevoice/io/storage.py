"""Vault storage abstraction for notes and audio artifacts.

Responsibilities:
- Define the minimal storage operations the pipeline depends on.
- Provide a filesystem-backed store rooted at a notes vault directory.
"""

from __future__ import annotations

import os
from pathlib import Path, PurePosixPath
import tempfile
from typing import Protocol


class NoteStore(Protocol):
    """Storage collaborator used by the pipeline; paths are vault-relative."""

    def read(self, path: str) -> str:
        """Return note text."""

    def replace(self, path: str, content: str) -> None:
        """Replace note text in one operation."""

    def exists(self, path: str) -> bool:
        """Return whether a note or artifact exists."""

    def delete(self, path: str) -> None:
        """Delete a note or artifact."""

    def write_bytes(self, path: str, data: bytes) -> None:
        """Write a binary artifact, creating parent folders on demand."""


class VaultStore:
    """Filesystem-backed store rooted at a vault directory."""

    def __init__(self, root: Path) -> None:
        """Initialize the store with the vault root directory."""

        self.root = root

    def read(self, path: str) -> str:
        """Load note text from the vault."""

        return self._resolve(path).read_text(encoding="utf-8")

    def replace(self, path: str, content: str) -> None:
        """Atomically replace note text via a temporary sibling file."""

        target = self._resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(
            dir=target.parent, prefix=f".{target.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
                handle.write(content)
            os.replace(temp_name, target)
        except BaseException:
            Path(temp_name).unlink(missing_ok=True)
            raise

    def exists(self, path: str) -> bool:
        """Return whether the given note or artifact exists."""

        return self._resolve(path).exists()

    def delete(self, path: str) -> None:
        """Delete a file from the vault."""

        self._resolve(path).unlink()

    def write_bytes(self, path: str, data: bytes) -> None:
        """Save binary artifact bytes."""

        target = self._resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)

    def _resolve(self, path: str) -> Path:
        """Map a vault-relative path to the filesystem, rejecting escapes."""

        relative = PurePosixPath(path)
        if relative.is_absolute() or ".." in relative.parts:
            raise ValueError(f"Path `{path}` must be relative to the vault root.")
        return self.root.joinpath(*relative.parts)
