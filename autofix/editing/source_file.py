"""
Source file: a mutable, offset-addressable text buffer over one file.
"""

from __future__ import annotations

import logging
import os
import shutil
from typing import Protocol

logger = logging.getLogger(__name__)


class TextBuffer(Protocol):
    """What :meth:`FindingDiff.apply` needs from a buffer."""

    def __len__(self) -> int: ...

    def replace_chars(self, start: int, end: int, text: str) -> None: ...


class SourceFile:
    """In-memory contents of one source file."""

    def __init__(self, path: str, content: str) -> None:
        self.path = path
        self._content = content

    @classmethod
    def from_path(cls, path: str) -> "SourceFile":
        with open(path, "r", encoding="utf-8", newline="") as f:
            return cls(path, f.read())

    def get_source_text(self) -> str:
        return self._content

    def __len__(self) -> int:
        return len(self._content)

    def replace_chars(self, start: int, end: int, text: str) -> None:
        """Replace the characters in ``[start, end)`` with *text*."""
        if start < 0 or end < start or end > len(self._content):
            raise IndexError(
                f"Range [{start}, {end}) is outside {self.path} "
                f"(length {len(self._content)})"
            )
        self._content = self._content[:start] + text + self._content[end:]

    def write(self) -> None:
        """Write the buffer back to :attr:`path` atomically via temp file + rename."""
        abs_path = os.path.abspath(self.path)
        tmp_path = abs_path + ".autofix_tmp"

        try:
            with open(tmp_path, "w", encoding="utf-8", newline="") as f:
                f.write(self._content)

            # On Windows, os.rename fails if destination exists
            if os.path.exists(abs_path):
                shutil.move(tmp_path, abs_path)
            else:
                os.rename(tmp_path, abs_path)
        except Exception:
            # Clean up temp file on failure
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise

    def __repr__(self) -> str:
        return f"SourceFile({self.path!r}, length={len(self._content)})"
