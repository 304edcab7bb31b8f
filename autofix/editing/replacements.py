"""
Replacements: atomic text edits and the non-overlapping set they are
collected into before being applied to a file.
"""

from __future__ import annotations

import bisect
import logging
from dataclasses import dataclass, field, replace
from typing import Iterable, Iterator, Optional

logger = logging.getLogger(__name__)


class ConflictError(Exception):
    """Raised when two distinct replacements touch overlapping text."""

    def __init__(self, existing: "Replacement", incoming: "Replacement",
                 file_name: str = "") -> None:
        self.existing = existing
        self.incoming = incoming
        self.file_name = file_name
        super().__init__(self._describe())

    def _describe(self) -> str:
        where = f" in {self.file_name}" if self.file_name else ""
        return (
            f"Replacement {self.incoming.describe()} conflicts with "
            f"{self.existing.describe()}{where}"
        )

    def __str__(self) -> str:
        return self._describe()


@dataclass(frozen=True)
class Replacement:
    """Replace the text in ``[start, end)`` with ``text``.

    ``start == end`` is a pure insertion.  ``origin`` names the finding
    that contributed the edit and is ignored by equality.
    """
    start: int
    end: int
    text: str
    origin: Optional[str] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError(f"Replacement start must be >= 0, got {self.start}")
        if self.end < self.start:
            raise ValueError(
                f"Replacement end ({self.end}) precedes start ({self.start})"
            )

    @property
    def is_insertion(self) -> bool:
        return self.start == self.end

    def with_origin(self, origin: Optional[str]) -> "Replacement":
        return replace(self, origin=origin)

    def overlaps(self, other: "Replacement") -> bool:
        """True if the two half-open ranges share any offset.

        An insertion only overlaps a range it falls strictly inside, or
        another insertion at the same offset.
        """
        if self.is_insertion and other.is_insertion:
            return self.start == other.start
        if self.is_insertion:
            return other.start < self.start < other.end
        if other.is_insertion:
            return self.start < other.start < self.end
        return self.start < other.end and other.start < self.end

    def conflicts_with(self, other: "Replacement") -> bool:
        return self != other and self.overlaps(other)

    def describe(self) -> str:
        rng = f"[{self.start}, {self.end})"
        return f"{rng} from {self.origin}" if self.origin else rng


def _order_key(r: Replacement) -> tuple[int, int]:
    return (r.start, r.end)


class Replacements:
    """Replacements for one file, kept sorted and free of conflicts."""

    def __init__(self, replacements: Iterable[Replacement] = ()) -> None:
        self._members: list[Replacement] = []
        for r in replacements:
            self.add(r)

    def _neighbours(self, replacement: Replacement) -> tuple[int, list[Replacement]]:
        """Return the insertion index for *replacement* and the members beside it.

        Members never overlap each other, so in ``(start, end)`` order only
        the member on either side of the insertion point can overlap a new
        one, and an identical member sits immediately to its left.
        """
        i = bisect.bisect_right(self._members, _order_key(replacement), key=_order_key)
        return i, self._members[max(i - 1, 0):i + 1]

    def add(self, replacement: Replacement) -> bool:
        """Insert *replacement*.

        Returns False if an identical replacement is already present and
        True if it was inserted.  Raises :class:`ConflictError` if it
        overlaps a distinct member.
        """
        i, neighbours = self._neighbours(replacement)
        if replacement in neighbours:
            logger.debug(
                "[Autofix] Ignoring duplicate replacement %s",
                replacement.describe(),
            )
            return False
        for member in neighbours:
            if member.conflicts_with(replacement):
                raise ConflictError(member, replacement)
        self._members.insert(i, replacement)
        return True

    def find_conflict(self, replacement: Replacement) -> Optional[Replacement]:
        """Return the member *replacement* conflicts with, if any."""
        _, neighbours = self._neighbours(replacement)
        for member in neighbours:
            if member.conflicts_with(replacement):
                return member
        return None

    def is_empty(self) -> bool:
        return not self._members

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[Replacement]:
        return iter(self._members)

    def ascending(self) -> list[Replacement]:
        return list(self._members)

    def descending(self) -> list[Replacement]:
        """Application order: last edit in the file first.

        Applying from the end of the text backwards keeps every pending
        edit's offsets valid against the original text.  On equal starts
        the wider range goes first so an insertion at ``s`` ends up in
        front of a replacement of ``[s, e)``.
        """
        return sorted(self._members, key=_order_key, reverse=True)

    def copy(self) -> "Replacements":
        clone = Replacements()
        clone._members = list(self._members)
        return clone

    def __repr__(self) -> str:
        inner = ", ".join(r.describe() for r in self._members)
        return f"Replacements([{inner}])"


def apply_replacements(text: str, replacements: Iterable[Replacement]) -> str:
    """Return *text* with every replacement applied.

    Offsets are relative to *text*.  Raises :class:`ConflictError` if two
    replacements overlap and ValueError if one extends past the end.
    """
    if isinstance(replacements, Replacements):
        ordered = replacements
    else:
        ordered = Replacements(replacements)

    for r in ordered:
        if r.end > len(text):
            raise ValueError(
                f"Replacement {r.describe()} exceeds text length {len(text)}"
            )

    result = text
    for r in ordered.descending():
        result = result[:r.start] + r.text + result[r.end:]
    return result
