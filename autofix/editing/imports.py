"""
Import block model: computes the canonical import section of a Java file
from the imports it already has plus the additions and removals that
fixes asked for.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

_IMPORT_PREFIX = "import "
_STATIC_PREFIX = "import static "
_WHITESPACE = re.compile(r"\s+")


def normalize_import(name: str) -> str:
    """Turn *name* into an import statement without its semicolon.

    ``"com.foo.Bar"`` becomes ``"import com.foo.Bar"`` and
    ``"static com.foo.Bar.baz"`` becomes ``"import static com.foo.Bar.baz"``.
    Anything else is passed through with its whitespace collapsed.
    """
    stmt = _WHITESPACE.sub(" ", name).strip()
    stmt = stmt.rstrip(";").rstrip()
    if not stmt or stmt.startswith(_IMPORT_PREFIX):
        return stmt
    return _IMPORT_PREFIX + stmt


def is_static_import(stmt: str) -> bool:
    return stmt.startswith(_STATIC_PREFIX)


def imported_name(stmt: str) -> str:
    """Return the qualified name an import statement refers to."""
    if stmt.startswith(_STATIC_PREFIX):
        return stmt[len(_STATIC_PREFIX):]
    if stmt.startswith(_IMPORT_PREFIX):
        return stmt[len(_IMPORT_PREFIX):]
    return stmt


# ---------------------------------------------------------------------------
# Ordering strategies
# ---------------------------------------------------------------------------

class ImportOrganizer(ABC):
    """Splits a set of import statements into ordered groups."""

    name: str = ""

    @abstractmethod
    def organize(self, imports: Iterable[str]) -> list[list[str]]:
        """Return the groups to render, each already sorted."""

    @staticmethod
    def _split(imports: Iterable[str]) -> tuple[list[str], list[str]]:
        unique = set(imports)
        static = sorted((s for s in unique if is_static_import(s)),
                        key=imported_name)
        regular = sorted((s for s in unique if not is_static_import(s)),
                         key=imported_name)
        return static, regular


class StaticFirstOrganizer(ImportOrganizer):
    """Google Java style: static imports, a blank line, then the rest."""

    name = "static_first"

    def organize(self, imports: Iterable[str]) -> list[list[str]]:
        static, regular = self._split(imports)
        return [g for g in (static, regular) if g]


class StaticLastOrganizer(ImportOrganizer):
    """Regular imports first, static imports in a trailing group."""

    name = "static_last"

    def organize(self, imports: Iterable[str]) -> list[list[str]]:
        static, regular = self._split(imports)
        return [g for g in (regular, static) if g]


_ORGANIZERS: dict[str, type[ImportOrganizer]] = {
    StaticFirstOrganizer.name: StaticFirstOrganizer,
    StaticLastOrganizer.name: StaticLastOrganizer,
}


def get_import_organizer(name: str) -> ImportOrganizer:
    """Return the organizer registered under *name*."""
    try:
        return _ORGANIZERS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown import order {name!r}; expected one of "
            f"{sorted(_ORGANIZERS)}"
        ) from None


# ---------------------------------------------------------------------------
# Import statements
# ---------------------------------------------------------------------------

class ImportStatements:
    """The import section of one file and the edits pending against it."""

    def __init__(
        self,
        current_imports: Iterable[str],
        start_pos: int,
        end_pos: int,
        organizer: Optional[ImportOrganizer] = None,
    ) -> None:
        self._base: dict[str, None] = {}
        for name in current_imports:
            stmt = normalize_import(name)
            if stmt:
                self._base[stmt] = None
        self._has_existing = bool(self._base)
        self._added: dict[str, None] = {}
        self._removed: dict[str, None] = {}
        self._start_pos = start_pos
        self._end_pos = end_pos
        self._organizer = organizer or StaticFirstOrganizer()

    @classmethod
    def create(
        cls,
        current_imports: Iterable[str],
        start_pos: int,
        end_pos: int,
        organizer: Optional[ImportOrganizer] = None,
    ) -> "ImportStatements":
        return cls(current_imports, start_pos, end_pos, organizer)

    @property
    def start_pos(self) -> int:
        return self._start_pos

    @property
    def end_pos(self) -> int:
        return self._end_pos

    def add(self, name: str) -> None:
        stmt = normalize_import(name)
        if stmt:
            self._added[stmt] = None

    def remove(self, name: str) -> None:
        stmt = normalize_import(name)
        if stmt:
            self._removed[stmt] = None

    def add_all(self, names: Iterable[str]) -> None:
        for name in names:
            self.add(name)

    def remove_all(self, names: Iterable[str]) -> None:
        for name in names:
            self.remove(name)

    @property
    def imports(self) -> list[str]:
        """Final import statements in render order."""
        return [stmt for group in self._groups() for stmt in group]

    def _groups(self) -> list[list[str]]:
        final = (set(self._base) | set(self._added)) - set(self._removed)
        return self._organizer.organize(final)

    def render(self) -> str:
        groups = self._groups()
        if not groups:
            return ""
        block = "\n\n".join(
            "\n".join(f"{stmt};" for stmt in group) for group in groups
        )
        if self._has_existing:
            return block
        # New import section: separate it from the package declaration
        # before it, or from the code after it at the top of the file.
        if self._start_pos > 0:
            return "\n\n" + block
        return block + "\n\n"

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return (
            f"ImportStatements(start={self._start_pos}, end={self._end_pos}, "
            f"imports={self.imports!r})"
        )
