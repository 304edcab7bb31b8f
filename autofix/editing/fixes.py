"""
Fixes and findings: the suggested edits produced by checks, and the
strategies that decide which of a finding's alternative fixes is used.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Protocol, Sequence, Union

from .imports import normalize_import
from .replacements import Replacement, Replacements

logger = logging.getLogger(__name__)


class Positioned(Protocol):
    """A source element whose offsets are resolved through a position context."""

    def get_start_position(self) -> int: ...

    def get_end_position(self, position_context: Any) -> int: ...


Position = Union[int, Positioned]


def _start_of(pos: Position) -> int:
    if isinstance(pos, int):
        return pos
    return pos.get_start_position()


def _end_of(pos: Position, position_context: Any) -> int:
    if isinstance(pos, int):
        return pos
    return pos.get_end_position(position_context)


class Fix(ABC):
    """A proposed remedy for one finding, scoped to a single file."""

    @abstractmethod
    def get_replacements(self, position_context: Any) -> list[Replacement]:
        """Resolve this fix's edits against *position_context*."""

    @abstractmethod
    def get_imports_to_add(self) -> set[str]:
        ...

    @abstractmethod
    def get_imports_to_remove(self) -> set[str]:
        ...

    def is_empty(self) -> bool:
        return False


_Operation = Callable[[Any], Replacement]


class SuggestedFix(Fix):
    """Builder-style fix made of positional edits and import changes.

    Every builder method returns ``self`` so calls can be chained::

        fix = (SuggestedFix()
               .replace_node(tree, "Integer.valueOf(0)")
               .add_import("java.util.Objects"))
    """

    def __init__(self) -> None:
        self._operations: list[_Operation] = []
        self._imports_to_add: dict[str, None] = {}
        self._imports_to_remove: dict[str, None] = {}

    # -- edits ---------------------------------------------------------

    def replace(self, start: int, end: int, text: str) -> "SuggestedFix":
        self._operations.append(lambda ctx: Replacement(start, end, text))
        return self

    def replace_node(self, node: Positioned, text: str) -> "SuggestedFix":
        self._operations.append(
            lambda ctx: Replacement(_start_of(node), _end_of(node, ctx), text)
        )
        return self

    def prefix_with(self, pos: Position, text: str) -> "SuggestedFix":
        def op(ctx: Any) -> Replacement:
            start = _start_of(pos)
            return Replacement(start, start, text)
        self._operations.append(op)
        return self

    def postfix_with(self, pos: Position, text: str) -> "SuggestedFix":
        def op(ctx: Any) -> Replacement:
            end = _end_of(pos, ctx)
            return Replacement(end, end, text)
        self._operations.append(op)
        return self

    def delete(self, node: Positioned) -> "SuggestedFix":
        return self.replace_node(node, "")

    # -- imports -------------------------------------------------------

    def add_import(self, name: str) -> "SuggestedFix":
        self._imports_to_add[normalize_import(name)] = None
        return self

    def add_static_import(self, name: str) -> "SuggestedFix":
        return self.add_import(f"static {name}")

    def remove_import(self, name: str) -> "SuggestedFix":
        self._imports_to_remove[normalize_import(name)] = None
        return self

    def remove_static_import(self, name: str) -> "SuggestedFix":
        return self.remove_import(f"static {name}")

    def merge(self, other: "SuggestedFix") -> "SuggestedFix":
        self._operations.extend(other._operations)
        self._imports_to_add.update(other._imports_to_add)
        self._imports_to_remove.update(other._imports_to_remove)
        return self

    # -- Fix -----------------------------------------------------------

    def get_replacements(self, position_context: Any) -> list[Replacement]:
        return [op(position_context) for op in self._operations]

    def get_imports_to_add(self) -> set[str]:
        return set(self._imports_to_add)

    def get_imports_to_remove(self) -> set[str]:
        return set(self._imports_to_remove)

    def is_empty(self) -> bool:
        return not (self._operations or self._imports_to_add
                    or self._imports_to_remove)


@dataclass
class Finding:
    """One reported issue and its candidate fixes, most preferred first."""
    check_name: str
    message: str = ""
    fixes: list[Fix] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Fix selection
# ---------------------------------------------------------------------------

class FixChooser(ABC):
    """Picks which of a finding's alternative fixes gets recorded."""

    name: str = ""

    @abstractmethod
    def choose(
        self,
        fixes: Sequence[Fix],
        pending: Replacements,
        position_context: Any,
    ) -> Optional[Fix]:
        """Return the fix to record, or None to take no action."""


class FirstFixChooser(FixChooser):
    """Always the first (most likely) suggested fix."""

    name = "first"

    def choose(self, fixes, pending, position_context):
        return fixes[0] if fixes else None


class LeastConflictingFixChooser(FixChooser):
    """The first fix that fits the pending edits, else the one that clashes least."""

    name = "least_conflicting"

    def choose(self, fixes, pending, position_context):
        best: Optional[Fix] = None
        best_conflicts = 0
        for fix in fixes:
            conflicts = sum(
                1 for r in fix.get_replacements(position_context)
                if pending.find_conflict(r) is not None
            )
            if conflicts == 0:
                return fix
            if best is None or conflicts < best_conflicts:
                best, best_conflicts = fix, conflicts
        return best


_CHOOSERS: dict[str, type[FixChooser]] = {
    FirstFixChooser.name: FirstFixChooser,
    LeastConflictingFixChooser.name: LeastConflictingFixChooser,
}


def get_fix_chooser(name: str) -> FixChooser:
    """Return the chooser registered under *name*."""
    try:
        return _CHOOSERS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown fix selection {name!r}; expected one of {sorted(_CHOOSERS)}"
        ) from None
