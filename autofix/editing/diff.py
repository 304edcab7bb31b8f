"""
Finding diff: aggregates the fixes suggested for one source file into a
single conflict-free set of edits and applies it to the file's text.

All findings for a file are fed to one :class:`FindingDiff`, sequentially.
Separate files use separate instances and share no state.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from ..config import CONFLICT_ABORT, CONFLICT_POLICIES, Config
from .fixes import Finding, FirstFixChooser, Fix, FixChooser, get_fix_chooser
from .imports import ImportOrganizer, ImportStatements, get_import_organizer
from .java_source import find_import_block
from .replacements import ConflictError, Replacement, Replacements
from .source_file import SourceFile, TextBuffer

logger = logging.getLogger(__name__)

STATE_EMPTY = "empty"
STATE_ACCUMULATING = "accumulating"
STATE_APPLIED = "applied"

_IMPORTS_ORIGIN = "import block"


class DiffNotApplicableError(Exception):
    """Raised when a diff cannot be applied to its source file."""


class FindingDiff:
    """Collects fixes for one file and applies them in a single pass.

    Lifecycle: ``empty`` -> ``accumulating`` (any number of :meth:`record`
    calls) -> ``applied``.  :meth:`apply` may run once; afterwards the
    instance is spent whether or not it succeeded.
    """

    def __init__(
        self,
        source_path: str,
        current_imports: Iterable[str] = (),
        import_span: tuple[int, int] = (0, 0),
        *,
        position_context: Any = None,
        conflict_policy: str = CONFLICT_ABORT,
        fix_chooser: Optional[FixChooser] = None,
        import_organizer: Optional[ImportOrganizer] = None,
    ) -> None:
        if conflict_policy not in CONFLICT_POLICIES:
            raise ValueError(
                f"Invalid conflict policy {conflict_policy!r}; "
                f"expected one of {list(CONFLICT_POLICIES)}"
            )
        self._source_path = source_path
        self._current_imports = list(current_imports)
        self._import_span = import_span
        self._position_context = position_context
        self._conflict_policy = conflict_policy
        self._fix_chooser = fix_chooser or FirstFixChooser()
        self._import_organizer = import_organizer

        self._imports_to_add: dict[str, None] = {}
        self._imports_to_remove: dict[str, None] = {}
        self._replacements = Replacements()
        self._state = STATE_EMPTY
        self._failure: Optional[ConflictError] = None
        self.conflicts: list[ConflictError] = []

    @classmethod
    def for_file(
        cls,
        source_path: str,
        current_imports: Iterable[str] = (),
        import_span: tuple[int, int] = (0, 0),
        **kwargs: Any,
    ) -> "FindingDiff":
        return cls(source_path, current_imports, import_span, **kwargs)

    @classmethod
    def for_source(
        cls,
        source_path: str,
        text: str,
        *,
        config: Optional[Config] = None,
        position_context: Any = None,
    ) -> "FindingDiff":
        """Create a diff for Java *text*, reading its import block with tree-sitter."""
        cfg = config or Config.load()
        block = find_import_block(text)
        return cls(
            source_path,
            block.imports,
            block.span,
            position_context=position_context,
            conflict_policy=cfg.CONFLICT_POLICY,
            fix_chooser=get_fix_chooser(cfg.FIX_SELECTION),
            import_organizer=get_import_organizer(cfg.IMPORT_ORDER),
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def get_relevant_file_name(self) -> str:
        return self._source_path

    @property
    def state(self) -> str:
        return self._state

    @property
    def failed(self) -> bool:
        """True once a conflict has aborted this file."""
        return self._failure is not None

    @property
    def failure(self) -> Optional[ConflictError]:
        """The conflict that aborted this file, if any."""
        return self._failure

    @property
    def replacements(self) -> Replacements:
        return self._replacements

    @property
    def imports_to_add(self) -> list[str]:
        return list(self._imports_to_add)

    @property
    def imports_to_remove(self) -> list[str]:
        return list(self._imports_to_remove)

    def is_empty(self) -> bool:
        """True if there is nothing to write.

        A file aborted by a conflict is never empty: its failure still has
        to be reported.
        """
        if self._failure is not None:
            return False
        return (not self._imports_to_add and not self._imports_to_remove
                and self._replacements.is_empty())

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def on_finding(self, finding: Finding) -> bool:
        """Record the fix the chooser picks for *finding*, if it has any."""
        if not finding.fixes:
            return False
        fix = self._fix_chooser.choose(
            finding.fixes, self._replacements, self._position_context
        )
        if fix is None:
            return False
        return self.record(fix, origin=finding.check_name)

    def record(self, fix: Fix, origin: Optional[str] = None) -> bool:
        """Merge *fix* into the pending edits.

        A fix is taken whole or not at all.  Returns True if it was
        recorded.  On a conflict the ``abort`` policy marks the file as
        failed and re-raises :class:`ConflictError`; the ``skip`` policy
        logs the conflict, drops the fix and returns False.
        """
        if self._state == STATE_APPLIED:
            raise DiffNotApplicableError(
                f"Diff for {self._source_path} has already been applied"
            )
        if self._failure is not None:
            logger.debug(
                "[Autofix] Ignoring fix from %s: %s already failed",
                origin, self._source_path,
            )
            return False

        trial = self._replacements.copy()
        try:
            for replacement in fix.get_replacements(self._position_context):
                if origin is not None and replacement.origin is None:
                    replacement = replacement.with_origin(origin)
                trial.add(replacement)
        except ConflictError as exc:
            exc.file_name = self._source_path
            self.conflicts.append(exc)
            if self._conflict_policy == CONFLICT_ABORT:
                logger.warning("[Autofix] Aborting %s: %s", self._source_path, exc)
                self._failure = exc
                raise
            logger.warning("[Autofix] Skipping fix: %s", exc)
            return False

        for name in fix.get_imports_to_add():
            self._imports_to_add[name] = None
        for name in fix.get_imports_to_remove():
            self._imports_to_remove[name] = None
        self._replacements = trial
        if not self.is_empty():
            self._state = STATE_ACCUMULATING
        return True

    # ------------------------------------------------------------------
    # Application
    # ------------------------------------------------------------------

    def _finalize(self) -> Replacements:
        """Return the pending edits plus the rewritten import block."""
        final = self._replacements.copy()
        if not self._imports_to_add and not self._imports_to_remove:
            return final

        start, end = self._import_span
        statements = ImportStatements.create(
            self._current_imports, start, end, self._import_organizer
        )
        statements.add_all(self._imports_to_add)
        statements.remove_all(self._imports_to_remove)
        final.add(Replacement(
            statements.start_pos,
            statements.end_pos,
            statements.render(),
            origin=_IMPORTS_ORIGIN,
        ))
        return final

    def apply(self, buffer: TextBuffer) -> None:
        """Apply every recorded edit to *buffer*.

        Nothing is written unless the complete edit set, including the
        import block, is conflict-free and within the buffer's bounds.
        """
        if self._state == STATE_APPLIED:
            raise DiffNotApplicableError(
                f"Diff for {self._source_path} has already been applied"
            )
        self._state = STATE_APPLIED

        if self._failure is not None:
            raise DiffNotApplicableError(
                f"Cannot apply diff for {self._source_path}: {self._failure}"
            ) from self._failure

        try:
            final = self._finalize()
        except ConflictError as exc:
            exc.file_name = self._source_path
            self.conflicts.append(exc)
            logger.warning("[Autofix] Import block conflict: %s", exc)
            raise DiffNotApplicableError(
                f"Cannot apply diff for {self._source_path}: {exc}"
            ) from exc

        length = len(buffer)
        for replacement in final:
            if replacement.end > length:
                raise DiffNotApplicableError(
                    f"Replacement {replacement.describe()} is outside "
                    f"{self._source_path} (length {length})"
                )

        try:
            for replacement in final.descending():
                buffer.replace_chars(
                    replacement.start, replacement.end, replacement.text
                )
        except (IndexError, ValueError) as exc:
            raise DiffNotApplicableError(
                f"Buffer rejected edit for {self._source_path}: {exc}"
            ) from exc

        logger.debug(
            "[Autofix] Applied %d replacement(s) to %s",
            len(final), self._source_path,
        )

    def apply_to_text(self, text: str) -> str:
        """Apply the diff to *text* and return the result."""
        buffer = SourceFile(self._source_path, text)
        self.apply(buffer)
        return buffer.get_source_text()

    def __repr__(self) -> str:
        return (
            f"FindingDiff({self._source_path!r}, state={self._state}, "
            f"replacements={len(self._replacements)}, "
            f"imports_to_add={len(self._imports_to_add)}, "
            f"imports_to_remove={len(self._imports_to_remove)})"
        )
