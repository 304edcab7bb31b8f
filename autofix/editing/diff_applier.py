"""
Diff applier: applies the finding diffs of many files, each one
all-or-nothing, with optional syntax validation and atomic writes.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..config import Config
from .diff import DiffNotApplicableError, FindingDiff
from .java_source import has_syntax_errors
from .metrics import log_apply_metric
from .source_file import SourceFile

logger = logging.getLogger(__name__)

_SYNTAX_CHECKED_EXTENSIONS = {".java"}


@dataclass
class ApplyResult:
    """Result of applying a batch of finding diffs."""
    success: bool = False
    files_modified: list[str] = field(default_factory=list)
    files_skipped: list[str] = field(default_factory=list)
    files_failed: dict[str, str] = field(default_factory=dict)
    replacements_applied: int = 0


class DiffApplier:
    """Apply per-file finding diffs to the files on disk.

    A file whose diff conflicts, does not fit, or breaks its syntax is
    left untouched and reported in ``files_failed``; the other files are
    still written.
    """

    def __init__(
        self,
        validate_syntax: bool = True,
        record_metrics: bool = False,
        project_root: Optional[str] = None,
        metrics_dir: str = ".autofix",
    ) -> None:
        self._validate_syntax = validate_syntax
        self._record_metrics = record_metrics
        self._project_root = project_root
        self._metrics_dir = metrics_dir

    @classmethod
    def from_config(
        cls, config: Config, project_root: Optional[str] = None,
    ) -> "DiffApplier":
        return cls(
            validate_syntax=config.VALIDATE_SYNTAX,
            record_metrics=config.RECORD_METRICS,
            project_root=project_root,
            metrics_dir=config.METRICS_DIR,
        )

    def apply(self, diffs: Iterable[FindingDiff]) -> ApplyResult:
        """Apply every diff in *diffs*.

        Parameters
        ----------
        diffs:
            One :class:`FindingDiff` per file.  A path that appears twice
            fails and neither of its diffs is written.

        Returns
        -------
        ApplyResult
            Summary of which files were written, skipped or failed.
        """
        result = ApplyResult()

        # Phase 1: Compute all patched contents without writing
        patched: dict[str, tuple[SourceFile, FindingDiff]] = {}
        seen: set[str] = set()

        for diff in diffs:
            path = diff.get_relevant_file_name()
            if path in seen:
                # Two diffs for one file cannot both be honoured
                patched.pop(path, None)
                if path in result.files_skipped:
                    result.files_skipped.remove(path)
                self._fail(result, diff, f"Multiple diffs given for {path}")
                continue
            seen.add(path)

            if diff.failed:
                self._fail(result, diff, f"Conflicting fixes: {diff.failure}")
                continue

            if diff.is_empty():
                logger.debug("[Autofix] No changes for %s, skipping", path)
                result.files_skipped.append(path)
                continue

            try:
                source = SourceFile.from_path(path)
            except OSError as exc:
                self._fail(result, diff, f"Cannot read file: {exc}")
                continue
            original = source.get_source_text()

            try:
                diff.apply(source)
            except DiffNotApplicableError as exc:
                self._fail(result, diff, str(exc))
                continue

            # Phase 2: Validate syntax of the patched file
            if self._validate_syntax and self._should_check(path):
                if (has_syntax_errors(source.get_source_text())
                        and not has_syntax_errors(original)):
                    self._fail(result, diff, f"Syntax error in patched {path}")
                    continue

            patched[path] = (source, diff)

        # Phase 3: Write each file atomically
        for path, (source, diff) in patched.items():
            try:
                source.write()
            except OSError as exc:
                logger.error("[Autofix] Write failed for %s: %s", path, exc)
                result.files_failed[path] = f"Write failed: {exc}"
                continue
            count = len(diff.replacements)
            result.files_modified.append(path)
            result.replacements_applied += count
            self._log_metric(
                path,
                success=True,
                replacements=count,
                imports_changed=bool(diff.imports_to_add or diff.imports_to_remove),
            )

        result.success = not result.files_failed
        logger.info(
            "[Autofix] Applied diffs: %d modified, %d skipped, %d failed",
            len(result.files_modified), len(result.files_skipped),
            len(result.files_failed),
        )
        return result

    @staticmethod
    def _should_check(path: str) -> bool:
        return os.path.splitext(path)[1].lower() in _SYNTAX_CHECKED_EXTENSIONS

    def _fail(self, result: ApplyResult, diff: FindingDiff, error: str) -> None:
        path = diff.get_relevant_file_name()
        logger.warning("[Autofix] Not applying %s: %s", path, error)
        result.files_failed[path] = error
        self._log_metric(
            path,
            success=False,
            replacements=len(diff.replacements),
            conflicts=len(diff.conflicts),
            error=error,
        )

    def _log_metric(self, path: str, **data) -> None:
        if not self._record_metrics:
            return
        log_apply_metric(
            {"file": path, **data},
            project_root=self._project_root,
            metrics_dir=self._metrics_dir,
        )
