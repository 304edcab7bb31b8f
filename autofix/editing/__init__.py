"""Diff aggregation and application: merges suggested fixes per file and applies them."""

from .replacements import Replacement, Replacements, ConflictError, apply_replacements
from .imports import (
    ImportStatements, ImportOrganizer, StaticFirstOrganizer, StaticLastOrganizer,
    get_import_organizer,
)
from .fixes import (
    Fix, SuggestedFix, Finding,
    FixChooser, FirstFixChooser, LeastConflictingFixChooser, get_fix_chooser,
)
from .source_file import SourceFile, TextBuffer
from .java_source import ImportBlock, find_import_block, has_syntax_errors
from .diff import FindingDiff, DiffNotApplicableError
from .diff_applier import DiffApplier, ApplyResult
from .metrics import log_apply_metric, read_apply_stats

__all__ = [
    "Replacement", "Replacements", "ConflictError", "apply_replacements",
    "ImportStatements", "ImportOrganizer", "StaticFirstOrganizer",
    "StaticLastOrganizer", "get_import_organizer",
    "Fix", "SuggestedFix", "Finding",
    "FixChooser", "FirstFixChooser", "LeastConflictingFixChooser", "get_fix_chooser",
    "SourceFile", "TextBuffer",
    "ImportBlock", "find_import_block", "has_syntax_errors",
    "FindingDiff", "DiffNotApplicableError",
    "DiffApplier", "ApplyResult",
    "log_apply_metric", "read_apply_stats",
]
