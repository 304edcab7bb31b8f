"""
autofix: merges the fixes suggested for a source file into one
conflict-free edit set and applies it.

Public API for library usage::

    from autofix import FindingDiff, SourceFile

    diff = FindingDiff.for_source("Foo.java", text)
    for finding in findings:
        diff.on_finding(finding)
    diff.apply(SourceFile("Foo.java", text))
"""

from .config import Config
from .editing import (
    ConflictError, DiffApplier, DiffNotApplicableError, Finding, FindingDiff,
    Replacement, SourceFile, SuggestedFix,
)

__all__ = [
    "Config",
    "ConflictError", "DiffApplier", "DiffNotApplicableError", "Finding",
    "FindingDiff", "Replacement", "SourceFile", "SuggestedFix",
]
