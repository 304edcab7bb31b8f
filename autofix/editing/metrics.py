"""
Apply metrics: one JSONL line per file a :class:`DiffApplier` run touched.

A line records whether the file's diff was written, how many replacements
it carried, how many fixes conflicted and whether its import block changed.
:func:`read_apply_stats` folds the most recent lines into rates.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

_METRICS_DIR = ".autofix"
_METRICS_FILE = "apply_metrics.jsonl"

_EMPTY_STATS = {
    "total_files": 0,
    "success_rate": 0.0,
    "conflict_rate": 0.0,
    "avg_replacements": 0.0,
    "import_change_rate": 0.0,
}


def _metrics_path(project_root: str | None, metrics_dir: str) -> str:
    return os.path.join(project_root or os.getcwd(), metrics_dir, _METRICS_FILE)


def log_apply_metric(
    data: dict,
    project_root: str | None = None,
    metrics_dir: str = _METRICS_DIR,
) -> None:
    """Record the outcome of applying one file's diff.

    *data* normally carries ``file`` and ``success``, plus ``replacements``,
    ``conflicts``, ``imports_changed`` or ``error`` as the applier knows
    them.  A timestamp is added.  The log lives at
    ``<project_root>/<metrics_dir>/apply_metrics.jsonl``; an unwritable log
    is logged as a warning and does not raise.
    """
    path = _metrics_path(project_root, metrics_dir)
    os.makedirs(os.path.dirname(path), exist_ok=True)

    entry = {"timestamp": datetime.now(timezone.utc).isoformat(), **data}
    try:
        with open(path, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry) + "\n")
    except OSError as exc:
        logger.warning("[Autofix] Could not record apply outcome for %s: %s",
                       data.get("file", "?"), exc)


def _read_outcomes(path: str) -> list[dict]:
    """Load every parseable outcome line; corrupt lines are dropped."""
    if not os.path.isfile(path):
        return []
    outcomes: list[dict] = []
    try:
        with open(path, "r", encoding="utf-8") as f:
            for raw in f:
                raw = raw.strip()
                if not raw:
                    continue
                try:
                    outcomes.append(json.loads(raw))
                except json.JSONDecodeError:
                    logger.debug("[Autofix] Dropping corrupt metrics line in %s", path)
    except OSError as exc:
        logger.warning("[Autofix] Failed to read metrics: %s", exc)
    return outcomes


def read_apply_stats(
    last_n: int = 50,
    project_root: str | None = None,
    metrics_dir: str = _METRICS_DIR,
) -> dict:
    """Summarise the last *last_n* file outcomes.

    Rates are percentages of those files: ``success_rate`` (diff written),
    ``conflict_rate`` (at least one fix conflicted) and
    ``import_change_rate``.  ``avg_replacements`` averages over the
    outcomes that reported a replacement count.
    """
    outcomes = _read_outcomes(_metrics_path(project_root, metrics_dir))[-last_n:]
    if not outcomes:
        return dict(_EMPTY_STATS)

    total = len(outcomes)
    written = sum(1 for o in outcomes if o.get("success", False))
    conflicted = sum(1 for o in outcomes if o.get("conflicts", 0) > 0)
    import_changes = sum(1 for o in outcomes if o.get("imports_changed", False))
    counts = [o["replacements"] for o in outcomes if "replacements" in o]

    return {
        "total_files": total,
        "success_rate": written / total * 100,
        "conflict_rate": conflicted / total * 100,
        "avg_replacements": sum(counts) / len(counts) if counts else 0.0,
        "import_change_rate": import_changes / total * 100,
    }
