"""
Configuration: loads settings from .autofix.yaml, environment variables,
and built-in defaults (in that priority order: env > YAML > defaults).
"""

import os

import yaml


CONFLICT_ABORT = "abort"
CONFLICT_SKIP = "skip"
CONFLICT_POLICIES = (CONFLICT_ABORT, CONFLICT_SKIP)

_DEFAULTS = {
    "conflict_policy": CONFLICT_ABORT,
    "fix_selection": "first",
    "import_order": "static_first",
    "validate_syntax": True,
    "record_metrics": False,
    "metrics_dir": ".autofix",
}

# Config file search locations
_CONFIG_FILENAMES = [".autofix.yaml", ".autofix.yml"]


def _find_config_file(explicit_path: str | None = None) -> str | None:
    """Find the config file. Checks explicit path, CWD, then user home."""
    if explicit_path:
        if os.path.isfile(explicit_path):
            return explicit_path
        return None

    # Search CWD first, then home directory
    search_dirs = [os.getcwd(), os.path.expanduser("~")]
    for d in search_dirs:
        for name in _CONFIG_FILENAMES:
            path = os.path.join(d, name)
            if os.path.isfile(path):
                return path
    return None


def _load_yaml(path: str) -> dict:
    """Load YAML file, returns empty dict on failure."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError):
        return {}


class Config:
    """Engine configuration.

    Settings are resolved in priority order:
    1. Environment variables (``AUTOFIX_*``)
    2. .autofix.yaml config file
    3. Built-in defaults
    """

    def __init__(self, yaml_data: dict | None = None):
        yd = yaml_data or {}

        # Helper: env var > yaml > default
        def _get(env_key: str, yaml_key: str, default, cast=str):
            env_val = os.getenv(env_key)
            if env_val is not None:
                return cast(env_val)
            yaml_val = yd.get(yaml_key)
            if yaml_val is not None:
                return cast(yaml_val)
            return default

        def _get_bool(env_key: str, yaml_key: str, default: bool) -> bool:
            env_val = os.getenv(env_key)
            if env_val is not None:
                return env_val.lower() == "true"
            yaml_val = yd.get(yaml_key)
            if yaml_val is not None:
                return bool(yaml_val)
            return default

        # What to do when a fix overlaps edits already recorded for the file
        self.CONFLICT_POLICY = _get("AUTOFIX_CONFLICT_POLICY", "conflict_policy",
                                    _DEFAULTS["conflict_policy"])
        if self.CONFLICT_POLICY not in CONFLICT_POLICIES:
            raise ValueError(
                f"Invalid conflict_policy {self.CONFLICT_POLICY!r}; "
                f"expected one of {list(CONFLICT_POLICIES)}"
            )

        # Which of a finding's alternative fixes is recorded
        self.FIX_SELECTION = _get("AUTOFIX_FIX_SELECTION", "fix_selection",
                                  _DEFAULTS["fix_selection"])

        # Import grouping used when the import block is re-rendered
        self.IMPORT_ORDER = _get("AUTOFIX_IMPORT_ORDER", "import_order",
                                 _DEFAULTS["import_order"])

        self.VALIDATE_SYNTAX = _get_bool("AUTOFIX_VALIDATE_SYNTAX",
                                         "validate_syntax",
                                         _DEFAULTS["validate_syntax"])

        # JSONL apply metrics
        self.RECORD_METRICS = _get_bool("AUTOFIX_RECORD_METRICS",
                                        "record_metrics",
                                        _DEFAULTS["record_metrics"])
        self.METRICS_DIR = _get("AUTOFIX_METRICS_DIR", "metrics_dir",
                                _DEFAULTS["metrics_dir"])

    @classmethod
    def load(cls, config_path: str | None = None) -> "Config":
        """Load config from YAML file (if found) + env vars + defaults."""
        path = _find_config_file(config_path)
        yaml_data = _load_yaml(path) if path else {}
        return cls(yaml_data)
