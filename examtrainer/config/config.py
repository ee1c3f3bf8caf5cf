from __future__ import annotations

"""Configuration loading and validation for ExamTrainer.

This module loads YAML configuration, applies defaults, and validates
that enumerations and counts are sane for the CLI.
"""

import sys
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import TypeAdapter, ValidationError

from ..exam.models import MODES
from ..stats.config import WeightingConfig
from ..stats.profile import DEFAULT_BASELINE
from ..storage.schema import CategoryStatRow

DEFAULT_COUNT = 17

_BASELINE_ADAPTER = TypeAdapter(Dict[str, CategoryStatRow])


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        print(f"ERROR: Config file not found: {path}", file=sys.stderr)
        sys.exit(1)


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML or defaults.

    Args:
        path: Optional path to a YAML config. If None, use package defaults.

    Returns:
        A dictionary with configuration values.
    """
    if path:
        return _load_yaml(Path(path).expanduser())
    return _load_yaml(Path(__file__).with_name("defaults.yml"))


def _positive_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        n = int(value)
    except (TypeError, ValueError):
        return None
    return n if n > 0 else None


def validate_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Apply defaults and validate configuration values.

    Unsupported enum values, bad counts and a malformed baseline fall back
    to defaults with a printed warning. The weighting section is validated strictly; an invalid
    one exits with an error since every smart exam depends on it.

    Args:
        cfg: The raw configuration dictionary.

    Returns:
        The validated and merged configuration dictionary. The "weighting"
        entry is replaced by a WeightingConfig instance.
    """
    cfg.setdefault("bank", {})
    cfg.setdefault("storage", {})
    cfg.setdefault("exam", {})
    cfg.setdefault("weighting", {})
    cfg.setdefault("ui", {})
    if cfg.get("baseline") is None:
        cfg["baseline"] = deepcopy(DEFAULT_BASELINE)

    bank = cfg["bank"]
    storage = cfg["storage"]
    exam = cfg["exam"]
    ui = cfg["ui"]

    bank.setdefault("path", None)
    storage.setdefault("path", "~/.examtrainer/stats.json")

    exam.setdefault("mode", "exam")
    exam.setdefault("focus", "smart")
    exam.setdefault("count", DEFAULT_COUNT)

    ui.setdefault("explain", False)
    ui.setdefault("show_progress", True)

    # Enum validations
    mode = exam.get("mode")
    if mode not in MODES:
        print(f"WARNING: Unsupported mode '{mode}', using 'exam'.")
        exam["mode"] = "exam"

    count = _positive_int(exam.get("count"))
    if count is None:
        print(f"WARNING: Invalid question count '{exam.get('count')}', using {DEFAULT_COUNT}.")
        count = DEFAULT_COUNT
    exam["count"] = count

    exam["focus"] = str(exam.get("focus") or "smart")

    try:
        rows = _BASELINE_ADAPTER.validate_python(cfg["baseline"])
        cfg["baseline"] = {k: row.model_dump() for k, row in rows.items()}
    except ValidationError as exc:
        print(f"WARNING: Invalid baseline section ({exc.error_count()} errors), using built-in baseline.")
        cfg["baseline"] = deepcopy(DEFAULT_BASELINE)

    weighting = cfg["weighting"]
    if not isinstance(weighting, WeightingConfig):
        try:
            cfg["weighting"] = WeightingConfig.model_validate(weighting or {})
        except ValidationError as exc:
            print(f"ERROR: Invalid weighting section: {exc}", file=sys.stderr)
            sys.exit(1)

    return cfg
