from __future__ import annotations

"""Minimal tracing helpers (Explain Mode).

Enable with the --explain flag (or ui.explain in config) to emit terse,
one-line JSON records at session milestones.
"""

import json
import sys
from typing import Any, Dict, TextIO

_ENABLED = False
_STREAM: TextIO | None = None


def enable(flag: bool = True, stream: TextIO | None = None) -> None:
    global _ENABLED, _STREAM
    _ENABLED = bool(flag)
    _STREAM = stream


def enabled() -> bool:
    return _ENABLED


def trace(event: str, payload: Dict[str, Any] | None = None) -> None:
    if not _ENABLED:
        return
    data = json.dumps(payload or {}, separators=(",", ":"), default=str)
    print(f"[EXPLAIN] {event} :: {data}", file=_STREAM or sys.stdout)
