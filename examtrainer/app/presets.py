from __future__ import annotations

"""Curated exam presets.

Presets help users pick a sensible session shape quickly without many flags.
Command-line flags override preset values; presets override config.
"""

from typing import Any, Dict

EXAM_PRESETS: Dict[str, Dict[str, Any]] = {
    "quick": {
        "count": 10,
        "mode": "practice",
        "focus": "smart",
    },
    "default": {
        "count": 17,
        "mode": "exam",
        "focus": "smart",
    },
    "full": {
        "count": 30,
        "mode": "exam",
        "focus": "all",
    },
}


def get_preset(name: str) -> Dict[str, Any]:
    try:
        return dict(EXAM_PRESETS[name])
    except KeyError:
        raise KeyError(f"Unknown preset: {name}") from None
