from __future__ import annotations

"""JSON-file store for cross-session training stats.

One file holds the whole blob. Loading never fails: a missing file gives the
seeded default, and an unreadable or invalid file is treated the same way.
Saves replace the file atomically.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from ..app.explain import trace as xtrace
from ..exam.models import Attempt, BestScore
from ..stats.profile import PerformanceProfile, TrainingStats, default_baseline
from .schema import SCHEMA_VERSION, StatsDocument

DEFAULT_STATS_FILE = "~/.examtrainer/stats.json"


def to_document(stats: TrainingStats) -> Dict[str, Any]:
    """Serialize stats to the JSON-ready blob."""
    doc = StatsDocument(
        schema=SCHEMA_VERSION,
        best=({"score": stats.best.score, "total": stats.best.total} if stats.best else None),
        history=[
            {"ts": a.timestamp, "score": a.score, "total": a.total, "mode": a.mode, "focus": a.focus}
            for a in stats.history
        ],
        perCategory=stats.per_category.to_json(),
    )
    return doc.model_dump(mode="json", by_alias=True)


def from_document(
    data: Any,
    baseline: Optional[Mapping[str, Mapping[str, int]]] = None,
) -> TrainingStats:
    """Parse a raw blob, back-filling missing sections.

    Raises:
        ValidationError: if the blob does not match the schema.
    """
    doc = StatsDocument.model_validate(data)
    if doc.per_category is None:
        profile = default_baseline(baseline)
    else:
        profile = PerformanceProfile.from_json({k: v.model_dump() for k, v in doc.per_category.items()})
    return TrainingStats(
        best=BestScore(score=doc.best.score, total=doc.best.total) if doc.best else None,
        history=[
            Attempt(timestamp=row.ts, score=row.score, total=row.total, mode=row.mode, focus=row.focus)
            for row in doc.history
        ],
        per_category=profile,
    )


class StatsStore:
    def __init__(
        self,
        path: str | Path = DEFAULT_STATS_FILE,
        baseline: Optional[Mapping[str, Mapping[str, int]]] = None,
    ) -> None:
        self.path = Path(path).expanduser()
        self.baseline = baseline

    def default(self) -> TrainingStats:
        return TrainingStats(per_category=default_baseline(self.baseline))

    def load(self) -> TrainingStats:
        if not self.path.exists():
            return self.default()
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            stats = from_document(raw, self.baseline)
        except (OSError, ValueError, ValidationError) as exc:
            xtrace("stats_recovered", {"path": str(self.path), "error": type(exc).__name__})
            return self.default()
        xtrace("stats_loaded", {"path": str(self.path), "attempts": len(stats.history)})
        return stats

    def save(self, stats: TrainingStats) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(to_document(stats), indent=2)
        fd, tmp = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
        xtrace("stats_saved", {"path": str(self.path), "attempts": len(stats.history)})

    def reset(self) -> TrainingStats:
        """Forget everything and return the seeded default."""
        self.path.unlink(missing_ok=True)
        xtrace("stats_reset", {"path": str(self.path)})
        return self.default()
