from __future__ import annotations

"""Per-category performance profile and the cross-session stats it lives in.

The profile is a rolling correct/total tally per category. It drives the
"smart" focus: weaker categories get a larger draw weight, bounded so that
every category stays represented.
"""

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from ..exam.models import Answer, Attempt, BestScore
from .config import WeightingConfig

# Seed estimate used when nothing has been persisted yet
DEFAULT_BASELINE: Dict[str, Dict[str, int]] = {
    "privacy_security": {"correct": 19, "total": 22},
    "network": {"correct": 12, "total": 14},
    "setup_backup_restore": {"correct": 14, "total": 16},
    "apple_account_icloud": {"correct": 5, "total": 7},
}


@dataclass
class CategoryStat:
    correct: int = 0
    total: int = 0

    def __post_init__(self) -> None:
        if self.correct < 0 or self.total < 0:
            raise ValueError("CategoryStat counts must be >= 0")
        if self.correct > self.total:
            raise ValueError("CategoryStat correct must be <= total")

    def ratio(self, neutral: float = 0.5) -> float:
        return self.correct / self.total if self.total > 0 else neutral

    def percent(self) -> int:
        return int(100 * self.correct / self.total + 0.5) if self.total > 0 else 0


def weakness_weight(stat: CategoryStat, cfg: Optional[WeightingConfig] = None) -> float:
    """Draw weight for a category: clamp(offset - accuracy, min, max).

    With the defaults a perfect category weighs 0.8, an untouched one 1.3 and
    a category never answered correctly 1.6.
    """
    cfg = cfg or WeightingConfig()
    raw = cfg.offset - stat.ratio(cfg.neutral_ratio)
    return max(cfg.min_weight, min(cfg.max_weight, raw))


class PerformanceProfile:
    """Mapping category -> CategoryStat with a single mutation path."""

    def __init__(self, stats: Optional[Mapping[str, CategoryStat]] = None) -> None:
        self._stats: Dict[str, CategoryStat] = dict(stats or {})

    @classmethod
    def from_json(cls, data: Mapping[str, Mapping[str, int]]) -> "PerformanceProfile":
        return cls(
            {
                str(k): CategoryStat(correct=int(v.get("correct", 0)), total=int(v.get("total", 0)))
                for k, v in data.items()
            }
        )

    def to_json(self) -> Dict[str, Dict[str, int]]:
        return {k: {"correct": s.correct, "total": s.total} for k, s in self._stats.items()}

    def get(self, category: str) -> CategoryStat:
        """Stat for category; unknown categories read as 0/0 without being created."""
        return self._stats.get(category, CategoryStat())

    def __contains__(self, category: object) -> bool:
        return category in self._stats

    def __iter__(self) -> Iterator[str]:
        return iter(self._stats)

    def __len__(self) -> int:
        return len(self._stats)

    def items(self) -> Iterable[Tuple[str, CategoryStat]]:
        return self._stats.items()

    def record_answers(self, answers: Iterable[Answer]) -> None:
        for a in answers:
            stat = self._stats.setdefault(a.category, CategoryStat())
            stat.total += 1
            if a.correct:
                stat.correct += 1

    def weights(self, cfg: Optional[WeightingConfig] = None) -> Dict[str, float]:
        """Per-category weakness weights, computed once per exam build."""
        return {k: weakness_weight(s, cfg) for k, s in self._stats.items()}


def default_baseline(baseline: Optional[Mapping[str, Mapping[str, int]]] = None) -> PerformanceProfile:
    return PerformanceProfile.from_json(deepcopy(dict(baseline if baseline is not None else DEFAULT_BASELINE)))


@dataclass
class TrainingStats:
    """Everything persisted across sessions: best score, history, profile."""

    best: Optional[BestScore] = None
    history: List[Attempt] = field(default_factory=list)
    per_category: PerformanceProfile = field(default_factory=default_baseline)

    def copy(self) -> "TrainingStats":
        return TrainingStats(
            best=self.best,
            history=list(self.history),
            per_category=PerformanceProfile.from_json(self.per_category.to_json()),
        )


def format_chips(profile: PerformanceProfile, labels: Mapping[str, str]) -> List[str]:
    """One line per category: label correct/total (pct%)."""
    lines = []
    for key, stat in profile.items():
        label = labels.get(key, key)
        lines.append(f"{label} {stat.correct}/{stat.total} ({stat.percent()}%)")
    return lines


def format_summary(stats: TrainingStats, labels: Mapping[str, str]) -> str:
    """Return a human-readable summary of stats."""
    best = f"{stats.best.score}/{stats.best.total}" if stats.best else "--"
    lines = [f"Best score: {best}", f"Attempts: {len(stats.history)}"]
    lines.extend(f"  {chip}" for chip in format_chips(stats.per_category, labels))
    return "\n".join(lines)
