from __future__ import annotations

"""Scoring, per-category breakdown and end-of-session bookkeeping."""

from datetime import datetime, timezone
from typing import Dict, Iterable, Optional, Tuple

from ..app.explain import trace as xtrace
from ..stats.profile import CategoryStat, TrainingStats
from .models import Answer, Attempt, BestScore
from .session import ExamSession


def score(answers: Iterable[Answer], total_questions: int) -> int:
    """Number of correct answers, clamped to [0, total_questions]."""
    correct = sum(1 for a in answers if a.correct)
    return max(0, min(int(total_questions), correct))


def breakdown(answers: Iterable[Answer], all_categories: Iterable[str]) -> Dict[str, CategoryStat]:
    """Per-category correct/total for this session's answers only.

    Every key of all_categories is present, zero/zero when unanswered.
    """
    out: Dict[str, CategoryStat] = {}
    for a in answers:
        stat = out.setdefault(a.category, CategoryStat())
        stat.total += 1
        if a.correct:
            stat.correct += 1
    for cat in all_categories:
        out.setdefault(cat, CategoryStat())
    return out


def finalize_session(
    session: ExamSession,
    stats: TrainingStats,
    *,
    now: Optional[datetime] = None,
) -> Tuple[Attempt, TrainingStats]:
    """Fold a finished session into the cross-session stats.

    Returns the new Attempt and an updated copy of stats (best score,
    per-category profile and history). The input stats are not modified.

    Raises:
        RuntimeError: if the session is not finished or was already finalized.
    """
    if not session.finished:
        raise RuntimeError("Cannot finalize a session that has not finished")
    if session.finalized:
        raise RuntimeError("Session already finalized")

    total = session.total_questions
    answers = session.answers
    safe_score = score(answers, total)
    attempt = Attempt(
        timestamp=now or datetime.now(timezone.utc),
        score=safe_score,
        total=total,
        mode=session.mode,
        focus=session.focus,
    )

    updated = stats.copy()
    if updated.best is None or updated.best.beaten_by(safe_score, total):
        updated.best = BestScore(score=safe_score, total=total)
    updated.per_category.record_answers(answers)
    updated.history.append(attempt)
    session.finalized = True

    xtrace(
        "session_finished",
        {"score": safe_score, "total": total, "mode": session.mode, "focus": session.focus},
    )
    return attempt, updated

