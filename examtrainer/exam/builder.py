from __future__ import annotations

"""Exam builder: weakness-weighted question selection with shuffled choices."""

import random
from typing import List, Optional, Sequence

from ..app.explain import trace as xtrace
from ..stats.config import WeightingConfig
from ..stats.profile import PerformanceProfile
from ..util.randomness import weighted_sample
from .models import SPECIAL_FOCUS, Question
from .shuffler import shuffle_choices

# Categories the profile has never seen draw at the baseline weight
UNSEEN_CATEGORY_WEIGHT = 1.0


def candidate_pool(bank: Sequence[Question], focus: str, desired_count: int) -> List[Question]:
    """Questions eligible for this focus, widened to the whole bank when too few."""
    if focus in SPECIAL_FOCUS:
        return list(bank)
    pool = [q for q in bank if q.category == focus]
    if len(pool) < desired_count:
        xtrace("pool_widened", {"focus": focus, "available": len(pool), "wanted": desired_count})
        return list(bank)
    return pool


def build_exam(
    desired_count: int,
    focus: str,
    profile: PerformanceProfile,
    bank: Sequence[Question],
    *,
    weighting: Optional[WeightingConfig] = None,
    rng: Optional[random.Random] = None,
) -> List[Question]:
    """Assemble an ordered exam of up to desired_count distinct questions.

    focus is "smart" (weakness-weighted over the whole bank), "all" (uniform
    over the whole bank) or a category key (uniform over that category).
    A short bank yields a short exam rather than an error.

    Raises:
        ValueError: if questions are wanted but the bank is empty.
    """
    if desired_count <= 0:
        return []
    if not bank:
        raise ValueError("Cannot build an exam from an empty question bank")

    pool = candidate_pool(bank, focus, desired_count)
    if focus == "smart":
        weights = profile.weights(weighting)

        def weight_of(q: Question) -> float:
            return weights.get(q.category, UNSEEN_CATEGORY_WEIGHT)
    else:

        def weight_of(q: Question) -> float:
            return 1.0

    picked = weighted_sample(pool, desired_count, weight_of, rng)

    if len(picked) < desired_count:
        used = {q.id for q in picked}
        for q in pool:
            if len(picked) >= desired_count:
                break
            if q.id not in used:
                used.add(q.id)
                picked.append(q)

    exam = [shuffle_choices(q, rng) for q in picked]
    xtrace(
        "exam_built",
        {"focus": focus, "wanted": desired_count, "built": len(exam), "pool": len(pool)},
    )
    return exam
