from __future__ import annotations

"""Per-question choice shuffling that keeps the answer pointer valid."""

import random
from typing import Optional

from ..util.randomness import shuffle
from .models import Question


def shuffle_choices(question: Question, rng: Optional[random.Random] = None) -> Question:
    """Return a copy of question with its choices in random order.

    The new answer_index points at the same correct text; the input
    question is left untouched.
    """
    order = shuffle(range(len(question.choices)), rng)
    choices = tuple(question.choices[i] for i in order)
    return question.with_choices(choices, order.index(question.answer_index))
