from __future__ import annotations

"""Exam session state machine.

One attempt at an exam: a fixed question list, a pointer to the current
question and the answers recorded so far. UI-free; the presentation layer
drives it through submit_answer/advance and reads it back for rendering.

Two rules hold under any sequence of back/next navigation:
- a question accepts at most one answer (later submissions are ignored)
- in exam mode, "next" is refused until the current question is answered
"""

import random
from enum import Enum
from typing import Dict, List, Optional, Sequence

from ..app.explain import trace as xtrace
from ..stats.config import WeightingConfig
from ..stats.profile import PerformanceProfile
from .builder import build_exam
from .models import MODES, Answer, Question

DIRECTIONS = ("back", "next")


class Phase(str, Enum):
    BUILDING = "building"
    IN_PROGRESS = "in_progress"
    RESULTS = "results"
    REVIEW = "review"


class ExamSession:
    def __init__(self, mode: str = "exam", focus: str = "smart", requested_count: int = 0) -> None:
        if mode not in MODES:
            raise ValueError(f"Unknown mode: {mode}")
        self.mode = mode
        self.focus = focus
        self.requested_count = requested_count
        self.phase = Phase.BUILDING
        self.questions: List[Question] = []
        self.current_index = 0
        self._answers: Dict[str, Answer] = {}
        self.finalized = False

    def start(self, questions: Sequence[Question]) -> None:
        """Load the built questions and begin at the first one.

        An empty exam has nothing to answer and finishes immediately.
        """
        self.questions = list(questions)
        self.current_index = 0
        self._answers = {}
        self.finalized = False
        self.phase = Phase.IN_PROGRESS if self.questions else Phase.RESULTS

    # --- read side ---

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def answers(self) -> List[Answer]:
        """Answers in the order they were given."""
        return list(self._answers.values())

    @property
    def in_progress(self) -> bool:
        return self.phase is Phase.IN_PROGRESS

    @property
    def finished(self) -> bool:
        return self.phase in (Phase.RESULTS, Phase.REVIEW)

    @property
    def reveals_feedback(self) -> bool:
        return self.mode == "practice"

    @property
    def current_question(self) -> Optional[Question]:
        if self.in_progress and 0 <= self.current_index < len(self.questions):
            return self.questions[self.current_index]
        return None

    def answer_for(self, question_id: str) -> Optional[Answer]:
        return self._answers.get(question_id)

    # --- events ---

    def submit_answer(self, chosen_index: int) -> Optional[Answer]:
        """Record an answer for the current question.

        Returns the new Answer, or None when the submission is ignored
        (session not in progress, question already answered, index out of range).
        """
        q = self.current_question
        if q is None:
            return None
        if q.id in self._answers:
            xtrace("answer_rejected", {"id": q.id, "reason": "already_answered"})
            return None
        if not 0 <= chosen_index < len(q.choices):
            xtrace("answer_rejected", {"id": q.id, "reason": "out_of_range", "chosen": chosen_index})
            return None
        answer = Answer(
            question_id=q.id,
            chosen_index=chosen_index,
            correct=chosen_index == q.answer_index,
            category=q.category,
        )
        self._answers[q.id] = answer
        xtrace("answer_recorded", {"id": q.id, "chosen": chosen_index, "correct": answer.correct})
        return answer

    def advance(self, direction: str) -> bool:
        """Move back or forward; returns False when the move is refused.

        Moving forward from the last question finishes the session.
        """
        if direction not in DIRECTIONS:
            raise ValueError(f"Unknown direction: {direction}")
        if not self.in_progress:
            return False
        if direction == "back":
            if self.current_index == 0:
                return False
            self.current_index -= 1
            return True

        q = self.questions[self.current_index]
        if self.mode == "exam" and q.id not in self._answers:
            xtrace("advance_blocked", {"index": self.current_index, "id": q.id})
            return False
        self.current_index += 1
        if self.current_index >= len(self.questions):
            self.phase = Phase.RESULTS
        return True

    def show_review(self) -> bool:
        if not self.finished:
            return False
        self.phase = Phase.REVIEW
        return True

    def show_results(self) -> bool:
        if not self.finished:
            return False
        self.phase = Phase.RESULTS
        return True


def start_exam(
    mode: str,
    focus: str,
    count: int,
    profile: PerformanceProfile,
    bank: Sequence[Question],
    *,
    weighting: Optional[WeightingConfig] = None,
    rng: Optional[random.Random] = None,
) -> ExamSession:
    """Build an exam from the bank and return a session ready for the first answer."""
    session = ExamSession(mode=mode, focus=focus, requested_count=count)
    session.start(build_exam(count, focus, profile, bank, weighting=weighting, rng=rng))
    return session
