from __future__ import annotations

"""Session Manager: orchestrates the bank, stats store and exam sessions.

Front-end agnostic. A presentation layer sends UI events through handle()
(or the matching methods) and renders the read-only views returned by
question_view(), results_view(), review_view() and header().
"""

import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

from ..bank.loader import QuestionBank, load_bank
from ..exam.models import Answer, Attempt
from ..exam.scoring import breakdown, finalize_session, score
from ..exam.session import ExamSession, Phase, start_exam
from ..stats.config import WeightingConfig
from ..stats.profile import TrainingStats, format_chips
from ..storage.store import StatsStore


# --- UI events ---


@dataclass(frozen=True)
class Select:
    choice_index: int


@dataclass(frozen=True)
class Navigate:
    direction: str  # "back" | "next"


@dataclass(frozen=True)
class StartNewSession:
    mode: str
    focus: str
    count: int


@dataclass(frozen=True)
class ResetStats:
    pass


UiEvent = Union[Select, Navigate, StartNewSession, ResetStats]


# --- views ---


@dataclass(frozen=True)
class Feedback:
    correct: bool
    explanation: str


@dataclass(frozen=True)
class QuestionView:
    category_label: str
    difficulty: str
    id: str
    text: str
    choices: Tuple[str, ...]
    position: int
    total: int
    locked: bool
    chosen_index: Optional[int]
    answer_index: Optional[int]
    feedback: Optional[Feedback]
    can_go_back: bool
    is_last: bool


@dataclass(frozen=True)
class BreakdownRow:
    category: str
    label: str
    correct: int
    total: int


@dataclass(frozen=True)
class ResultsView:
    score: int
    total: int
    mode: str
    focus: str
    breakdown: Tuple[BreakdownRow, ...]


@dataclass(frozen=True)
class ReviewItem:
    label: str
    status: str  # "correct" | "wrong" | "unanswered"
    question: str
    correct_text: str
    your_text: Optional[str]
    explanation: str


@dataclass(frozen=True)
class ReviewView:
    score: int
    total: int
    items: Tuple[ReviewItem, ...]


@dataclass(frozen=True)
class HeaderView:
    mode: str
    best: str
    progress: str


class SessionManager:
    def __init__(
        self,
        bank: QuestionBank,
        store: StatsStore,
        *,
        weighting: Optional[WeightingConfig] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.bank = bank
        self.store = store
        self.weighting = weighting or WeightingConfig()
        self.rng = rng
        self.stats: TrainingStats = store.load()
        self.session: Optional[ExamSession] = None
        self.last_attempt: Optional[Attempt] = None

    @classmethod
    def from_config(cls, cfg: Dict[str, Any], rng: Optional[random.Random] = None) -> "SessionManager":
        bank = load_bank(cfg["bank"].get("path"))
        store = StatsStore(cfg["storage"]["path"], baseline=cfg.get("baseline"))
        return cls(bank, store, weighting=cfg["weighting"], rng=rng)

    # --- events ---

    def handle(self, event: UiEvent) -> Any:
        if isinstance(event, Select):
            return self.select(event.choice_index)
        if isinstance(event, Navigate):
            return self.navigate(event.direction)
        if isinstance(event, StartNewSession):
            return self.start_session(event.mode, event.focus, event.count)
        if isinstance(event, ResetStats):
            return self.reset_stats()
        raise TypeError(f"Unsupported event: {event!r}")

    def start_session(self, mode: str, focus: str, count: int) -> ExamSession:
        """Discard any current session and start a new one."""
        if not self.bank.is_valid_focus(focus):
            raise ValueError(f"Unknown focus: {focus}")
        self.last_attempt = None
        self.session = start_exam(
            mode,
            focus,
            count,
            self.stats.per_category,
            self.bank.questions,
            weighting=self.weighting,
            rng=self.rng,
        )
        self._finish_if_needed()
        return self.session

    def select(self, choice_index: int) -> Optional[Answer]:
        if self.session is None:
            return None
        return self.session.submit_answer(choice_index)

    def navigate(self, direction: str) -> bool:
        if self.session is None:
            return False
        moved = self.session.advance(direction)
        if moved:
            self._finish_if_needed()
        return moved

    def toggle_review(self) -> bool:
        """Switch between the results and review views of a finished session."""
        if self.session is None or not self.session.finished:
            return False
        if self.session.phase is Phase.REVIEW:
            return self.session.show_results()
        return self.session.show_review()

    def reset_stats(self) -> TrainingStats:
        self.stats = self.store.reset()
        self.session = None
        self.last_attempt = None
        return self.stats

    def _finish_if_needed(self) -> None:
        s = self.session
        if s is None or not s.finished or s.finalized:
            return
        self.last_attempt, self.stats = finalize_session(s, self.stats)
        self.store.save(self.stats)

    # --- views ---

    def question_view(self) -> Optional[QuestionView]:
        s = self.session
        q = s.current_question if s else None
        if s is None or q is None:
            return None
        prev = s.answer_for(q.id)
        feedback = None
        if prev is not None and s.reveals_feedback:
            feedback = Feedback(correct=prev.correct, explanation=q.explanation)
        return QuestionView(
            category_label=self.bank.label(q.category),
            difficulty=q.difficulty,
            id=q.id,
            text=q.question,
            choices=q.choices,
            position=s.current_index + 1,
            total=s.total_questions,
            locked=prev is not None,
            chosen_index=prev.chosen_index if prev else None,
            answer_index=q.answer_index if prev else None,
            feedback=feedback,
            can_go_back=s.current_index > 0,
            is_last=s.current_index == s.total_questions - 1,
        )

    def _category_order(self, keys) -> List[str]:
        ordered = [k for k in self.bank.categories if k in keys]
        ordered.extend(k for k in keys if k not in self.bank.categories)
        return ordered

    def results_view(self) -> Optional[ResultsView]:
        s = self.session
        if s is None or not s.finished:
            return None
        per_cat = breakdown(s.answers, self.bank.categories)
        rows = tuple(
            BreakdownRow(category=k, label=self.bank.label(k), correct=per_cat[k].correct, total=per_cat[k].total)
            for k in self._category_order(per_cat)
        )
        return ResultsView(
            score=score(s.answers, s.total_questions),
            total=s.total_questions,
            mode=s.mode,
            focus=s.focus,
            breakdown=rows,
        )

    def review_view(self) -> Optional[ReviewView]:
        s = self.session
        if s is None or not s.finished:
            return None
        items = []
        for q in s.questions:
            a = s.answer_for(q.id)
            if a is None:
                status = "unanswered"
            else:
                status = "correct" if a.correct else "wrong"
            items.append(
                ReviewItem(
                    label=self.bank.label(q.category),
                    status=status,
                    question=q.question,
                    correct_text=q.correct_text,
                    your_text=q.choices[a.chosen_index] if a else None,
                    explanation=q.explanation,
                )
            )
        return ReviewView(score=score(s.answers, s.total_questions), total=s.total_questions, items=tuple(items))

    def header(self) -> HeaderView:
        best = self.stats.best
        s = self.session
        if s is None:
            progress = "Question -- of --"
        else:
            total = s.total_questions
            progress = f"Question {min(s.current_index + 1, total)} of {total}"
        return HeaderView(
            mode=s.mode if s else "--",
            best=f"{best.score}/{best.total}" if best else "--",
            progress=progress,
        )

    def chips(self) -> List[str]:
        return format_chips(self.stats.per_category, self.bank.categories)

