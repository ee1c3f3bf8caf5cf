from __future__ import annotations

"""Exam record types: questions, answers and attempts."""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

MODES = ("exam", "practice")
SPECIAL_FOCUS = ("smart", "all")


@dataclass(frozen=True)
class Question:
    """One multiple-choice question as loaded from the bank.

    Never mutated; the builder hands out derived copies with the choices
    reordered and answer_index remapped.
    """

    id: str
    category: str
    difficulty: str
    question: str
    choices: Tuple[str, ...]
    answer_index: int
    explanation: str = ""

    def __post_init__(self) -> None:
        if len(self.choices) < 2:
            raise ValueError(f"Question {self.id!r} needs at least two choices")
        if not 0 <= self.answer_index < len(self.choices):
            raise ValueError(
                f"Question {self.id!r} answer_index {self.answer_index} out of range 0..{len(self.choices) - 1}"
            )

    @property
    def correct_text(self) -> str:
        return self.choices[self.answer_index]

    def with_choices(self, choices: Tuple[str, ...], answer_index: int) -> "Question":
        return replace(self, choices=tuple(choices), answer_index=answer_index)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Question":
        return cls(
            id=str(data["id"]),
            category=str(data["category"]),
            difficulty=str(data.get("difficulty", "")),
            question=str(data["question"]),
            choices=tuple(str(c) for c in data["choices"]),
            answer_index=int(data["answer_index"]),
            explanation=str(data.get("explanation", "")),
        )


@dataclass(frozen=True)
class Answer:
    question_id: str
    chosen_index: int
    correct: bool
    category: str


@dataclass(frozen=True)
class BestScore:
    score: int
    total: int

    def beaten_by(self, score: int, total: int) -> bool:
        """Higher score wins; equal score wins on the longer exam."""
        return score > self.score or (score == self.score and total > self.total)


@dataclass(frozen=True)
class Attempt:
    """Append-only history entry for one finished session."""

    timestamp: datetime
    score: int
    total: int
    mode: str
    focus: str

    @property
    def accuracy(self) -> Optional[float]:
        if self.total <= 0:
            return None
        return self.score / self.total
