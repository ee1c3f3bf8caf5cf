from __future__ import annotations

"""Question bank loader (YAML).

A bank file holds the category label table and the ordered question list:

    version: 1
    categories: {key: label, ...}
    questions:
      - {id, category, difficulty, question, choices: [...], answer_index, explanation}

Rows are validated with Pydantic and turned into immutable Question records.
A bank that fails validation is a configuration error and raises ValueError.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from ..exam.models import SPECIAL_FOCUS, Question


class QuestionRow(BaseModel):
    id: str
    category: str
    difficulty: str = ""
    question: str
    choices: List[str] = Field(min_length=2)
    answer_index: int = Field(ge=0)
    explanation: str = ""

    @field_validator("id", "difficulty", mode="before")
    @classmethod
    def _stringify(cls, v: Any) -> Any:
        return str(v) if isinstance(v, (int, float)) else v

    @model_validator(mode="after")
    def _answer_in_range(self) -> "QuestionRow":
        if self.answer_index >= len(self.choices):
            raise ValueError(f"answer_index {self.answer_index} out of range for {len(self.choices)} choices")
        return self


class BankFile(BaseModel):
    version: int = 1
    categories: Dict[str, str] = Field(default_factory=dict)
    questions: List[Dict[str, Any]] = Field(default_factory=list)


@dataclass(frozen=True)
class QuestionBank:
    questions: Tuple[Question, ...]
    categories: Dict[str, str]

    def __len__(self) -> int:
        return len(self.questions)

    def label(self, category: str) -> str:
        return self.categories.get(category, category)

    def count_by_category(self) -> Dict[str, int]:
        counts = {k: 0 for k in self.categories}
        for q in self.questions:
            counts[q.category] = counts.get(q.category, 0) + 1
        return counts

    def is_valid_focus(self, focus: str) -> bool:
        return focus in SPECIAL_FOCUS or focus in self.categories


def default_bank_path() -> Path:
    return Path(__file__).resolve().parents[1] / "resources" / "banks" / "device_support.yml"


def parse_bank(data: Dict[str, Any]) -> QuestionBank:
    """Validate a raw bank mapping and build a QuestionBank."""
    try:
        raw = BankFile.model_validate(data or {})
    except ValidationError as exc:
        raise ValueError(f"Invalid question bank: {exc}") from exc

    for key in raw.categories:
        if key in SPECIAL_FOCUS:
            raise ValueError(f"Category key {key!r} is reserved")

    questions: List[Question] = []
    seen: set[str] = set()
    for pos, row_data in enumerate(raw.questions):
        qid = row_data.get("id", f"#{pos}")
        try:
            row = QuestionRow.model_validate(row_data)
        except ValidationError as exc:
            raise ValueError(f"Invalid question {qid}: {exc}") from exc
        if row.id in seen:
            raise ValueError(f"Duplicate question id: {row.id}")
        if row.category not in raw.categories:
            raise ValueError(f"Question {row.id} has unknown category: {row.category}")
        seen.add(row.id)
        questions.append(Question.from_json(row.model_dump()))
    if not questions:
        raise ValueError("Question bank has no questions")
    return QuestionBank(questions=tuple(questions), categories=dict(raw.categories))


def load_bank(path: Optional[str] = None) -> QuestionBank:
    """Load a bank from YAML; the bundled bank when path is None."""
    p = Path(path).expanduser() if path else default_bank_path()
    with p.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return parse_bank(data)
