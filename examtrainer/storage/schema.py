from __future__ import annotations

"""Pydantic models for the persisted stats blob.

On disk (JSON):
{
  "schema": 1,
  "best": {"score": int, "total": int} | null,
  "history": [{"ts": iso8601, "score", "total", "mode", "focus"}],
  "perCategory": {"<category>": {"correct": int, "total": int}}
}
"""

from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

SCHEMA_VERSION = 1


class CategoryStatRow(BaseModel):
    correct: int = Field(ge=0)
    total: int = Field(ge=0)

    @model_validator(mode="after")
    def _correct_le_total(self) -> "CategoryStatRow":
        if self.correct > self.total:
            raise ValueError("correct must be <= total")
        return self


class BestRow(BaseModel):
    score: int = Field(ge=0)
    total: int = Field(ge=0)


class AttemptRow(BaseModel):
    ts: datetime
    score: int = Field(ge=0)
    total: int = Field(ge=0)
    mode: Literal["exam", "practice"]
    focus: str

    @field_validator("ts")
    @classmethod
    def _ensure_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class StatsDocument(BaseModel):
    """Whole stats blob; missing sections are back-filled by the store."""

    model_config = ConfigDict(populate_by_name=True)

    schema_version: int = Field(SCHEMA_VERSION, alias="schema")
    best: Optional[BestRow] = None
    history: List[AttemptRow] = Field(default_factory=list)
    per_category: Optional[Dict[str, CategoryStatRow]] = Field(None, alias="perCategory")
