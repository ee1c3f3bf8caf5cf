from __future__ import annotations

"""Weakness weighting hyperparameters using Pydantic."""

from pydantic import BaseModel, Field, model_validator


class WeightingConfig(BaseModel):
    """Hyperparameters for turning category accuracy into a draw weight.

    - offset: weight = offset - accuracy before clamping
    - min_weight / max_weight: clamp bounds (>0)
    - neutral_ratio: accuracy assumed for categories with no history
    """

    offset: float = Field(1.8, gt=0)
    min_weight: float = Field(0.6, gt=0)
    max_weight: float = Field(1.6, gt=0)
    neutral_ratio: float = Field(0.5, ge=0, le=1)

    @model_validator(mode="after")
    def _bounds_ordered(self) -> "WeightingConfig":
        if self.min_weight > self.max_weight:
            raise ValueError("min_weight must be <= max_weight")
        return self
