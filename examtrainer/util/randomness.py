from __future__ import annotations

"""Randomness helpers: seeding, unbiased shuffle and weighted picks."""

import math
import os
import random
from bisect import bisect_right
from itertools import accumulate
from typing import Callable, List, Optional, Sequence, TypeVar

T = TypeVar("T")

# Weights at or below zero (or not numbers at all) are lifted to this floor
WEIGHT_FLOOR = 0.0001


def seed_if_needed(seed: Optional[int] = None) -> Optional[int]:
    """Seed the global RNG from an explicit seed or the SEED env var.

    Returns the seed actually used, or None when nothing was seeded.
    """
    if seed is None:
        raw = os.environ.get("SEED")
        if raw is None:
            return None
        try:
            seed = int(raw)
        except ValueError:
            return None
    random.seed(seed)
    return seed


def make_rng(seed: Optional[int] = None) -> random.Random:
    """Create an independent Random instance (seeded when a seed is given)."""
    return random.Random(seed)


def _coerce_weight(value) -> float:
    try:
        w = float(value)
    except (TypeError, ValueError):
        return WEIGHT_FLOOR
    if math.isnan(w) or w <= 0:
        return WEIGHT_FLOOR
    return w


def shuffle(items: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """Return a uniformly random permutation of items (Fisher-Yates).

    The input is never mutated.
    """
    rng = rng or random
    out = list(items)
    for i in range(len(out) - 1, 0, -1):
        j = rng.randrange(i + 1)
        out[i], out[j] = out[j], out[i]
    return out


def weighted_pick(
    items: Sequence[T],
    weight_fn: Callable[[T], float],
    rng: Optional[random.Random] = None,
) -> T:
    """Pick one item with probability proportional to weight_fn(item).

    Raises:
        ValueError: if items is empty.
    """
    if not items:
        raise ValueError("weighted_pick requires at least one item")
    rng = rng or random
    cumulative = list(accumulate(_coerce_weight(weight_fn(it)) for it in items))
    r = rng.random() * cumulative[-1]
    idx = bisect_right(cumulative, r)
    # floating-point tail
    return items[min(idx, len(items) - 1)]


def weighted_sample(
    items: Sequence[T],
    k: int,
    weight_fn: Callable[[T], float],
    rng: Optional[random.Random] = None,
) -> List[T]:
    """Draw up to k distinct items, weighted, without replacement.

    Each draw removes the chosen item from the remaining pool, so the loop
    finishes after exactly min(k, len(items)) draws. Output is draw order.
    """
    rng = rng or random
    remaining = list(items)
    weights = [_coerce_weight(weight_fn(it)) for it in remaining]
    picked: List[T] = []
    while remaining and len(picked) < k:
        cumulative = list(accumulate(weights))
        r = rng.random() * cumulative[-1]
        idx = min(bisect_right(cumulative, r), len(remaining) - 1)
        picked.append(remaining.pop(idx))
        weights.pop(idx)
    return picked
