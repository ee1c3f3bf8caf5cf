from __future__ import annotations

"""Attempt-history tables built with pandas."""

from pathlib import Path

import pandas as pd

from ..stats.profile import TrainingStats

COLUMNS = ["ts", "score", "total", "mode", "focus"]


def attempts_frame(stats: TrainingStats) -> pd.DataFrame:
    """One row per attempt, oldest first.

    Adds:
    - accuracy: float32 = score / total (NaN for empty exams)
    - attempt_idx: stable 0-based order index
    """
    rows = [
        {
            "ts": a.timestamp,
            "score": a.score,
            "total": a.total,
            "mode": a.mode,
            "focus": a.focus,
            "accuracy": a.accuracy,
        }
        for a in stats.history
    ]
    df = pd.DataFrame(rows, columns=COLUMNS + ["accuracy"])
    df["ts"] = pd.to_datetime(df["ts"], utc=True)
    df["score"] = df["score"].astype("int64")
    df["total"] = df["total"].astype("int64")
    df["mode"] = df["mode"].astype("category")
    df["accuracy"] = pd.to_numeric(df["accuracy"]).astype("float32")
    df = df.sort_values("ts", kind="stable").reset_index(drop=True)
    df["attempt_idx"] = range(len(df))
    return df


def accuracy_trend(df: pd.DataFrame, span: int = 5, by_mode: bool = False) -> pd.DataFrame:
    """Add accuracy_smooth: EWMA of accuracy over attempt order.

    With by_mode, smoothing runs separately within each mode.
    """
    g = df.sort_values("attempt_idx").copy()
    if g.empty:
        g["accuracy_smooth"] = pd.Series(dtype="float32")
        return g
    if by_mode:
        smooth = g.groupby("mode", observed=True)["accuracy"].transform(lambda s: s.ewm(span=span).mean())
    else:
        smooth = g["accuracy"].ewm(span=span).mean()
    g["accuracy_smooth"] = smooth.astype("float32")
    return g


def summarize_by_mode(df: pd.DataFrame) -> pd.DataFrame:
    """Attempts, mean accuracy and best accuracy per mode."""
    if df.empty:
        return pd.DataFrame(columns=["mode", "attempts", "mean_accuracy", "best_accuracy"])
    out = (
        df.groupby("mode", observed=True)
        .agg(
            attempts=("score", "size"),
            mean_accuracy=("accuracy", "mean"),
            best_accuracy=("accuracy", "max"),
        )
        .reset_index()
    )
    out["mode"] = out["mode"].astype("string")
    return out


def export_history(df: pd.DataFrame, out_path: Path) -> None:
    """Write NDJSON (.ndjson/.jsonl) or Parquet (.parquet) for inspection."""
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    suffix = out_path.suffix.lower()
    if suffix == ".parquet":
        df.to_parquet(out_path, engine="pyarrow", compression="zstd", index=False)
    elif suffix in (".ndjson", ".jsonl"):
        df.to_json(out_path, orient="records", lines=True, date_format="iso")
    else:
        raise ValueError(f"Unsupported export format: {out_path.suffix or '(none)'}")
