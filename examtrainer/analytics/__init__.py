from .history import accuracy_trend, attempts_frame, export_history, summarize_by_mode

__all__ = [
    "attempts_frame",
    "accuracy_trend",
    "summarize_by_mode",
    "export_history",
]
