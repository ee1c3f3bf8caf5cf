"""ExamTrainer package initialization.

Adaptive multiple-choice exam sessions: questions are drawn with a bias
toward historically weak categories, answers are scored per category, and
the results feed back into the profile used by the next session.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
