from __future__ import annotations

"""CLI for ExamTrainer using SessionManager and the bundled question bank."""

import argparse
import sys
from typing import Any, Dict, Optional

from .. import __version__
from ..analytics.history import accuracy_trend, attempts_frame, export_history, summarize_by_mode
from ..config.config import load_config, validate_config
from ..exam.session import Phase
from ..stats.profile import format_summary
from ..util.randomness import seed_if_needed
from .presets import EXAM_PRESETS, get_preset
from .session_manager import QuestionView, ResultsView, ReviewView, SessionManager


_REVIEW_STATUS = {"correct": "Correct", "wrong": "Wrong", "unanswered": "Skipped"}


def _prepare(args: argparse.Namespace) -> Dict[str, Any]:
    cfg = validate_config(load_config(args.config))
    if getattr(args, "store", None):
        cfg["storage"]["path"] = args.store
    if getattr(args, "bank", None):
        cfg["bank"]["path"] = args.bank
    if getattr(args, "explain", False) or cfg["ui"].get("explain"):
        from .explain import enable as explain_enable
        explain_enable(True)
    return cfg


def _render_question(view: QuestionView, header_progress: Optional[str]) -> None:
    print()
    if header_progress:
        print(header_progress)
    print(f"[{view.category_label}] Difficulty {view.difficulty} | ID {view.id}")
    print(view.text)
    for idx, text in enumerate(view.choices):
        mark = " "
        if view.locked:
            if idx == view.answer_index:
                mark = "*"
            elif idx == view.chosen_index:
                mark = "x"
        print(f" {mark} {idx + 1}) {text}")
    if view.feedback is not None:
        print("Correct." if view.feedback.correct else "Incorrect.")
        if view.feedback.explanation:
            print(view.feedback.explanation)


def _render_results(view: ResultsView) -> None:
    print()
    print(f"Result: {view.score}/{view.total} ({view.mode}, focus {view.focus})")
    print("Breakdown by topic:")
    for row in view.breakdown:
        print(f"  {row.label}: {row.correct}/{row.total}")


def _render_review(view: ReviewView) -> None:
    print()
    print(f"Review: {view.score}/{view.total}")
    for i, item in enumerate(view.items, start=1):
        print(f"{i}. [{item.label}] {_REVIEW_STATUS[item.status]}")
        print(f"   {item.question}")
        print(f"   Correct answer: {item.correct_text}")
        print(f"   Your answer: {item.your_text if item.your_text is not None else 'Not answered'}")
        if item.explanation:
            print(f"   {item.explanation}")


def _run_interactive(sm: SessionManager, mode: str, focus: str, count: int, show_progress: bool) -> int:
    sm.start_session(mode, focus, count)
    while True:
        session = sm.session
        if session is None:
            return 0
        try:
            if session.in_progress:
                view = sm.question_view()
                _render_question(view, sm.header().progress if show_progress else None)
                next_label = "finish" if view.is_last else "next"
                raw = input(f"Choice (1-{len(view.choices)}), 'b' back, 'n' {next_label}, 'q' quit: ")
                cmd = raw.strip().lower()
                if cmd == "q":
                    print("Session abandoned; nothing recorded.")
                    return 0
                if cmd == "b":
                    sm.navigate("back")
                elif cmd == "n":
                    if not sm.navigate("next"):
                        print("Answer this question before moving on.")
                elif cmd.isdigit():
                    if sm.select(int(cmd) - 1) is None:
                        print("Answer not accepted.")
                    elif mode == "exam":
                        print("Answer recorded.")
                else:
                    print(f"Unrecognized input: '{raw.strip()}'")
                continue

            if session.phase is Phase.REVIEW:
                _render_review(sm.review_view())
                prompt = "'r' results, 's' new session, 'q' quit: "
            else:
                _render_results(sm.results_view())
                prompt = "'r' review answers, 's' new session, 'q' quit: "
            cmd = input(prompt).strip().lower()
            if cmd == "q":
                return 0
            if cmd == "r":
                sm.toggle_review()
            elif cmd == "s":
                sm.start_session(mode, focus, count)
        except EOFError:
            print()
            return 0
        except OSError as exc:
            # the attempt stays in memory; only the write failed
            print(f"ERROR: Could not save stats to {sm.store.path}: {exc}", file=sys.stderr)


def _cmd_run(args: argparse.Namespace) -> int:
    cfg = _prepare(args)
    seed_if_needed(args.seed)

    exam_cfg = dict(cfg["exam"])
    if args.preset:
        exam_cfg.update(get_preset(args.preset))
    for key in ("mode", "focus", "count"):
        value = getattr(args, key)
        if value is not None:
            exam_cfg[key] = value
    if exam_cfg["count"] <= 0:
        print("ERROR: --count must be a positive integer", file=sys.stderr)
        return 2

    sm = SessionManager.from_config(cfg)
    if not sm.bank.is_valid_focus(exam_cfg["focus"]):
        choices = ", ".join(["smart", "all", *sm.bank.categories])
        print(f"ERROR: Unknown focus '{exam_cfg['focus']}'. Choose one of: {choices}", file=sys.stderr)
        return 2

    print(f"Mode: {exam_cfg['mode']} | Best score: {sm.header().best}")
    return _run_interactive(
        sm,
        exam_cfg["mode"],
        exam_cfg["focus"],
        int(exam_cfg["count"]),
        bool(cfg["ui"].get("show_progress", True)),
    )


def _cmd_stats(args: argparse.Namespace) -> int:
    sm = SessionManager.from_config(_prepare(args))
    print(format_summary(sm.stats, sm.bank.categories))
    return 0


def _cmd_history(args: argparse.Namespace) -> int:
    sm = SessionManager.from_config(_prepare(args))
    df = attempts_frame(sm.stats)
    if df.empty:
        print("No attempts recorded yet.")
        return 0
    trend = accuracy_trend(df, span=args.span)
    cols = ["ts", "mode", "focus", "score", "total", "accuracy", "accuracy_smooth"]
    print(trend[cols].tail(args.last).to_string(index=False))
    print()
    print(summarize_by_mode(df).to_string(index=False))
    if args.export:
        export_history(trend, args.export)
        print(f"Exported {len(trend)} attempts to {args.export}")
    return 0


def _cmd_reset(args: argparse.Namespace) -> int:
    sm = SessionManager.from_config(_prepare(args))
    sm.reset_stats()
    print("Stats cleared.")
    return 0


def _cmd_list_categories(args: argparse.Namespace) -> int:
    sm = SessionManager.from_config(_prepare(args))
    counts = sm.bank.count_by_category()
    for key, label in sm.bank.categories.items():
        print(f"{key}: {label} ({counts.get(key, 0)} questions)")
    return 0


def _cmd_list_presets(args: argparse.Namespace) -> int:
    for name, params in EXAM_PRESETS.items():
        print(f"{name}: {params}")
    return 0


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="examtrainer", description="Adaptive multiple-choice exam trainer")
    p.add_argument("--version", action="version", version=f"examtrainer {__version__}")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", default=None, help="Path to YAML config")
    common.add_argument("--store", default=None, help="Stats file path (overrides config)")
    common.add_argument("--bank", default=None, help="Question bank YAML (overrides config)")
    common.add_argument("--explain", action="store_true", help="Trace session milestones")

    sub = p.add_subparsers(dest="cmd", required=True)

    rp = sub.add_parser("run", parents=[common], help="Take an exam")
    rp.add_argument("--preset", default=None, choices=sorted(EXAM_PRESETS))
    rp.add_argument("--mode", default=None, choices=["exam", "practice"])
    rp.add_argument("--focus", default=None, help="smart, all, or a category key")
    rp.add_argument("--count", type=int, default=None)
    rp.add_argument("--seed", type=int, default=None, help="Seed the random source")
    rp.set_defaults(func=_cmd_run)

    sp = sub.add_parser("stats", parents=[common], help="Show best score and category chips")
    sp.set_defaults(func=_cmd_stats)

    hp = sub.add_parser("history", parents=[common], help="Show attempt history")
    hp.add_argument("--last", type=int, default=10)
    hp.add_argument("--span", type=int, default=5, help="EWMA span in attempts")
    hp.add_argument("--export", default=None, help="Write history to .ndjson/.jsonl/.parquet")
    hp.set_defaults(func=_cmd_history)

    xp = sub.add_parser("reset", parents=[common], help="Clear persisted stats")
    xp.set_defaults(func=_cmd_reset)

    lp = sub.add_parser("list-categories", parents=[common], help="List bank categories")
    lp.set_defaults(func=_cmd_list_categories)

    pp = sub.add_parser("list-presets", help="List exam presets")
    pp.set_defaults(func=_cmd_list_presets)

    args = p.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
