import io
import tempfile
import unittest
from pathlib import Path

from factories import make_bank

from examtrainer.app import explain
from examtrainer.bank.loader import QuestionBank
from examtrainer.app.session_manager import (
    Navigate,
    ResetStats,
    Select,
    SessionManager,
    StartNewSession,
)
from examtrainer.exam.session import Phase
from examtrainer.storage.store import StatsStore
from examtrainer.util.randomness import make_rng


class SessionManagerTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "stats.json"
        self.bank = make_bank({"A": 4, "B": 4, "C": 2})
        self.sm = SessionManager(self.bank, StatsStore(self.path), rng=make_rng(11))

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _answer_all(self, correct: bool = True) -> None:
        while self.sm.session.in_progress:
            view = self.sm.question_view()
            q = self.sm.session.current_question
            self.sm.select(q.answer_index if correct else (q.answer_index + 1) % len(view.choices))
            self.sm.navigate("next")

    def test_header_before_any_session(self) -> None:
        header = self.sm.header()
        self.assertEqual(header.progress, "Question -- of --")
        self.assertEqual(header.best, "--")
        self.assertIsNone(self.sm.question_view())
        self.assertIsNone(self.sm.results_view())

    def test_question_view_unanswered(self) -> None:
        self.sm.start_session("practice", "all", 3)
        view = self.sm.question_view()
        self.assertEqual((view.position, view.total), (1, 3))
        self.assertFalse(view.locked)
        self.assertIsNone(view.answer_index)
        self.assertIsNone(view.feedback)
        self.assertFalse(view.can_go_back)
        self.assertFalse(view.is_last)
        self.assertTrue(view.category_label.startswith("Category "))
        self.assertEqual(self.sm.header().progress, "Question 1 of 3")

    def test_practice_view_reveals_feedback(self) -> None:
        self.sm.start_session("practice", "all", 2)
        q = self.sm.session.current_question
        self.sm.select(q.answer_index)
        view = self.sm.question_view()
        self.assertTrue(view.locked)
        self.assertEqual(view.chosen_index, q.answer_index)
        self.assertEqual(view.answer_index, q.answer_index)
        self.assertTrue(view.feedback.correct)
        self.assertEqual(view.feedback.explanation, q.explanation)

    def test_exam_view_hides_feedback(self) -> None:
        self.sm.start_session("exam", "all", 2)
        self.sm.select(0)
        view = self.sm.question_view()
        self.assertTrue(view.locked)
        self.assertIsNone(view.feedback)

    def test_finishing_persists_once(self) -> None:
        self.sm.start_session("exam", "smart", 3)
        self._answer_all()
        self.assertTrue(self.sm.session.finalized)
        self.assertEqual(len(self.sm.stats.history), 1)
        self.assertEqual(self.sm.last_attempt.score, 3)
        self.assertTrue(self.path.exists())

        # further navigation does not finalize again
        self.assertFalse(self.sm.navigate("next"))
        self.assertEqual(len(self.sm.stats.history), 1)

        reloaded = SessionManager(self.bank, StatsStore(self.path))
        self.assertEqual(len(reloaded.stats.history), 1)
        self.assertEqual(reloaded.header().best, "3/3")

    def test_results_view_lists_every_category_in_label_order(self) -> None:
        self.sm.start_session("practice", "A", 2)
        self._answer_all(correct=False)
        results = self.sm.results_view()
        self.assertEqual(results.score, 0)
        self.assertEqual([row.category for row in results.breakdown], ["A", "B", "C"])
        self.assertEqual(sum(row.total for row in results.breakdown), 2)
        self.assertEqual(self.sm.header().progress, "Question 2 of 2")

    def test_review_view_statuses(self) -> None:
        self.sm.start_session("practice", "all", 3)
        q = self.sm.session.current_question
        self.sm.select(q.answer_index)
        self.sm.navigate("next")
        q = self.sm.session.current_question
        self.sm.select((q.answer_index + 1) % len(q.choices))
        self.sm.navigate("next")
        self.sm.navigate("next")

        self.assertTrue(self.sm.toggle_review())
        self.assertIs(self.sm.session.phase, Phase.REVIEW)
        review = self.sm.review_view()
        self.assertEqual([item.status for item in review.items], ["correct", "wrong", "unanswered"])
        self.assertIsNone(review.items[2].your_text)
        self.assertEqual(review.score, 1)
        self.assertTrue(self.sm.toggle_review())
        self.assertIs(self.sm.session.phase, Phase.RESULTS)

    def test_empty_exam_finalizes_as_zero(self) -> None:
        self.sm.start_session("exam", "all", 0)
        self.assertTrue(self.sm.session.finished)
        self.assertEqual((self.sm.last_attempt.score, self.sm.last_attempt.total), (0, 0))

    def test_empty_bank_records_nothing(self) -> None:
        sm = SessionManager(QuestionBank(questions=(), categories={"A": "Alpha"}), StatsStore(self.path))
        with self.assertRaises(ValueError):
            sm.start_session("exam", "smart", 5)
        self.assertEqual(sm.stats.history, [])
        self.assertIsNone(sm.stats.best)
        self.assertFalse(self.path.exists())

    def test_unknown_focus_rejected(self) -> None:
        with self.assertRaises(ValueError):
            self.sm.start_session("exam", "Z", 3)

    def test_events_dispatch(self) -> None:
        session = self.sm.handle(StartNewSession(mode="exam", focus="all", count=2))
        self.assertIs(session, self.sm.session)
        self.assertFalse(self.sm.handle(Navigate("next")))
        self.assertIsNotNone(self.sm.handle(Select(1)))
        self.assertTrue(self.sm.handle(Navigate("next")))
        with self.assertRaises(TypeError):
            self.sm.handle("next")

    def test_reset_discards_session_and_file(self) -> None:
        self.sm.start_session("practice", "all", 1)
        self._answer_all()
        self.assertTrue(self.path.exists())
        stats = self.sm.handle(ResetStats())
        self.assertIsNone(self.sm.session)
        self.assertFalse(self.path.exists())
        self.assertEqual(stats.history, [])
        self.assertTrue(self.sm.chips())

    def test_explain_trace_emits_milestones(self) -> None:
        stream = io.StringIO()
        explain.enable(True, stream)
        try:
            self.sm.start_session("exam", "all", 1)
            self.sm.navigate("next")
            self._answer_all()
        finally:
            explain.enable(False)
        out = stream.getvalue()
        for event in ("exam_built", "advance_blocked", "answer_recorded", "session_finished", "stats_saved"):
            self.assertIn(f"[EXPLAIN] {event} ::", out)


if __name__ == "__main__":
    unittest.main()
