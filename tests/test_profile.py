import unittest

from pydantic import ValidationError

from examtrainer.exam.models import Answer
from examtrainer.stats.config import WeightingConfig
from examtrainer.stats.profile import (
    DEFAULT_BASELINE,
    CategoryStat,
    PerformanceProfile,
    TrainingStats,
    default_baseline,
    format_chips,
    format_summary,
    weakness_weight,
)


class WeaknessWeightTests(unittest.TestCase):
    def test_reference_points(self) -> None:
        self.assertAlmostEqual(weakness_weight(CategoryStat(10, 10)), 0.8)
        self.assertAlmostEqual(weakness_weight(CategoryStat(0, 10)), 1.6)
        self.assertAlmostEqual(weakness_weight(CategoryStat(0, 0)), 1.3)
        self.assertAlmostEqual(weakness_weight(CategoryStat(5, 10)), 1.3)

    def test_always_within_bounds(self) -> None:
        for total in range(0, 12):
            for correct in range(0, total + 1):
                w = weakness_weight(CategoryStat(correct, total))
                self.assertGreaterEqual(w, 0.6)
                self.assertLessEqual(w, 1.6)

    def test_non_increasing_in_correct(self) -> None:
        total = 20
        weights = [weakness_weight(CategoryStat(c, total)) for c in range(total + 1)]
        for lower, higher in zip(weights, weights[1:]):
            self.assertGreaterEqual(lower, higher)

    def test_custom_config_clamps(self) -> None:
        cfg = WeightingConfig(offset=3.0, min_weight=1.0, max_weight=2.0)
        self.assertEqual(weakness_weight(CategoryStat(0, 4), cfg), 2.0)
        cfg = WeightingConfig(offset=1.0, min_weight=0.5, max_weight=2.0)
        self.assertEqual(weakness_weight(CategoryStat(4, 4), cfg), 0.5)

    def test_invalid_config_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            WeightingConfig(min_weight=2.0, max_weight=1.0)
        with self.assertRaises(ValidationError):
            WeightingConfig(neutral_ratio=1.5)


class CategoryStatTests(unittest.TestCase):
    def test_correct_cannot_exceed_total(self) -> None:
        with self.assertRaises(ValueError):
            CategoryStat(correct=3, total=2)

    def test_percent(self) -> None:
        self.assertEqual(CategoryStat(0, 0).percent(), 0)
        self.assertEqual(CategoryStat(19, 22).percent(), 86)
        self.assertEqual(CategoryStat(1, 2).percent(), 50)


class PerformanceProfileTests(unittest.TestCase):
    def test_record_answers_creates_and_increments(self) -> None:
        profile = PerformanceProfile.from_json({"A": {"correct": 1, "total": 2}})
        profile.record_answers(
            [
                Answer("q1", 0, True, "A"),
                Answer("q2", 1, False, "A"),
                Answer("q3", 0, True, "B"),
            ]
        )
        self.assertEqual(profile.to_json(), {"A": {"correct": 2, "total": 4}, "B": {"correct": 1, "total": 1}})

    def test_unknown_category_reads_as_empty_without_creating(self) -> None:
        profile = PerformanceProfile()
        self.assertEqual(profile.get("missing"), CategoryStat(0, 0))
        self.assertNotIn("missing", profile)

    def test_weights_per_category(self) -> None:
        profile = PerformanceProfile.from_json({"A": {"correct": 5, "total": 10}, "B": {"correct": 9, "total": 10}})
        weights = profile.weights()
        self.assertAlmostEqual(weights["A"], 1.3)
        self.assertAlmostEqual(weights["B"], 0.9)

    def test_default_baseline_is_a_fresh_copy(self) -> None:
        first = default_baseline()
        first.record_answers([Answer("q", 0, True, "network")])
        second = default_baseline()
        self.assertEqual(second.to_json(), DEFAULT_BASELINE)

    def test_custom_baseline(self) -> None:
        profile = default_baseline({"X": {"correct": 1, "total": 3}})
        self.assertEqual(profile.to_json(), {"X": {"correct": 1, "total": 3}})


class TrainingStatsTests(unittest.TestCase):
    def test_copy_is_independent(self) -> None:
        stats = TrainingStats()
        clone = stats.copy()
        clone.per_category.record_answers([Answer("q", 0, False, "network")])
        self.assertNotEqual(stats.per_category.to_json(), clone.per_category.to_json())

    def test_summary_and_chips(self) -> None:
        stats = TrainingStats(per_category=PerformanceProfile.from_json({"A": {"correct": 1, "total": 4}, "Z": {"correct": 0, "total": 0}}))
        chips = format_chips(stats.per_category, {"A": "Alpha"})
        self.assertEqual(chips, ["Alpha 1/4 (25%)", "Z 0/0 (0%)"])
        text = format_summary(stats, {"A": "Alpha"})
        self.assertIn("Best score: --", text)
        self.assertIn("Attempts: 0", text)


if __name__ == "__main__":
    unittest.main()
