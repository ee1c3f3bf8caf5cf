import io
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

from examtrainer.app.session_manager import SessionManager
from examtrainer.config.config import DEFAULT_COUNT, load_config, validate_config
from examtrainer.stats.config import WeightingConfig
from examtrainer.stats.profile import DEFAULT_BASELINE


class ConfigTests(unittest.TestCase):
    def test_packaged_defaults(self) -> None:
        cfg = validate_config(load_config())
        self.assertEqual(cfg["exam"], {"mode": "exam", "focus": "smart", "count": DEFAULT_COUNT})
        self.assertIsInstance(cfg["weighting"], WeightingConfig)
        self.assertAlmostEqual(cfg["weighting"].offset, 1.8)
        self.assertEqual(cfg["baseline"], DEFAULT_BASELINE)
        self.assertIsNone(cfg["bank"]["path"])
        self.assertFalse(cfg["ui"]["explain"])

    def test_empty_config_filled_in(self) -> None:
        cfg = validate_config({})
        self.assertEqual(cfg["exam"]["count"], DEFAULT_COUNT)
        self.assertEqual(cfg["storage"]["path"], "~/.examtrainer/stats.json")
        cfg["baseline"]["network"]["total"] = 0
        self.assertEqual(DEFAULT_BASELINE["network"]["total"], 14)

    def test_bad_values_fall_back_with_warning(self) -> None:
        out = io.StringIO()
        with redirect_stdout(out):
            cfg = validate_config({"exam": {"mode": "speedrun", "count": "lots", "focus": None}})
        self.assertEqual(cfg["exam"]["mode"], "exam")
        self.assertEqual(cfg["exam"]["count"], DEFAULT_COUNT)
        self.assertEqual(cfg["exam"]["focus"], "smart")
        self.assertIn("WARNING", out.getvalue())

    def test_zero_count_rejected(self) -> None:
        with redirect_stdout(io.StringIO()):
            cfg = validate_config({"exam": {"count": 0}})
        self.assertEqual(cfg["exam"]["count"], DEFAULT_COUNT)

    def test_malformed_baseline_falls_back(self) -> None:
        for baseline in ({"network": {"correct": 9, "total": 3}}, {"network": 5}, ["network"]):
            out = io.StringIO()
            with redirect_stdout(out):
                cfg = validate_config({"baseline": baseline})
            self.assertEqual(cfg["baseline"], DEFAULT_BASELINE)
            self.assertIn("WARNING", out.getvalue())

    def test_malformed_baseline_does_not_break_startup(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with redirect_stdout(io.StringIO()):
                cfg = validate_config(
                    {"baseline": {"network": 5}, "storage": {"path": str(Path(tmp) / "stats.json")}}
                )
            sm = SessionManager.from_config(cfg)
        self.assertEqual(sm.stats.per_category.to_json(), DEFAULT_BASELINE)

    def test_valid_custom_baseline_kept(self) -> None:
        cfg = validate_config({"baseline": {"network": {"correct": 1, "total": 2}}})
        self.assertEqual(cfg["baseline"], {"network": {"correct": 1, "total": 2}})

    def test_invalid_weighting_exits(self) -> None:
        with redirect_stderr(io.StringIO()), self.assertRaises(SystemExit):
            validate_config({"weighting": {"min_weight": 2.0, "max_weight": 1.0}})

    def test_missing_file_exits(self) -> None:
        with redirect_stderr(io.StringIO()), self.assertRaises(SystemExit):
            load_config("/nonexistent/examtrainer.yml")

    def test_user_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "cfg.yml"
            path.write_text("exam:\n  mode: practice\n  count: 5\n", encoding="utf-8")
            cfg = validate_config(load_config(str(path)))
        self.assertEqual(cfg["exam"]["mode"], "practice")
        self.assertEqual(cfg["exam"]["count"], 5)


if __name__ == "__main__":
    unittest.main()
