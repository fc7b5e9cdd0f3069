import pathlib
import sys
import tempfile
import unittest
from datetime import datetime, timedelta, timezone

import numpy as np

# Ensure src/ is on path for direct test execution
ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from gyrosteer.analysis import danger_mask, summarize, summarize_log  # noqa: E402
from gyrosteer.config.thresholds import THRESHOLD_PRESETS, Thresholds  # noqa: E402
from gyrosteer.core.models import GyroSample  # noqa: E402
from gyrosteer.dataio.csv_writer import begin_session  # noqa: E402
from gyrosteer.dataio.log_loader import GyroLog  # noqa: E402


class DangerMaskTest(unittest.TestCase):
    def test_matches_scalar_predicate(self):
        rng = np.random.default_rng(7)
        values = rng.normal(0.0, 3.0, size=(500, 3))
        for thresholds in THRESHOLD_PRESETS.values():
            mask = danger_mask(values, thresholds)
            expected = [thresholds.exceeded(*row) for row in values]
            self.assertEqual(mask.tolist(), expected)

    def test_boundaries_are_strict(self):
        values = np.array([[4.0, 0, 0], [0, 0, 2.0], [3.0, 3.0, 0], [-4.01, 0, 0]])
        mask = danger_mask(values, Thresholds())
        self.assertEqual(mask.tolist(), [False, False, False, True])

    def test_combined_term_can_be_disabled(self):
        values = np.array([[3.9, 3.9, 0.0]])
        self.assertTrue(danger_mask(values, Thresholds())[0])
        self.assertFalse(danger_mask(values, Thresholds(xy=None))[0])


class SummaryTest(unittest.TestCase):
    def test_empty_log(self):
        summary = summarize(GyroLog(timestamps=[], values=np.empty((0, 3))), Thresholds())
        self.assertEqual(summary.rows, 0)
        self.assertIsNone(summary.mean_interval_s)
        self.assertIn("mean sample interval: n/a", summary.lines())

    def test_summarize_recorded_log(self):
        t0 = datetime(2024, 10, 19, 18, 0, 0, tzinfo=timezone.utc)
        readings = [(0.1, 0.0, 0.0), (5.0, 0.0, 0.0), (0.0, -0.2, 2.5), (1.0, 1.0, 1.0)]
        with tempfile.TemporaryDirectory() as tmpdir:
            path = pathlib.Path(tmpdir) / "log.csv"
            with begin_session(path) as session:
                for i, (x, y, z) in enumerate(readings):
                    session.append(GyroSample(x, y, z, t0 + timedelta(seconds=0.5 * i)))

            summary = summarize_log(path, Thresholds())

        self.assertEqual(summary.rows, 4)
        self.assertEqual(summary.danger_rows, 2)
        self.assertEqual(summary.peak_abs, (5.0, 1.0, 2.5))
        self.assertAlmostEqual(summary.mean_interval_s, 0.5)


if __name__ == "__main__":
    unittest.main()
