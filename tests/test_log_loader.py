import pathlib
import sys
import tempfile
import unittest
from datetime import datetime, timezone

import numpy as np

# Ensure src/ is on path for direct test execution
ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from gyrosteer.core.models import GyroSample  # noqa: E402
from gyrosteer.dataio.csv_writer import begin_session  # noqa: E402
from gyrosteer.dataio.log_loader import count_data_rows, load_log, parse_row  # noqa: E402


class LogLoaderTest(unittest.TestCase):
    def test_load_log_with_header(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = pathlib.Path(tmpdir) / "with_header.csv"
            path.write_text(
                "Timestamp, gyroX, gyroY, gyroZ\n"
                "2024-10-19 18:03:12.000+00:00, 1.0, 2.0, 3.0\n"
                "2024-10-19 18:03:12.500+00:00, 4.0, 5.0, 6.0\n",
                encoding="utf-8",
            )

            log = load_log(path)

            np.testing.assert_array_equal(log.values, np.array([[1, 2, 3], [4, 5, 6]]))
            self.assertEqual(
                log.timestamps[1],
                datetime(2024, 10, 19, 18, 3, 12, 500000, tzinfo=timezone.utc),
            )

    def test_load_log_without_header(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = pathlib.Path(tmpdir) / "no_header.csv"
            path.write_text("2024-10-19 18:03:12+00:00, 0.5, -0.5, 0\n", encoding="utf-8")

            log = load_log(path)

            self.assertEqual(len(log), 1)
            np.testing.assert_array_equal(log.values, np.array([[0.5, -0.5, 0.0]]))

    def test_header_only_log_is_empty(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = pathlib.Path(tmpdir) / "empty.csv"
            begin_session(path).close()

            log = load_log(path)

            self.assertEqual(log.values.shape, (0, 3))
            self.assertEqual(count_data_rows(path), 0)

    def test_malformed_rows_are_skipped(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = pathlib.Path(tmpdir) / "bad.csv"
            path.write_text(
                "Timestamp, gyroX, gyroY, gyroZ\n"
                "garbage\n"
                "2024-10-19 18:03:12+00:00, 1.0, nope, 3.0\n"
                "\n"
                "2024-10-19 18:03:13+00:00, 1.0, 2.0, 3.0\n",
                encoding="utf-8",
            )

            with self.assertLogs("gyrosteer.dataio.log_loader", level="WARNING"):
                log = load_log(path)

            self.assertEqual(len(log), 1)

    def test_round_trip_from_writer(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = pathlib.Path(tmpdir) / "log.csv"
            samples = [GyroSample.now(0.1 * i, -0.2 * i, 1.0 / 3.0) for i in range(4)]
            with begin_session(path) as session:
                for s in samples:
                    session.append(s)

            log = load_log(path)

            expected = np.array([[s.x, s.y, s.z] for s in samples])
            np.testing.assert_array_equal(log.values, expected)

    def test_parse_row_keeps_unparseable_timestamp_as_none(self):
        row = parse_row("Sat Oct 19 2024, 1, 2, 3")
        self.assertEqual(row, (None, 1.0, 2.0, 3.0))


if __name__ == "__main__":
    unittest.main()
