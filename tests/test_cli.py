from __future__ import annotations

import re
from pathlib import Path

import pytest

from gyrosteer.cli import build_parser, main
from gyrosteer.dataio.csv_writer import HEADER_LINE
from gyrosteer.dataio.log_loader import count_data_rows


def _counter(output: str) -> int:
    match = re.search(r"Danger Counter: (\d+)", output)
    assert match, output
    return int(match.group(1))


def test_parser_requires_a_command() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_record_with_simulated_sensor(tmp_path: Path, capsys) -> None:
    log_path = tmp_path / "run" / "rotrakData.csv"
    rc = main([
        "record",
        "--sensor", "simulated",
        "--interval", "0.01",
        "--duration", "0.15",
        "--log-path", str(log_path),
    ])

    assert rc == 0
    assert log_path.read_text(encoding="utf-8").startswith(HEADER_LINE)
    assert count_data_rows(log_path) >= 1
    out = capsys.readouterr().out
    assert "Gyroscope Data" in out
    assert "Writing to file..." not in out


def test_live_counter_matches_offline_summary(tmp_path: Path, capsys) -> None:
    log_path = tmp_path / "replay.csv"
    config = tmp_path / "gyrosteer.yaml"
    config.write_text(
        "gyrosteer:\n"
        "  sample_interval_s: 0.01\n"
        "  sensor: replay\n"
        "  sensor_options:\n"
        "    loop: true\n"
        "    readings:\n"
        "      - [0.0, 0.0, 0.0]\n"
        "      - [5.0, 0.0, 0.0]\n"
        "      - [0.0, 0.0, 3.0]\n",
        encoding="utf-8",
    )

    assert main(["record", "--config", str(config), "--log-path", str(log_path), "--duration", "0.15"]) == 0
    live_count = _counter(capsys.readouterr().out)

    assert main(["summarize", str(log_path), "--config", str(config)]) == 0
    out = capsys.readouterr().out
    assert f"rows: {count_data_rows(log_path)}" in out
    assert f"danger rows: {live_count}" in out


def test_record_exports_on_stop(tmp_path: Path, capsys) -> None:
    exports = tmp_path / "exports"
    exports.mkdir()
    rc = main([
        "record",
        "--interval", "0.01",
        "--duration", "0.05",
        "--log-path", str(tmp_path / "log.csv"),
        "--export", str(exports),
    ])
    assert rc == 0
    assert len(list(exports.glob("log_*.csv"))) == 1
    assert "File sent!" in capsys.readouterr().out


def test_record_fails_when_log_cannot_be_created(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    rc = main(["record", "--duration", "0.01", "--log-path", str(blocker / "log.csv")])
    assert rc == 1


def test_record_rejects_unknown_sensor_in_config(tmp_path: Path) -> None:
    config = tmp_path / "bad.yaml"
    config.write_text("gyrosteer:\n  sensor: lidar\n", encoding="utf-8")
    assert main(["record", "--config", str(config), "--log-path", str(tmp_path / "x.csv")]) == 2


def test_invalid_config_document(tmp_path: Path) -> None:
    config = tmp_path / "bad.yaml"
    config.write_text("- not\n- a mapping\n", encoding="utf-8")
    assert main(["summarize", str(tmp_path / "x.csv"), "--config", str(config)]) == 2


def test_summarize_missing_log(tmp_path: Path) -> None:
    assert main(["summarize", str(tmp_path / "missing.csv")]) == 1
