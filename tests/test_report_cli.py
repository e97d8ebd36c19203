from __future__ import annotations

import importlib.util
import json
from datetime import datetime
from pathlib import Path

import pytest

from ttrack_mcp.storage import JsonStore, SessionRecord, TaskRecord


def _load_script():
    module_path = Path(__file__).resolve().parents[1] / "scripts" / "ttrack_report.py"
    spec = importlib.util.spec_from_file_location("ttrack_report_test_module", module_path)
    assert spec and spec.loader
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def data_dir(tmp_path: Path, monkeypatch) -> Path:
    monkeypatch.setenv("TTRACK_DATA_DIR", str(tmp_path))
    session = SessionRecord(
        task="coding",
        start_time=datetime(2025, 1, 15, 9),
        end_time=datetime(2025, 1, 15, 11),
        duration=2 * 60 * 60 * 1000,
    )
    JsonStore(tmp_path).save_tasks(
        {"coding": TaskRecord(id="coding", created=datetime(2025, 1, 1)).with_session(session)}
    )
    return tmp_path


def test_weekly_report_for_date(data_dir, capsys) -> None:
    report = _load_script()

    report.main(["report", "--weekly", "2025-01-16"])

    payload = json.loads(capsys.readouterr().out)
    assert payload["period"] == "weekly"
    assert payload["total_time"] == 2 * 60 * 60 * 1000
    assert payload["daily_breakdown"][2]["total_time"] == 2 * 60 * 60 * 1000


def test_summary_and_tasks(data_dir, capsys) -> None:
    report = _load_script()

    report.main(["summary"])
    summary = json.loads(capsys.readouterr().out)
    report.main(["tasks"])
    listing = capsys.readouterr().out

    assert summary["tasks"][0]["percentage"] == 100
    assert listing.strip() == "coding [7200000 ms] -> 1 sessions"


def test_invalid_date_exits(data_dir, capsys) -> None:
    report = _load_script()

    with pytest.raises(SystemExit) as excinfo:
        report.main(["report", "--daily", "not-a-date"])

    assert excinfo.value.code == 2
    assert "Invalid date" in capsys.readouterr().out


def test_export_yaml(data_dir, capsys) -> None:
    report = _load_script()

    report.main(["export", "--format", "yaml"])

    assert "id: coding" in capsys.readouterr().out
