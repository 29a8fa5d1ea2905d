import json

from typer.testing import CliRunner

from oflogbook.cli import app
from oflogbook.settings import LogbookSettings, load_settings, save_settings

runner = CliRunner()


def test_sync_writes_logbook_and_advances_cursor(tmp_path, make_omnifocus_db):
    db = make_omnifocus_db([{"uuid": "t1", "name": "Call mom", "completed": 700}])
    data_dir = tmp_path / "data"

    result = runner.invoke(app, ["sync", "--db", str(db.db_path), "--data-dir", str(data_dir)])

    assert result.exit_code == 0, result.output
    assert "Tasks: 1" in result.output
    assert load_settings(data_dir).latest_sync_time > 0
    (logbook,) = (data_dir / "logbook").glob("*.json")
    assert json.loads(logbook.read_text())[0]["title"] == "Call mom"


def test_failed_sync_keeps_previous_cursor(tmp_path):
    data_dir = tmp_path / "data"
    save_settings(data_dir, LogbookSettings(latest_sync_time=1234))

    result = runner.invoke(app, ["sync", "--db", str(tmp_path / "nope.db"), "--data-dir", str(data_dir)])

    assert result.exit_code == 1
    assert "Sync failed" in result.output
    assert load_settings(data_dir).latest_sync_time == 1234
    assert not (data_dir / "logbook").exists()


def test_status_and_reset(tmp_path):
    data_dir = tmp_path / "data"

    result = runner.invoke(app, ["status", "--data-dir", str(data_dir)])
    assert "Last sync: Never" in result.output

    save_settings(data_dir, LogbookSettings(latest_sync_time=1_700_000_000))
    result = runner.invoke(app, ["reset", "--data-dir", str(data_dir)])

    assert result.exit_code == 0
    assert load_settings(data_dir).latest_sync_time == 0
