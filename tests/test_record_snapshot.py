"""Tests for the record_snapshot command line script."""

from scrummer.models.schemas import SetupRecord
from scrummer.scripts.record_snapshot import main
from scrummer.services.history_store import HistoryStore
from scrummer.services.setup_store import SetupStore


def test_records_snapshot_from_stored_setup(db_path, storage, scenario_setup, capsys):
    SetupStore(storage).save(SetupRecord.model_validate(scenario_setup))

    assert main(["--db", str(db_path)]) == 0

    out = capsys.readouterr().out
    assert "Risk 22 (Low)" in out
    assert "Saved snapshot" in out
    assert HistoryStore(storage).get_last().risk_score == 22


def test_duplicate_then_force(db_path, storage):
    assert main(["--db", str(db_path), "--show", "0"]) == 0
    assert main(["--db", str(db_path), "--show", "0"]) == 1
    assert main(["--db", str(db_path), "--show", "0", "--force"]) == 0
    assert len(HistoryStore(storage).get_history()) == 2


def test_new_sprint(db_path, storage, capsys):
    main(["--db", str(db_path), "--new-sprint"])
    out = capsys.readouterr().out
    sprint_id = HistoryStore(storage).get_current_sprint_id()
    assert f"Started sprint {sprint_id}" in out
