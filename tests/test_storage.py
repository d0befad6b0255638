"""Tests for the SQLite key/value store and the setup store."""

from scrummer.models.schemas import SetupRecord, SetupUpdate
from scrummer.services.setup_store import SETUP_KEY
from scrummer.services.storage import KeyValueStore


class TestKeyValueStore:
    def test_round_trip(self, storage):
        assert storage.set("k", {"a": [1, 2], "b": "x"})
        assert storage.get("k") == {"a": [1, 2], "b": "x"}

    def test_missing_key(self, storage):
        assert storage.get("absent") is None

    def test_overwrite(self, storage):
        storage.set("k", 1)
        storage.set("k", 2)
        assert storage.get("k") == 2
        assert storage.get_stats()["entry_count"] == 1

    def test_corrupt_value_reads_as_missing(self, storage, write_raw):
        write_raw("k", "[1, 2")
        assert storage.get("k") is None

    def test_unserializable_value_not_written(self, storage):
        assert storage.set("k", {"bad": object()}) is False
        assert storage.get("k") is None

    def test_uninitialized_table(self, tmp_path):
        store = KeyValueStore(tmp_path / "fresh.db")
        assert store.get("k") is None
        assert store.set("k", 1) is False

    def test_init_is_idempotent(self, storage):
        storage.set("k", 1)
        storage.init()
        assert storage.get("k") == 1

    def test_stats(self, storage):
        storage.set("a", "x")
        storage.set("b", [1])
        stats = storage.get_stats()
        assert stats["entry_count"] == 2
        assert stats["total_bytes"] > 0


class TestSetupStore:
    def test_defaults_when_empty(self, setup_store):
        assert setup_store.load() == SetupRecord()

    def test_save_and_load(self, setup_store, scenario_setup):
        setup_store.save(SetupRecord.model_validate(scenario_setup))
        loaded = setup_store.load()
        assert loaded.committed_sp == 50
        assert (loaded.v1, loaded.v2, loaded.v3) == (40, 45, 50)

    def test_update_merges_supplied_fields(self, setup_store, scenario_setup):
        setup_store.save(SetupRecord.model_validate(scenario_setup))
        updated = setup_store.update(SetupUpdate.model_validate({"committedSP": "60", "leave_days": 0}))

        assert updated.committed_sp == 60
        assert updated.leave_days == 0
        assert updated.sprint_days == 10
        assert setup_store.load() == updated

    def test_corrupt_setup_reads_defaults(self, setup_store, write_raw):
        write_raw(SETUP_KEY, "not json")
        assert setup_store.load() == SetupRecord()

    def test_non_object_setup_reads_defaults(self, setup_store, storage):
        storage.set(SETUP_KEY, [1, 2, 3])
        assert setup_store.load() == SetupRecord()
