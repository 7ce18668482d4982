"""Tests for the record stores."""

import json
import pytest
from unittest.mock import MagicMock, patch

import redis

from cardroom.events import EventType
from cardroom.ledger import (
    InMemoryRecordStore,
    JsonFileRecordStore,
    PersistedRecord,
    PersistenceError,
    RedisRecordStore,
    StatsLedger,
    get_record_store,
)
from config import RedisConfig, StorageConfig


@pytest.fixture
def records():
    return {
        "You": PersistedRecord(name="You", wins=3, best_streak=2, achievements={"SURVIVOR", "BLACKJACK"}),
        "Cautious Carl": PersistedRecord(name="Cautious Carl", losses=4, total_games=4),
    }


class TestPersistedRecord:
    """Tests for record validation."""

    def test_delimited_achievements(self):
        record = PersistedRecord.from_storage({"name": "You", "achievements": "SURVIVOR, BLACKJACK,"})
        assert record.achievements == {"SURVIVOR", "BLACKJACK"}

    def test_storage_form_is_sorted(self):
        record = PersistedRecord(name="You", achievements={"SURVIVOR", "BLACKJACK"})
        assert record.to_storage()["achievements"] == ["BLACKJACK", "SURVIVOR"]

    def test_negative_counter_rejected(self):
        from pydantic import ValidationError

        with pytest.raises(ValidationError):
            PersistedRecord(name="You", wins=-1)


class TestJsonFileRecordStore:
    """Tests for the JSON file backend."""

    def test_missing_file_loads_empty(self, tmp_path):
        assert JsonFileRecordStore(tmp_path / "nothing.json").load() == {}

    def test_save_then_load(self, tmp_path, records):
        store = JsonFileRecordStore(tmp_path / "stats.json")
        store.save(records)

        loaded = store.load()

        assert loaded == records
        assert not list(tmp_path.glob("*.tmp"))

    def test_corrupted_entries_skipped(self, tmp_path):
        path = tmp_path / "stats.json"
        path.write_text(json.dumps({
            "You": {"name": "You", "wins": 2},
            "Bad": {"name": "Bad", "wins": "many"},
            "Worse": [1, 2, 3],
        }))

        loaded = JsonFileRecordStore(path).load()

        assert list(loaded) == ["You"]
        assert loaded["You"].wins == 2

    def test_name_taken_from_key(self, tmp_path):
        path = tmp_path / "stats.json"
        path.write_text(json.dumps({"You": {"wins": 1}}))
        assert JsonFileRecordStore(path).load()["You"].name == "You"

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "stats.json"
        path.write_text("{not json")
        with pytest.raises(PersistenceError):
            JsonFileRecordStore(path).load()

    def test_invalid_utf8_raises(self, tmp_path):
        path = tmp_path / "stats.json"
        path.write_bytes(b'{"You": {"wins": 1, "name": "\xff\xfe"}}')
        with pytest.raises(PersistenceError):
            JsonFileRecordStore(path).load()

    def test_unreadable_file_reported_by_ledger(self, tmp_path):
        """A damaged file is a warning, not a crash."""
        path = tmp_path / "stats.json"
        path.write_bytes(b"\xff\xfe\x00garbage")
        ledger = StatsLedger(JsonFileRecordStore(path))

        assert ledger.load() == 0
        assert ledger.events.of_type(EventType.PERSISTENCE_FAILED)[0].data["operation"] == "load"

    def test_non_mapping_raises(self, tmp_path):
        path = tmp_path / "stats.json"
        path.write_text("[]")
        with pytest.raises(PersistenceError):
            JsonFileRecordStore(path).load()

    def test_failed_replace_removes_temp_file(self, tmp_path, records):
        store = JsonFileRecordStore(tmp_path / "stats.json")
        with patch("os.replace", side_effect=OSError("busy")):
            with pytest.raises(PersistenceError):
                store.save(records)
        assert list(tmp_path.iterdir()) == []

    def test_unwritable_location_raises(self, tmp_path, records):
        blocker = tmp_path / "file"
        blocker.write_text("")
        with pytest.raises(PersistenceError):
            JsonFileRecordStore(blocker / "stats.json").save(records)


class TestInMemoryRecordStore:
    """Tests for the in-memory backend."""

    def test_save_replaces_contents(self, records):
        store = InMemoryRecordStore(records)
        store.save({"You": records["You"]})
        assert list(store.load()) == ["You"]
        assert store.save_count == 1

    def test_load_returns_copies(self, records):
        store = InMemoryRecordStore(records)
        store.load()["You"].wins = 99
        assert store.load()["You"].wins == 3


class TestRedisRecordStore:
    """Tests for the Redis backend with a mocked client."""

    def test_load_decodes_hash(self, records):
        client = MagicMock()
        client.hgetall.return_value = {
            b"You": json.dumps(records["You"].to_storage()).encode(),
            b"Junk": b"not json",
            b"\xff\xfe": b"{}",
        }

        loaded = RedisRecordStore(client).load()

        client.hgetall.assert_called_once_with("cardroom:records")
        assert loaded == {"You": records["You"]}

    def test_save_rewrites_hash(self, records):
        client = MagicMock()
        pipe = client.pipeline.return_value

        RedisRecordStore(client, key="test:records").save(records)

        pipe.delete.assert_called_once_with("test:records")
        mapping = pipe.hset.call_args.kwargs["mapping"]
        assert set(mapping) == {"You", "Cautious Carl"}
        assert json.loads(mapping["You"])["wins"] == 3
        pipe.execute.assert_called_once()

    def test_errors_become_persistence_errors(self, records):
        client = MagicMock()
        client.hgetall.side_effect = redis.ConnectionError("refused")
        client.pipeline.return_value.execute.side_effect = redis.ConnectionError("refused")
        store = RedisRecordStore(client)

        with pytest.raises(PersistenceError):
            store.load()
        with pytest.raises(PersistenceError):
            store.save(records)


class TestGetRecordStore:
    """Tests for backend selection."""

    def test_json_default(self, tmp_path):
        store = get_record_store(StorageConfig(backend="json", path=str(tmp_path / "s.json")))
        assert isinstance(store, JsonFileRecordStore)

    def test_memory(self):
        assert isinstance(get_record_store(StorageConfig(backend="memory")), InMemoryRecordStore)

    def test_redis(self):
        client = MagicMock()
        with patch("redis.Redis.from_url", return_value=client) as from_url:
            store = get_record_store(StorageConfig(backend="redis", redis=RedisConfig(host="cache", port=6380)))
        assert isinstance(store, RedisRecordStore)
        from_url.assert_called_once_with("redis://cache:6380/0")
        client.ping.assert_called_once()

    def test_unreachable_redis_falls_back_to_memory(self):
        client = MagicMock()
        client.ping.side_effect = redis.ConnectionError("refused")
        with patch("redis.Redis.from_url", return_value=client):
            store = get_record_store(StorageConfig(backend="redis"))
        assert isinstance(store, InMemoryRecordStore)
