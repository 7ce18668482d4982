"""Record stores: JSON file, Redis and in-memory backends."""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Mapping

import redis
from pydantic import ValidationError

from cardroom.ledger.records import PersistedRecord
from config import StorageConfig

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """The record store could not be read or written."""


def decode_records(raw: Mapping[str, Any]) -> dict[str, PersistedRecord]:
    """
    Validate stored records keyed by name.

    Corrupted entries are skipped with a warning rather than failing the load.
    """
    records: dict[str, PersistedRecord] = {}
    for name, data in raw.items():
        if not isinstance(data, dict):
            logger.warning("Skipping malformed record for %r", name)
            continue
        try:
            record = PersistedRecord.from_storage({**data, "name": data.get("name", name)})
        except ValidationError as exc:
            logger.warning("Skipping corrupted record for %r: %s", name, exc.error_count())
            continue
        records[record.name] = record
    return records


class RecordStore(ABC):
    """Abstract store for the full name → record mapping."""

    @abstractmethod
    def load(self) -> dict[str, PersistedRecord]:
        """Load every record."""
        ...

    @abstractmethod
    def save(self, records: Mapping[str, PersistedRecord]) -> None:
        """Overwrite the stored mapping with ``records``."""
        ...


class InMemoryRecordStore(RecordStore):
    """Keeps records for the lifetime of the process only."""

    def __init__(self, records: Mapping[str, PersistedRecord] | None = None) -> None:
        self._data: dict[str, dict[str, Any]] = {
            name: record.to_storage() for name, record in (records or {}).items()
        }
        self.save_count = 0

    def load(self) -> dict[str, PersistedRecord]:
        return decode_records(self._data)

    def save(self, records: Mapping[str, PersistedRecord]) -> None:
        self._data = {name: record.to_storage() for name, record in records.items()}
        self.save_count += 1


class JsonFileRecordStore(RecordStore):
    """Stores all records in one JSON document."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> dict[str, PersistedRecord]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:  # ValueError covers bad JSON and bad UTF-8
            raise PersistenceError(f"Cannot read {self.path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise PersistenceError(f"{self.path} does not hold a record mapping")
        return decode_records(raw)

    def save(self, records: Mapping[str, PersistedRecord]) -> None:
        payload = {name: record.to_storage() for name, record in records.items()}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        except OSError as exc:
            raise PersistenceError(f"Cannot write {self.path}: {exc}") from exc

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(payload, fh, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
        except (OSError, TypeError, ValueError) as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise PersistenceError(f"Cannot write {self.path}: {exc}") from exc


class RedisRecordStore(RecordStore):
    """Redis-backed store: one hash, one field per player name."""

    def __init__(self, redis_client: redis.Redis, key: str = "cardroom:records") -> None:
        self._redis = redis_client
        self._key = key

    def load(self) -> dict[str, PersistedRecord]:
        try:
            raw = self._redis.hgetall(self._key)
        except redis.RedisError as exc:
            raise PersistenceError(f"Cannot read records from Redis: {exc}") from exc

        decoded: dict[str, Any] = {}
        for field, value in raw.items():
            try:
                name = field.decode() if isinstance(field, bytes) else field
                decoded[name] = json.loads(value)
            except (TypeError, ValueError):
                logger.warning("Skipping undecodable record for %r", field)
        return decode_records(decoded)

    def save(self, records: Mapping[str, PersistedRecord]) -> None:
        try:
            pipe = self._redis.pipeline()
            pipe.delete(self._key)
            if records:
                pipe.hset(
                    self._key,
                    mapping={name: json.dumps(r.to_storage()) for name, r in records.items()},
                )
            pipe.execute()
        except redis.RedisError as exc:
            raise PersistenceError(f"Cannot write records to Redis: {exc}") from exc


def get_record_store(storage: StorageConfig) -> RecordStore:
    """Create the configured store, falling back to memory when Redis is unreachable."""
    if storage.backend == "memory":
        return InMemoryRecordStore()

    if storage.backend == "redis":
        try:
            client = redis.Redis.from_url(storage.redis.url)
            client.ping()
            return RedisRecordStore(client)
        except redis.RedisError as exc:
            logger.warning("Redis unavailable (%s), keeping records in memory", exc)
            return InMemoryRecordStore()

    return JsonFileRecordStore(storage.path)
