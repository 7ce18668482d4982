"""Cross-round statistics, achievements and their persistence."""

from cardroom.ledger.achievements import ACHIEVEMENTS, Achievement, RoundView, earned_achievements
from cardroom.ledger.ledger import StatsLedger
from cardroom.ledger.records import PersistedRecord, SessionTally
from cardroom.ledger.store import (
    InMemoryRecordStore,
    JsonFileRecordStore,
    PersistenceError,
    RecordStore,
    RedisRecordStore,
    get_record_store,
)

__all__ = [
    "ACHIEVEMENTS",
    "Achievement",
    "RoundView",
    "earned_achievements",
    "StatsLedger",
    "PersistedRecord",
    "SessionTally",
    "RecordStore",
    "InMemoryRecordStore",
    "JsonFileRecordStore",
    "RedisRecordStore",
    "PersistenceError",
    "get_record_store",
]
