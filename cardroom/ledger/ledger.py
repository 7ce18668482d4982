"""The statistics and achievement ledger."""

import logging

from cardroom.events import EventEmitter, EventType
from cardroom.ledger.achievements import ACHIEVEMENTS, Achievement
from cardroom.ledger.records import PersistedRecord, SessionTally
from cardroom.ledger.store import PersistenceError, RecordStore

logger = logging.getLogger(__name__)


class StatsLedger:
    """
    Owns every player's persisted record and this session's tallies.

    All mutation goes through the ``record_*``, ``unlock`` and ``reset``
    operations. Writes are synchronous and last-writer-wins; a failed write
    is reported as a PERSISTENCE_FAILED event and the in-memory state is
    kept.
    """

    def __init__(self, store: RecordStore, events: EventEmitter | None = None) -> None:
        self._store = store
        self.events = events or EventEmitter()
        self._records: dict[str, PersistedRecord] = {}
        self._session: dict[str, SessionTally] = {}

    def load(self) -> int:
        """
        Load records from the store, keeping in-memory records on failure.

        Returns:
            Number of records loaded
        """
        try:
            loaded = self._store.load()
        except PersistenceError as exc:
            self._report_failure("load", exc)
            return 0
        self._records.update(loaded)
        return len(loaded)

    def save(self) -> bool:
        """Overwrite the store with every record; returns False on failure."""
        try:
            self._store.save(self._records)
        except PersistenceError as exc:
            self._report_failure("save", exc)
            return False
        return True

    def _report_failure(self, operation: str, exc: PersistenceError) -> None:
        logger.warning("Could not %s player records: %s", operation, exc)
        self.events.emit_new(EventType.PERSISTENCE_FAILED, operation=operation, message=str(exc))

    def record(self, name: str) -> PersistedRecord:
        """Return the record for a name, creating an empty one if needed."""
        if name not in self._records:
            self._records[name] = PersistedRecord(name=name)
        return self._records[name]

    def session_tally(self, name: str) -> SessionTally:
        """Return this run's counts for a name."""
        return self._session.setdefault(name, SessionTally())

    def profiles(self) -> list[PersistedRecord]:
        """Return all records ordered by name."""
        return [self._records[name] for name in sorted(self._records)]

    def record_win(self, name: str) -> None:
        record = self.record(name)
        record.wins += 1
        record.current_streak += 1
        record.best_streak = max(record.best_streak, record.current_streak)
        record.total_games += 1
        self.session_tally(name).wins += 1

    def record_loss(self, name: str) -> None:
        record = self.record(name)
        record.losses += 1
        record.current_streak = 0
        record.total_games += 1
        self.session_tally(name).losses += 1

    def record_blackjack(self, name: str) -> None:
        self.record(name).blackjacks += 1
        self.session_tally(name).blackjacks += 1

    def record_payout(self, name: str, amount: int) -> None:
        """Track the largest single payout."""
        record = self.record(name)
        record.biggest_win = max(record.biggest_win, amount)

    def unlock(self, name: str, achievement: Achievement | str) -> bool:
        """
        Unlock an achievement for a player.

        Unlocking an achievement the player already has changes nothing:
        no event and no write.

        Returns:
            True if the achievement was newly unlocked
        """
        key = Achievement(achievement).value
        record = self.record(name)
        if key in record.achievements:
            return False

        record.achievements.add(key)
        logger.info("%s unlocked %s", name, key)
        self.events.emit_new(
            EventType.ACHIEVEMENT_UNLOCKED,
            player=name,
            achievement=key,
            description=ACHIEVEMENTS[key],
        )
        self.save()
        return True

    def locked_achievements(self, name: str) -> list[Achievement]:
        """Return the achievements a player has not unlocked yet."""
        unlocked = self.record(name).achievements
        return [a for a in Achievement if a.value not in unlocked]

    def reset(self, name: str) -> bool:
        """
        Reset one player's record, achievements included.

        Returns:
            False if there is no record with that name
        """
        if name not in self._records:
            return False
        self._records[name] = PersistedRecord(name=name)
        self._session.pop(name, None)
        self.events.emit_new(EventType.PROFILE_RESET, player=name)
        self.save()
        return True

    def reset_all(self) -> None:
        """Reset every record."""
        for name in self._records:
            self._records[name] = PersistedRecord(name=name)
        self._session.clear()
        self.events.emit_new(EventType.PROFILE_RESET, player=None)
        self.save()

    def __contains__(self, name: str) -> bool:
        return name in self._records

    def __len__(self) -> int:
        return len(self._records)
