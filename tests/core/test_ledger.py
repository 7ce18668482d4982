"""Tests for the statistics ledger and achievement rules."""

import pytest

from cardroom.events import EventType
from cardroom.ledger import (
    ACHIEVEMENTS,
    Achievement,
    InMemoryRecordStore,
    PersistedRecord,
    PersistenceError,
    RecordStore,
    RoundView,
    StatsLedger,
    earned_achievements,
)


class BrokenStore(RecordStore):
    """A store whose disk is always full."""

    def load(self):
        raise PersistenceError("cannot read")

    def save(self, records):
        raise PersistenceError("disk full")


class TestStatsLedger:
    """Tests for record updates."""

    def test_record_created_on_demand(self, ledger):
        assert "You" not in ledger
        record = ledger.record("You")
        assert record.name == "You"
        assert record.wins == 0
        assert "You" in ledger
        assert len(ledger) == 1

    def test_win_streak(self, ledger):
        """Consecutive wins build the streak; a loss resets it."""
        for _ in range(3):
            ledger.record_win("You")
        ledger.record_loss("You")
        ledger.record_win("You")

        record = ledger.record("You")
        assert record.wins == 4
        assert record.losses == 1
        assert record.current_streak == 1
        assert record.best_streak == 3
        assert record.total_games == 5
        assert ledger.session_tally("You").wins == 4
        assert ledger.session_tally("You").losses == 1

    def test_biggest_win_keeps_max(self, ledger):
        ledger.record_payout("You", 40)
        ledger.record_payout("You", 25)
        assert ledger.record("You").biggest_win == 40

    def test_profiles_sorted(self, ledger):
        for name in ("Zed", "Amy", "Mo"):
            ledger.record(name)
        assert [r.name for r in ledger.profiles()] == ["Amy", "Mo", "Zed"]

    def test_load_merges_stored_records(self):
        stored = {"You": PersistedRecord(name="You", wins=7, achievements={"SURVIVOR"})}
        ledger = StatsLedger(InMemoryRecordStore(stored))

        assert ledger.load() == 1
        assert ledger.record("You").wins == 7
        assert ledger.record("You").achievements == {"SURVIVOR"}


class TestUnlock:
    """Tests for idempotent achievement unlocking."""

    def test_unlock_emits_and_saves_once(self, ledger, store):
        events = []
        ledger.events.subscribe(events.append, EventType.ACHIEVEMENT_UNLOCKED)

        assert ledger.unlock("You", Achievement.SURVIVOR)
        assert not ledger.unlock("You", "SURVIVOR")

        assert len(events) == 1
        assert events[0].data == {
            "player": "You",
            "achievement": "SURVIVOR",
            "description": ACHIEVEMENTS["SURVIVOR"],
        }
        assert store.save_count == 1

    def test_unknown_achievement_rejected(self, ledger):
        with pytest.raises(ValueError):
            ledger.unlock("You", "NOT_A_THING")

    def test_locked_achievements(self, ledger):
        ledger.unlock("You", Achievement.BLACKJACK)
        locked = ledger.locked_achievements("You")
        assert Achievement.BLACKJACK not in locked
        assert len(locked) == len(Achievement) - 1


class TestReset:
    """Tests for profile resets."""

    def test_reset_one(self, ledger, store):
        ledger.record_win("You")
        ledger.unlock("You", Achievement.HOT_STREAK)
        ledger.record_win("Carl")

        assert ledger.reset("You")

        assert ledger.record("You").wins == 0
        assert ledger.record("You").achievements == set()
        assert ledger.record("Carl").wins == 1
        assert ledger.events.of_type(EventType.PROFILE_RESET)[0].data["player"] == "You"
        assert store.load()["You"].wins == 0

    def test_reset_unknown(self, ledger):
        assert not ledger.reset("Nobody")

    def test_reset_all(self, ledger):
        ledger.record_win("You")
        ledger.record_loss("Carl")

        ledger.reset_all()

        assert all(r.total_games == 0 for r in ledger.profiles())
        assert ledger.session_tally("You").wins == 0


class TestPersistenceFailures:
    """A failing store never loses in-memory state."""

    def test_failed_save_reports_event(self):
        ledger = StatsLedger(BrokenStore())
        ledger.record_win("You")

        assert ledger.save() is False

        failures = ledger.events.of_type(EventType.PERSISTENCE_FAILED)
        assert failures[0].data == {"operation": "save", "message": "disk full"}
        assert ledger.record("You").wins == 1

    def test_failed_load_keeps_records(self):
        ledger = StatsLedger(BrokenStore())
        ledger.record_win("You")

        assert ledger.load() == 0
        assert ledger.record("You").wins == 1
        assert ledger.events.of_type(EventType.PERSISTENCE_FAILED)[0].data["operation"] == "load"

    def test_unlock_survives_failed_write(self):
        ledger = StatsLedger(BrokenStore())
        assert ledger.unlock("You", Achievement.BLACKJACK)
        assert "BLACKJACK" in ledger.record("You").achievements


class TestAchievementRules:
    """Tests for the unlock conditions."""

    def earned(self, view, **counts):
        return set(earned_achievements(view, PersistedRecord(name="You", **counts)))

    def test_nothing_for_a_quiet_round(self):
        assert self.earned(RoundView(stood=True, value=17, chips=150)) == set()

    def test_blackjack(self):
        assert Achievement.BLACKJACK in self.earned(RoundView(natural=True, won=True, chips=0))

    def test_high_roller_needs_win_and_payout(self):
        assert Achievement.HIGH_ROLLER in self.earned(RoundView(won=True, payout=40))
        assert Achievement.HIGH_ROLLER not in self.earned(RoundView(won=True, payout=39))
        assert Achievement.HIGH_ROLLER not in self.earned(RoundView(won=False, payout=80))

    def test_high_roller_threshold_configurable(self):
        view = RoundView(won=True, payout=30)
        record = PersistedRecord(name="You")
        assert Achievement.HIGH_ROLLER in earned_achievements(view, record, high_roller_payout=30)

    def test_streak_and_win_totals(self):
        assert Achievement.HOT_STREAK in self.earned(RoundView(), current_streak=3)
        assert Achievement.HOT_STREAK not in self.earned(RoundView(), current_streak=2)
        assert Achievement.CARD_SHARK in self.earned(RoundView(), wins=10)

    def test_chip_milestones(self):
        assert self.earned(RoundView(chips=200)) == {Achievement.SURVIVOR}
        assert self.earned(RoundView(chips=300)) == {Achievement.SURVIVOR, Achievement.UNSTOPPABLE}

    def test_it_happens(self):
        assert Achievement.IT_HAPPENS in self.earned(RoundView(busted=True, value=22))

    def test_close_call(self):
        assert Achievement.CLOSE_CALL in self.earned(RoundView(stood=True, value=20))
        assert Achievement.CLOSE_CALL not in self.earned(RoundView(stood=True, value=20, won=True))

    def test_against_odds(self):
        assert Achievement.AGAINST_ODDS in self.earned(RoundView(won=True, value=21, opponent_values=(17, 20)))
        assert Achievement.AGAINST_ODDS not in self.earned(RoundView(won=True, value=19, opponent_values=(22, 18)))

    def test_round_counts(self):
        assert self.earned(RoundView(), total_games=20) == {Achievement.MARATHONER}
        assert self.earned(RoundView(), total_games=50) == {
            Achievement.MARATHONER,
            Achievement.GAMBLER_SPIRIT,
        }

    def test_every_achievement_described(self):
        for achievement in Achievement:
            assert achievement.description == ACHIEVEMENTS[achievement.value]
