"""Achievement identifiers and unlock conditions."""

from dataclasses import dataclass, field
from enum import Enum

from cardroom.ledger.records import PersistedRecord

HIGH_ROLLER_PAYOUT = 40
HOT_STREAK_WINS = 3
CARD_SHARK_WINS = 10
SURVIVOR_CHIPS = 200
UNSTOPPABLE_CHIPS = 300
MARATHONER_ROUNDS = 20
GAMBLER_SPIRIT_ROUNDS = 50


class Achievement(str, Enum):
    """Unlockable achievements, identified by their persisted id."""

    BLACKJACK = "BLACKJACK"
    HIGH_ROLLER = "HIGH_ROLLER"
    HOT_STREAK = "HOT_STREAK"
    CARD_SHARK = "CARD_SHARK"
    SURVIVOR = "SURVIVOR"
    UNSTOPPABLE = "UNSTOPPABLE"
    IT_HAPPENS = "IT_HAPPENS"
    CLOSE_CALL = "CLOSE_CALL"
    AGAINST_ODDS = "AGAINST_ODDS"
    MARATHONER = "MARATHONER"
    GAMBLER_SPIRIT = "GAMBLER_SPIRIT"

    def __str__(self) -> str:
        return self.value

    @property
    def description(self) -> str:
        return ACHIEVEMENTS[self.value]


ACHIEVEMENTS: dict[str, str] = {
    "BLACKJACK": "Natural Blackjack: get a 2-card 21.",
    "HIGH_ROLLER": "Win a round with a payout of 40+ chips.",
    "HOT_STREAK": "Win 3 rounds in a row.",
    "CARD_SHARK": "Win 10 total rounds.",
    "SURVIVOR": "Reach 200 chips.",
    "UNSTOPPABLE": "Reach 300 chips.",
    "IT_HAPPENS": "Bust badly (22+).",
    "CLOSE_CALL": "Stand on 20 and still lose.",
    "AGAINST_ODDS": "Beat an opponent who had 20 or 21.",
    "MARATHONER": "Play 20 rounds.",
    "GAMBLER_SPIRIT": "Play 50 rounds.",
}


@dataclass(frozen=True)
class RoundView:
    """What the achievement rules need to know about one player's round."""

    natural: bool = False
    won: bool = False
    stood: bool = False
    busted: bool = False
    value: int = 0
    payout: int = 0
    chips: int = 0
    opponent_values: tuple[int, ...] = field(default_factory=tuple)


def earned_achievements(
    view: RoundView,
    record: PersistedRecord,
    high_roller_payout: int = HIGH_ROLLER_PAYOUT,
) -> list[Achievement]:
    """
    Return every achievement whose condition holds after a round.

    ``record`` must already include this round's statistics. Achievements
    the player already owns are included; unlocking is idempotent.
    """
    earned: list[Achievement] = []

    if view.natural:
        earned.append(Achievement.BLACKJACK)
    if view.won and view.payout >= high_roller_payout:
        earned.append(Achievement.HIGH_ROLLER)
    if record.current_streak >= HOT_STREAK_WINS:
        earned.append(Achievement.HOT_STREAK)
    if record.wins >= CARD_SHARK_WINS:
        earned.append(Achievement.CARD_SHARK)
    if view.chips >= SURVIVOR_CHIPS:
        earned.append(Achievement.SURVIVOR)
    if view.chips >= UNSTOPPABLE_CHIPS:
        earned.append(Achievement.UNSTOPPABLE)
    if view.busted and view.value >= 22:
        earned.append(Achievement.IT_HAPPENS)
    if view.stood and view.value == 20 and not view.won:
        earned.append(Achievement.CLOSE_CALL)
    if view.won and any(v in (20, 21) for v in view.opponent_values):
        earned.append(Achievement.AGAINST_ODDS)
    if record.total_games >= MARATHONER_ROUNDS:
        earned.append(Achievement.MARATHONER)
    if record.total_games >= GAMBLER_SPIRIT_ROUNDS:
        earned.append(Achievement.GAMBLER_SPIRIT)

    return earned
