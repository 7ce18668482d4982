"""Round state enumeration."""

from enum import Enum, auto


class RoundState(Enum):
    """
    Round state machine states.

    Flow: WAITING → BETTING → DEALING → PLAYER_TURNS → RESOLVING → ROUND_COMPLETE
    """

    # Between rounds; the reset happens here
    WAITING = auto()

    # Chips move into the pot
    BETTING = auto()

    # Two passes of cards, then the natural check
    DEALING = auto()

    # Every seat acts in order
    PLAYER_TURNS = auto()

    # Winners, payouts, statistics and achievements
    RESOLVING = auto()

    # Round finished, ready for next
    ROUND_COMPLETE = auto()

    # Session over (player quit or table emptied)
    GAME_OVER = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()
