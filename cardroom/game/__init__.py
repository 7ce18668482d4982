"""Round engine and state management."""

from cardroom.game.controller import HumanAction, HumanController, SessionQuit
from cardroom.game.engine import RoundEngine, RoundResult, TableSnapshot, parse_bet
from cardroom.game.pot import Pot
from cardroom.game.state import RoundState

__all__ = [
    "HumanAction",
    "HumanController",
    "SessionQuit",
    "RoundEngine",
    "RoundResult",
    "TableSnapshot",
    "parse_bet",
    "Pot",
    "RoundState",
]
