"""The seam between the engine and whoever drives the human seat."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING

from cardroom.participant import Participant

if TYPE_CHECKING:
    from cardroom.game.engine import RoundEngine


class SessionQuit(Exception):
    """The human asked to quit; records were flushed before this was raised."""


class HumanAction(Enum):
    """Choices offered to the human on their turn."""

    HIT = "h"
    STAND = "s"
    DISCARD = "d"
    MENU = "v"
    QUIT = "q"
    HELP = "?"

    @classmethod
    def parse(cls, text: str | None) -> "HumanAction | None":
        """
        Parse a key or word such as ``"h"``, ``"Hit"`` or ``"view"``.

        Returns:
            The action, or None if the input is not recognised
        """
        if not text:
            return None
        text = text.strip().lower()
        if not text:
            return None
        words = {
            "hit": cls.HIT,
            "stand": cls.STAND,
            "discard": cls.DISCARD,
            "view": cls.MENU,
            "menu": cls.MENU,
            "quit": cls.QUIT,
            "help": cls.HELP,
        }
        if text in words:
            return words[text]
        for action in cls:
            if text[0] == action.value:
                return action
        return None


class HumanController(ABC):
    """Supplies the human seat's bets and actions."""

    @abstractmethod
    def choose_bet(self, participant: Participant, default: int) -> str | int | None:
        """
        Ask for a bet.

        Returns:
            Raw input; blank or None means "use the default"
        """
        ...

    @abstractmethod
    def choose_action(self, participant: Participant) -> str:
        """Ask for the next action on the human's turn."""
        ...

    def open_menu(self, engine: "RoundEngine") -> None:
        """Show the profiles menu; the round resumes afterwards."""

    def show_help(self) -> None:
        """Explain the available actions."""
