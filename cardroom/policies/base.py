"""Abstract base class for scripted decision policies."""

from abc import ABC, abstractmethod
from enum import Enum
from random import Random
from typing import Iterable

from cardroom.hand import Hand

# Reported when no opponent has a card showing.
LOWEST_UPCARD = 2


class PolicyKind(Enum):
    """Decision policy attached to a scripted seat."""

    CONSERVATIVE = "conservative"
    AGGRESSIVE = "aggressive"
    RANDOMIZED = "randomized"
    PROBABILITY_INFORMED = "probability_informed"
    DEFAULT = "default"

    def __str__(self) -> str:
        return self.value.replace("_", " ")


class DecisionPolicy(ABC):
    """
    Hit/stand and betting heuristics for a non-human seat.

    Policies hold no state; the engine passes in everything a decision
    depends on.
    """

    @property
    @abstractmethod
    def kind(self) -> PolicyKind:
        """Return the identifier of this policy."""
        ...

    @abstractmethod
    def should_hit(self, hand: Hand, best_upcard: int, rng: Random) -> bool:
        """
        Decide whether to take another card.

        Args:
            hand: The seat's current hand
            best_upcard: Highest first-card value among the opponents
            rng: Random number generator for randomized decisions

        Returns:
            True to hit, False to stand
        """
        ...

    def bet_extra(self, roll: int, base_bet: int, chips: int, streak: int) -> int:
        """
        Return the amount added to the table bet this round.

        Args:
            roll: Uniform roll in [0, 99]
            base_bet: The table bet
            chips: Chips available before betting
            streak: Current win streak from the ledger
        """
        return 0

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def best_upcard(opponent_hands: Iterable[Hand]) -> int:
    """Return the highest first-card value among the given hands."""
    highest = LOWEST_UPCARD
    for hand in opponent_hands:
        card = hand.up_card
        if card is not None:
            highest = max(highest, card.value)
    return highest
