"""Card room engine - 100% UI-agnostic."""

from cardroom.cards import Card, Shoe, Rank, Suit
from cardroom.hand import Hand, hand_value, is_natural_blackjack, is_soft
from cardroom.participant import Participant, SeatStatus, default_roster

__all__ = [
    "Card",
    "Shoe",
    "Rank",
    "Suit",
    "Hand",
    "hand_value",
    "is_natural_blackjack",
    "is_soft",
    "Participant",
    "SeatStatus",
    "default_roster",
]
