"""Hand evaluation for blackjack."""

from dataclasses import dataclass, field
from typing import Iterable, Iterator

from cardroom.cards import Card

BLACKJACK = 21


def hand_value(cards: Iterable[Card]) -> int:
    """
    Calculate the best value of a set of cards.

    Every ace starts at 11 and is demoted to 1, one at a time, while the
    total is over 21.
    """
    total = 0
    aces = 0

    for card in cards:
        if card.is_ace:
            aces += 1
        total += card.value

    while total > BLACKJACK and aces > 0:
        total -= 10
        aces -= 1

    return total


def is_natural_blackjack(cards: Iterable[Card]) -> bool:
    """Check for a two-card 21."""
    cards = list(cards)
    return len(cards) == 2 and hand_value(cards) == BLACKJACK


def is_soft(cards: Iterable[Card]) -> bool:
    """
    Check if the cards form a soft total.

    Soft means at least one ace is present and the total with every ace
    counted as 11 does not exceed 21.
    """
    cards = list(cards)
    if not any(card.is_ace for card in cards):
        return False
    return sum(card.value for card in cards) <= BLACKJACK


@dataclass
class Hand:
    """One participant's cards for the current round."""

    cards: list[Card] = field(default_factory=list)

    def add_card(self, card: Card) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    def pop_last(self) -> Card | None:
        """Remove and return the most recently drawn card."""
        if not self.cards:
            return None
        return self.cards.pop()

    def clear(self) -> list[Card]:
        """Remove all cards from the hand and return them."""
        removed = list(self.cards)
        self.cards.clear()
        return removed

    @property
    def value(self) -> int:
        """Return the best hand value."""
        return hand_value(self.cards)

    @property
    def is_soft(self) -> bool:
        """Check if the hand is soft."""
        return is_soft(self.cards)

    @property
    def is_blackjack(self) -> bool:
        """Check if the hand is a natural blackjack (21 with 2 cards)."""
        return is_natural_blackjack(self.cards)

    @property
    def is_busted(self) -> bool:
        """Check if the hand has busted (value > 21)."""
        return self.value > BLACKJACK

    @property
    def up_card(self) -> Card | None:
        """Return the first card dealt, if any."""
        return self.cards[0] if self.cards else None

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        if not self.cards:
            return "(no cards)"
        cards_str = " ".join(str(card) for card in self.cards)
        value_str = f"({self.value})"
        if self.is_blackjack:
            value_str = "(BLACKJACK)"
        elif self.is_busted:
            value_str = f"(BUST {self.value})"
        elif self.is_soft:
            value_str = f"(soft {self.value})"
        return f"{cards_str} {value_str}"

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, value={self.value})"
