"""Card and Shoe classes - immutable cards and a recycling multi-deck shoe."""

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum, auto
from random import Random
from typing import Iterable, Iterator

logger = logging.getLogger(__name__)

CARDS_PER_DECK = 52
DEFAULT_LOW_WATER_MARK = 15


class Suit(Enum):
    """Card suits."""

    CLUBS = auto()
    DIAMONDS = auto()
    HEARTS = auto()
    SPADES = auto()

    def __str__(self) -> str:
        symbols = {
            Suit.CLUBS: "♣",
            Suit.DIAMONDS: "♦",
            Suit.HEARTS: "♥",
            Suit.SPADES: "♠",
        }
        return symbols[self]


class Rank(Enum):
    """Card ranks with blackjack values."""

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    def __str__(self) -> str:
        if self.value <= 10:
            return str(self.value)
        return {
            Rank.JACK: "J",
            Rank.QUEEN: "Q",
            Rank.KING: "K",
            Rank.ACE: "A",
        }[self]

    @property
    def blackjack_value(self) -> int:
        """Return the blackjack point value (Ace = 11, face cards = 10)."""
        if self.value <= 10:
            return self.value
        if self == Rank.ACE:
            return 11
        return 10  # Face cards

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE


_RANK_CODES = {
    "2": Rank.TWO,
    "3": Rank.THREE,
    "4": Rank.FOUR,
    "5": Rank.FIVE,
    "6": Rank.SIX,
    "7": Rank.SEVEN,
    "8": Rank.EIGHT,
    "9": Rank.NINE,
    "10": Rank.TEN,
    "T": Rank.TEN,
    "J": Rank.JACK,
    "Q": Rank.QUEEN,
    "K": Rank.KING,
    "A": Rank.ACE,
}

_SUIT_CODES = {
    "C": Suit.CLUBS,
    "♣": Suit.CLUBS,
    "D": Suit.DIAMONDS,
    "♦": Suit.DIAMONDS,
    "H": Suit.HEARTS,
    "♥": Suit.HEARTS,
    "S": Suit.SPADES,
    "♠": Suit.SPADES,
}


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def value(self) -> int:
        """Return the blackjack point value."""
        return self.rank.blackjack_value

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    @property
    def identity(self) -> tuple[Rank, Suit]:
        """Return the (rank, suit) pair identifying this card."""
        return (self.rank, self.suit)

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', 'Kh'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = s[:-1]
        suit_str = s[-1]

        if rank_str not in _RANK_CODES:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_str not in _SUIT_CODES:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(_RANK_CODES[rank_str], _SUIT_CODES[suit_str])


def full_decks(num_decks: int) -> list[Card]:
    """Return ``num_decks`` ordered 52-card sets."""
    return [
        Card(rank, suit)
        for _ in range(num_decks)
        for suit in Suit
        for rank in Rank
    ]


class Shoe:
    """
    A multi-deck shoe with a discard pile.

    Cards are dealt from the front of the live sequence. When the live
    sequence runs dry the discard pile is reclaimed and reshuffled, so
    ``draw_one`` always produces a card.
    """

    def __init__(
        self,
        num_decks: int = 1,
        rng: Random | None = None,
        cards: Iterable[Card] | None = None,
        low_water_mark: int = DEFAULT_LOW_WATER_MARK,
    ) -> None:
        """
        Initialize a shoe.

        Args:
            num_decks: Number of 52-card decks in a full shoe
            rng: Random number generator for shuffling (OS-entropy seeded if omitted)
            cards: Optional stacked live sequence, dealt front first
            low_water_mark: Live count below which a rebuild is due
        """
        if num_decks < 1:
            raise ValueError("Shoe must have at least 1 deck")

        self._num_decks = num_decks
        self._rng = rng or Random()
        self._low_water_mark = low_water_mark
        self._live: deque[Card] = deque()
        self._discard: list[Card] = []
        self._seen: set[tuple[Rank, Suit]] = set()

        if cards is None:
            self.build()
            self.shuffle()
        else:
            self._live.extend(cards)

    def build(self, num_decks: int | None = None) -> None:
        """Fill the live sequence with full decks and forget the discard pile."""
        if num_decks is not None:
            self.num_decks = num_decks
        self._live = deque(full_decks(self._num_decks))
        self._discard.clear()
        self._seen.clear()
        logger.info("Built a %d-deck shoe (%d cards)", self._num_decks, len(self._live))

    def shuffle(self) -> None:
        """Uniformly permute the live sequence."""
        cards = list(self._live)
        self._rng.shuffle(cards)
        self._live = deque(cards)

    def rebuild(self) -> None:
        """Build a fresh shoe and shuffle it."""
        self.build()
        self.shuffle()

    def draw_one(self) -> Card:
        """Deal the front card, recycling or rebuilding when the live sequence is empty."""
        if not self._live:
            if not self._recycle_discards():
                logger.info("Shoe and discard pile exhausted, building a new shoe")
                self.rebuild()

        card = self._live.popleft()
        self._seen.add(card.identity)
        logger.debug("Drew %s, %d remaining", card, len(self._live))
        return card

    def _recycle_discards(self) -> bool:
        """
        Move the discard pile back into play.

        The most recently discarded card stays behind as the base of the
        new discard pile.

        Returns:
            True if at least one card was reclaimed
        """
        if len(self._discard) < 2:
            return False

        top = self._discard.pop()
        reclaimed = list(reversed(self._discard))
        self._discard = [top]
        self._rng.shuffle(reclaimed)
        self._live.extend(reclaimed)
        logger.info("Recycled %d discarded cards into the shoe", len(reclaimed))
        return True

    def discard(self, card: Card) -> None:
        """Push a card onto the discard pile."""
        self._discard.append(card)

    def discard_many(self, cards: Iterable[Card]) -> None:
        """Push several cards onto the discard pile, in order."""
        self._discard.extend(cards)

    def remaining_count(self) -> int:
        """Return the number of undealt cards."""
        return len(self._live)

    def discard_count(self) -> int:
        """Return the number of cards on the discard pile."""
        return len(self._discard)

    def seen_count(self) -> int:
        """Return how many distinct card identities were dealt from this shoe."""
        return len(self._seen)

    def has_seen(self, card: Card) -> bool:
        """Check if a card identity was dealt since the last build."""
        return card.identity in self._seen

    @property
    def needs_rebuild(self) -> bool:
        """Check if the live count dropped below the low-water mark."""
        return len(self._live) < self._low_water_mark

    @property
    def top_discard(self) -> Card | None:
        """Return the most recently discarded card."""
        return self._discard[-1] if self._discard else None

    @property
    def num_decks(self) -> int:
        """Return the number of decks in a full shoe."""
        return self._num_decks

    @num_decks.setter
    def num_decks(self, value: int) -> None:
        if value < 1:
            raise ValueError("Shoe must have at least 1 deck")
        self._num_decks = value

    @property
    def total_cards(self) -> int:
        """Return the number of cards in a full shoe."""
        return self._num_decks * CARDS_PER_DECK

    def __len__(self) -> int:
        return len(self._live)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._live)
