"""Seats at the table: the human player and the scripted opponents."""

from dataclasses import dataclass, field
from enum import Enum, auto

from cardroom.cards import Card
from cardroom.hand import Hand
from cardroom.policies import PolicyKind

HUMAN_NAME = "You"


class SeatStatus(Enum):
    """
    Per-round seat state.

    ACTIVE → STOOD or ACTIVE → BUSTED; both are terminal until the next
    round's reset.
    """

    ACTIVE = auto()
    STOOD = auto()
    BUSTED = auto()

    def __str__(self) -> str:
        return {
            SeatStatus.ACTIVE: "PLAY",
            SeatStatus.STOOD: "STOOD",
            SeatStatus.BUSTED: "BUST",
        }[self]


@dataclass
class Participant:
    """A seat with its chips, hand and decision policy."""

    name: str
    is_human: bool = False
    chips: int = 0
    policy: PolicyKind | None = None
    hand: Hand = field(default_factory=Hand)
    status: SeatStatus = SeatStatus.ACTIVE
    last_bet: int = 0
    wager_history: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.is_human:
            self.policy = None
        elif self.policy is None:
            self.policy = PolicyKind.DEFAULT

    @property
    def active(self) -> bool:
        return self.status is SeatStatus.ACTIVE

    @property
    def stood(self) -> bool:
        return self.status is SeatStatus.STOOD

    @property
    def busted(self) -> bool:
        return self.status is SeatStatus.BUSTED

    @property
    def can_bet(self) -> bool:
        """Seats with no chips sit out the betting."""
        return self.chips > 0

    @property
    def is_seated(self) -> bool:
        """Negative balances are skipped for dealing and turns."""
        return self.chips >= 0

    @property
    def hand_value(self) -> int:
        return self.hand.value

    def reset_for_round(self) -> list[Card]:
        """Clear the hand and status; return the cards that were held."""
        self.status = SeatStatus.ACTIVE
        return self.hand.clear()

    def receive(self, card: Card) -> None:
        self.hand.add_card(card)

    def stand(self) -> None:
        self.status = SeatStatus.STOOD

    def bust(self) -> None:
        self.status = SeatStatus.BUSTED

    def place_bet(self, amount: int) -> None:
        """Deduct a bet from the balance and remember it."""
        if amount < 1 or amount > self.chips:
            raise ValueError(f"{self.name} cannot bet {amount} with {self.chips} chips")
        self.chips -= amount
        self.last_bet = amount
        self.wager_history.append(amount)

    def credit(self, amount: int) -> None:
        self.chips += amount

    def __str__(self) -> str:
        return f"{self.name} [{self.chips} chips] {self.hand}"


def default_roster(starting_chips: int) -> list[Participant]:
    """Return the standard table: the human seat followed by four personalities."""
    return [
        Participant(HUMAN_NAME, is_human=True, chips=starting_chips),
        Participant("Cautious Carl", chips=starting_chips, policy=PolicyKind.CONSERVATIVE),
        Participant("Reckless Randy", chips=starting_chips, policy=PolicyKind.AGGRESSIVE),
        Participant("Smart Samantha", chips=starting_chips, policy=PolicyKind.PROBABILITY_INFORMED),
        Participant("Chaotic Chad", chips=starting_chips, policy=PolicyKind.RANDOMIZED),
    ]
