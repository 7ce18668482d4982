"""The shared pot for one round."""

from dataclasses import dataclass, field
from typing import Iterator


@dataclass
class Pot:
    """Ordered (name, amount) contributions for the current round."""

    contributions: list[tuple[str, int]] = field(default_factory=list)

    def add(self, name: str, amount: int) -> None:
        self.contributions.append((name, amount))

    def clear(self) -> None:
        self.contributions.clear()

    @property
    def total(self) -> int:
        return sum(amount for _, amount in self.contributions)

    def contribution(self, name: str) -> int:
        """Return everything a name put in this round."""
        return sum(amount for who, amount in self.contributions if who == name)

    def __len__(self) -> int:
        return len(self.contributions)

    def __iter__(self) -> Iterator[tuple[str, int]]:
        return iter(self.contributions)
