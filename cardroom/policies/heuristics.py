"""The built-in scripted seat personalities."""

from random import Random

from cardroom.hand import Hand
from cardroom.policies.base import DecisionPolicy, PolicyKind


class ConservativePolicy(DecisionPolicy):
    """Hits only on very low totals and rarely raises."""

    kind = PolicyKind.CONSERVATIVE

    def should_hit(self, hand: Hand, best_upcard: int, rng: Random) -> bool:
        return hand.value < 13

    def bet_extra(self, roll: int, base_bet: int, chips: int, streak: int) -> int:
        if roll > 90 and chips > base_bet:
            return base_bet // 2
        return 0


class AggressivePolicy(DecisionPolicy):
    """Hits until 20 and frequently doubles the table bet."""

    kind = PolicyKind.AGGRESSIVE

    def should_hit(self, hand: Hand, best_upcard: int, rng: Random) -> bool:
        return hand.value < 20

    def bet_extra(self, roll: int, base_bet: int, chips: int, streak: int) -> int:
        if roll > 40 and chips > base_bet:
            return base_bet
        return 0


class RandomizedPolicy(DecisionPolicy):
    """Coin flip on every decision."""

    kind = PolicyKind.RANDOMIZED

    def should_hit(self, hand: Hand, best_upcard: int, rng: Random) -> bool:
        return rng.randint(0, 1) == 1

    def bet_extra(self, roll: int, base_bet: int, chips: int, streak: int) -> int:
        if roll % 2 == 0:
            return roll % (base_bet + 1)
        return 0


class ProbabilityInformedPolicy(DecisionPolicy):
    """
    Simplified basic strategy against the strongest visible opponent card.

    Soft hands hit through 17 and hit 18 only against a 9 or better.
    Hard hands hit through 11, stand from 17, and in between stand only
    against a weak (2-6) up-card.
    """

    kind = PolicyKind.PROBABILITY_INFORMED

    def should_hit(self, hand: Hand, best_upcard: int, rng: Random) -> bool:
        value = hand.value

        if hand.is_soft:
            if value <= 17:
                return True
            if value == 18:
                return best_upcard >= 9
            return False

        if value <= 11:
            return True
        if value >= 17:
            return False
        return not 2 <= best_upcard <= 6

    def bet_extra(self, roll: int, base_bet: int, chips: int, streak: int) -> int:
        extra = 0
        if streak > 1 and chips > base_bet:
            extra = base_bet // 2
        if roll > 95 and chips > base_bet * 2:
            extra = base_bet * 2
        return extra


class DefaultPolicy(DecisionPolicy):
    """Fallback for seats without a known personality."""

    kind = PolicyKind.DEFAULT

    def should_hit(self, hand: Hand, best_upcard: int, rng: Random) -> bool:
        return hand.value < 16
