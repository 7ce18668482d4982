"""Decision policies for scripted seats."""

from cardroom.policies.base import DecisionPolicy, PolicyKind, best_upcard
from cardroom.policies.heuristics import (
    AggressivePolicy,
    ConservativePolicy,
    DefaultPolicy,
    ProbabilityInformedPolicy,
    RandomizedPolicy,
)

POLICIES: dict[PolicyKind, DecisionPolicy] = {
    PolicyKind.CONSERVATIVE: ConservativePolicy(),
    PolicyKind.AGGRESSIVE: AggressivePolicy(),
    PolicyKind.RANDOMIZED: RandomizedPolicy(),
    PolicyKind.PROBABILITY_INFORMED: ProbabilityInformedPolicy(),
    PolicyKind.DEFAULT: DefaultPolicy(),
}


def policy_for(kind: PolicyKind | None) -> DecisionPolicy:
    """Return the policy for a kind, falling back to the default policy."""
    if kind is None:
        return POLICIES[PolicyKind.DEFAULT]
    return POLICIES.get(kind, POLICIES[PolicyKind.DEFAULT])


__all__ = [
    "DecisionPolicy",
    "PolicyKind",
    "best_upcard",
    "policy_for",
    "POLICIES",
    "ConservativePolicy",
    "AggressivePolicy",
    "RandomizedPolicy",
    "ProbabilityInformedPolicy",
    "DefaultPolicy",
]
