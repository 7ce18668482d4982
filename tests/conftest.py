"""Pytest fixtures for card room tests."""

import pytest
from random import Random

from cardroom.cards import Card, Shoe
from cardroom.game import HumanController, RoundEngine
from cardroom.hand import Hand
from cardroom.ledger import InMemoryRecordStore, StatsLedger
from cardroom.participant import Participant
from cardroom.policies import PolicyKind
from config import GameConfig


def make_cards(*codes: str) -> list[Card]:
    """Build cards from strings like 'AS', '10H'."""
    return [Card.from_string(code) for code in codes]


def make_hand(*codes: str) -> Hand:
    """Build a hand from card strings."""
    return Hand(make_cards(*codes))


class ScriptedController(HumanController):
    """Feeds pre-recorded input to the engine; stands once the script runs out."""

    def __init__(self, bets=None, actions=None) -> None:
        self.bets = list(bets or [])
        self.actions = list(actions or [])
        self.bet_prompts = 0
        self.action_prompts = 0
        self.menus_opened = 0
        self.help_shown = 0

    def choose_bet(self, participant, default):
        self.bet_prompts += 1
        return self.bets.pop(0) if self.bets else None

    def choose_action(self, participant):
        self.action_prompts += 1
        return self.actions.pop(0) if self.actions else "s"

    def open_menu(self, engine):
        self.menus_opened += 1

    def show_help(self):
        self.help_shown += 1


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def cards():
    """Card builder."""
    return make_cards


@pytest.fixture
def hand():
    """Hand builder."""
    return make_hand


@pytest.fixture
def scripted():
    """Controller builder: scripted(bets=[...], actions=[...])."""
    return ScriptedController


@pytest.fixture
def game_config():
    """Table settings used by the engine tests."""
    return GameConfig(starting_chips=200, table_bet=20, num_decks=1)


@pytest.fixture
def store():
    """An empty in-memory record store."""
    return InMemoryRecordStore()


@pytest.fixture
def ledger(store):
    """A ledger backed by the in-memory store."""
    return StatsLedger(store)


@pytest.fixture
def human():
    return Participant("You", is_human=True, chips=200)


@pytest.fixture
def carl():
    return Participant("Cautious Carl", chips=200, policy=PolicyKind.CONSERVATIVE)


@pytest.fixture
def randy():
    return Participant("Reckless Randy", chips=200, policy=PolicyKind.AGGRESSIVE)


@pytest.fixture
def make_engine(ledger, game_config, rng):
    """
    Factory for engines dealing from a stacked shoe.

    The stacked shoe has no low-water mark so the round reset never
    replaces it.
    """

    def _make(participants, stack=(), controller=None, shoe=None):
        if shoe is None:
            shoe = Shoe(num_decks=1, rng=Random(7), cards=make_cards(*stack), low_water_mark=0)
        return RoundEngine(
            participants,
            ledger,
            controller=controller,
            shoe=shoe,
            rng=rng,
            game_config=game_config,
        )

    return _make
