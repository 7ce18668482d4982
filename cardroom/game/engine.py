"""Round engine with state machine."""

import logging
from dataclasses import dataclass, field
from random import Random
from typing import Callable, Iterable

from transitions import Machine

from cardroom.cards import Card, Shoe
from cardroom.events import EventEmitter, EventType, GameEvent
from cardroom.game.controller import HumanAction, HumanController, SessionQuit
from cardroom.game.pot import Pot
from cardroom.game.state import RoundState
from cardroom.ledger import RoundView, StatsLedger, earned_achievements
from cardroom.participant import Participant, SeatStatus
from cardroom.policies import best_upcard, policy_for
from config import GameConfig, config

logger = logging.getLogger(__name__)


@dataclass
class RoundResult:
    """Outcome of one round."""

    round_number: int
    winners: list[str] = field(default_factory=list)
    payouts: dict[str, int] = field(default_factory=dict)
    pot_total: int = 0
    best_value: int | None = None
    unlocked: list[str] = field(default_factory=list)

    @property
    def pushed_to_house(self) -> bool:
        """True when nobody qualified and the house keeps the pot."""
        return not self.winners


@dataclass(frozen=True)
class SeatView:
    """Read-only view of one seat for the renderer."""

    name: str
    is_human: bool
    chips: int
    cards: tuple[Card, ...]
    value: int
    status: SeatStatus


@dataclass(frozen=True)
class TableSnapshot:
    """Read-only view of the table for the renderer."""

    round_number: int
    pot_total: int
    seats: tuple[SeatView, ...]
    recent_transactions: tuple[int, ...]


def parse_bet(raw: str | int | None, default: int, chips: int) -> int | None:
    """
    Turn raw bet input into an amount in [1, chips].

    Blank input means the default. Returns None for unparsable input.
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return min(chips, default)
    try:
        amount = int(raw.strip()) if isinstance(raw, str) else int(raw)
    except ValueError:
        return None
    return max(1, min(amount, chips))


class RoundEngine:
    """
    Runs rounds for a table of participants.

    The engine owns the shoe, the pot and every seat's hand and chips
    during a round. It is UI-agnostic: input arrives through a
    ``HumanController`` and everything else leaves as events.
    """

    # State machine states
    STATES = [s.name.lower() for s in RoundState]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "open_betting", "source": "waiting", "dest": "betting"},
        {"trigger": "begin_deal", "source": "betting", "dest": "dealing"},
        {"trigger": "begin_turns", "source": "dealing", "dest": "player_turns"},
        {"trigger": "begin_resolution", "source": "player_turns", "dest": "resolving"},
        {"trigger": "complete_round", "source": "resolving", "dest": "round_complete"},
        {"trigger": "new_round", "source": "round_complete", "dest": "waiting"},
        {"trigger": "end_game", "source": "*", "dest": "game_over"},
    ]

    def __init__(
        self,
        participants: Iterable[Participant],
        ledger: StatsLedger,
        controller: HumanController | None = None,
        shoe: Shoe | None = None,
        rng: Random | None = None,
        game_config: GameConfig | None = None,
    ) -> None:
        """
        Seat a table.

        Args:
            participants: Seats in play order
            ledger: Statistics and achievement ledger
            controller: Input source for the human seat (required if one is seated)
            shoe: Shoe to deal from (a fresh shuffled shoe if omitted)
            rng: Random number generator for scripted bets and decisions
            game_config: Table settings (global config if omitted)
        """
        self.game_config = game_config or config.game
        self.participants: list[Participant] = list(participants)
        if any(p.is_human for p in self.participants) and controller is None:
            raise ValueError("A human seat needs a controller")

        self.ledger = ledger
        self.events: EventEmitter = ledger.events
        self.controller = controller
        self.rng = rng or Random()
        self.shoe = shoe or Shoe(
            num_decks=self.game_config.num_decks,
            low_water_mark=self.game_config.low_water_mark,
        )

        self.pot = Pot()
        self.round_number = 0
        self._transactions: list[int] = []
        self._naturals: set[str] = set()
        self._payouts: dict[str, int] = {}

        for participant in self.participants:
            self.ledger.record(participant.name)

        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="waiting",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def state(self) -> RoundState:
        """Get current round state as enum."""
        return RoundState[self._machine_state.upper()]  # type: ignore

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to table events."""
        self.events.subscribe(handler, event_type)

    def participant(self, name: str) -> Participant | None:
        """Look up a seat by name."""
        for p in self.participants:
            if p.name == name:
                return p
        return None

    @property
    def human(self) -> Participant | None:
        for p in self.participants:
            if p.is_human:
                return p
        return None

    def play_round(self) -> RoundResult:
        """Play one full round and return its outcome."""
        if self.state == RoundState.ROUND_COMPLETE:
            self.new_round()

        self.round_number += 1
        logger.info("Round %d starting", self.round_number)
        self.events.emit_new(EventType.ROUND_STARTED, round=self.round_number)

        self.reset_round()
        self.open_betting()
        self.collect_bets()

        self.begin_deal()
        self.deal_initial()
        self.check_naturals()

        self.begin_turns()
        self.play_turns()

        self.begin_resolution()
        pot_total = self.pot.total
        winners = self.determine_winners()
        payouts = self.pay_out(winners)
        if not winners:
            self.events.emit_new(EventType.PUSH_TO_HOUSE, pot=pot_total)
        self.update_statistics(winners)
        unlocked = self.evaluate_achievements(winners)
        self.ledger.save()
        self.complete_round()

        result = RoundResult(
            round_number=self.round_number,
            winners=[self.participants[i].name for i in winners],
            payouts=payouts,
            pot_total=pot_total,
            best_value=self.participants[winners[0]].hand_value if winners else None,
            unlocked=unlocked,
        )
        self.events.emit_new(
            EventType.ROUND_ENDED,
            round=self.round_number,
            winners=result.winners,
            pot=pot_total,
        )
        return result

    # Round steps

    def reset_round(self) -> None:
        """Empty the pot and every hand, and rebuild a thin shoe."""
        self.pot.clear()
        self._naturals.clear()
        self._payouts = {}

        for participant in self.participants:
            self.shoe.discard_many(participant.reset_for_round())

        if self.shoe.needs_rebuild:
            self.shoe.rebuild()
            self.events.emit_new(EventType.SHOE_REBUILT, cards=self.shoe.remaining_count())

    def collect_bets(self) -> None:
        """Take a bet from every seat that has chips."""
        for participant in self.participants:
            if not participant.can_bet:
                continue
            if participant.is_human:
                amount = self._human_bet(participant)
            else:
                amount = self._scripted_bet(participant)

            participant.place_bet(amount)
            self.pot.add(participant.name, amount)
            self._transactions.append(-amount)
            self.events.emit_new(
                EventType.BET_PLACED,
                player=participant.name,
                amount=amount,
                chips=participant.chips,
            )

    def _human_bet(self, participant: Participant) -> int:
        default_bet = participant.last_bet if participant.last_bet > 0 else self.game_config.table_bet
        default_bet = min(participant.chips, default_bet)

        controller = self._controller_for(participant)
        raw = controller.choose_bet(participant, default_bet)
        amount = parse_bet(raw, default_bet, participant.chips)
        if amount is None:
            self.events.emit_new(
                EventType.INVALID_INPUT,
                input=raw,
                message="Invalid bet, using default",
                default=default_bet,
            )
            amount = default_bet
        return amount

    def _scripted_bet(self, participant: Participant) -> int:
        base = self.game_config.table_bet
        roll = self.rng.randint(0, 99)
        streak = self.ledger.record(participant.name).current_streak
        extra = policy_for(participant.policy).bet_extra(roll, base, participant.chips, streak)

        amount = min(participant.chips, base + extra)
        if roll < 6:
            amount = min(participant.chips, max(1, base // 2))
        return amount

    def deal_initial(self) -> None:
        """Deal two passes of one card to every seated participant."""
        for pass_number in range(2):
            for participant in self.participants:
                if not participant.is_seated:
                    continue
                card = self.shoe.draw_one()
                participant.receive(card)
                self.events.emit_new(
                    EventType.CARD_DEALT,
                    player=participant.name,
                    card=str(card),
                    upcard=pass_number == 0,
                )

    def check_naturals(self) -> list[int]:
        """
        Stand every natural blackjack before the action loop.

        Returns:
            Indices of the seats holding a natural
        """
        naturals = []
        for index, participant in enumerate(self.participants):
            if not participant.is_seated or not participant.hand.is_blackjack:
                continue
            participant.stand()
            self._naturals.add(participant.name)
            self.ledger.record_blackjack(participant.name)
            self.events.emit_new(EventType.NATURAL_BLACKJACK, player=participant.name)
            naturals.append(index)
        return naturals

    def play_turns(self) -> None:
        """Give every seat that can still act its turn, in seat order."""
        for index, participant in enumerate(self.participants):
            if not participant.is_seated or not participant.active:
                continue
            self.events.emit_new(
                EventType.TURN_STARTED,
                player=participant.name,
                hand_value=participant.hand_value,
            )
            if participant.is_human:
                self._human_turn(participant)
            else:
                self._scripted_turn(index, participant)

    def _scripted_turn(self, index: int, participant: Participant) -> None:
        policy = policy_for(participant.policy)
        while participant.active:
            upcard = best_upcard(
                other.hand for i, other in enumerate(self.participants) if i != index
            )
            if policy.should_hit(participant.hand, upcard, self.rng):
                logger.debug("%s hits on %d", participant.name, participant.hand_value)
                self.hit(participant)
            else:
                self.stand(participant)

    def _controller_for(self, participant: Participant) -> HumanController:
        if self.controller is None:
            raise ValueError(f"No controller for {participant.name}")
        return self.controller

    def _human_turn(self, participant: Participant) -> None:
        controller = self._controller_for(participant)
        while participant.active:
            raw = controller.choose_action(participant)
            action = HumanAction.parse(raw)

            if action is None:
                self.events.emit_new(
                    EventType.INVALID_INPUT,
                    input=raw,
                    message="Unknown option. Type ? for help.",
                )
            elif action == HumanAction.HIT:
                self.hit(participant)
            elif action == HumanAction.STAND:
                self.stand(participant)
            elif action == HumanAction.DISCARD:
                self.discard_last(participant)
            elif action == HumanAction.MENU:
                controller.open_menu(self)
            elif action == HumanAction.HELP:
                controller.show_help()
            elif action == HumanAction.QUIT:
                self.quit()

    def hit(self, participant: Participant) -> Card:
        """Draw a card for a seat; a total over 21 busts it."""
        card = self.shoe.draw_one()
        participant.receive(card)
        self.events.emit_new(
            EventType.PLAYER_HIT,
            player=participant.name,
            card=str(card),
            hand_value=participant.hand_value,
        )
        if participant.hand.is_busted:
            participant.bust()
            self.events.emit_new(
                EventType.PLAYER_BUSTS,
                player=participant.name,
                hand_value=participant.hand_value,
            )
        return card

    def stand(self, participant: Participant) -> None:
        participant.stand()
        self.events.emit_new(
            EventType.PLAYER_STAND,
            player=participant.name,
            hand_value=participant.hand_value,
        )

    def discard_last(self, participant: Participant) -> Card | None:
        """
        House variant: return the most recently drawn card to the discard pile.

        Returns:
            The discarded card, or None if the hand was empty
        """
        card = participant.hand.pop_last()
        if card is None:
            self.events.emit_new(
                EventType.INVALID_ACTION,
                player=participant.name,
                message="Hand empty, cannot discard",
            )
            return None
        self.shoe.discard(card)
        self.events.emit_new(
            EventType.PLAYER_DISCARD,
            player=participant.name,
            card=str(card),
            hand_value=participant.hand_value,
        )
        return card

    def quit(self) -> None:
        """Flush the ledger and end the session."""
        self.ledger.save()
        self.end_game()
        raise SessionQuit()

    def determine_winners(self) -> list[int]:
        """
        Find the seats sharing the best total of 21 or less.

        Returns:
            Indices of the winners; empty when nobody qualifies
        """
        contenders = [
            (index, p.hand_value)
            for index, p in enumerate(self.participants)
            if p.is_seated and not p.busted and p.hand_value <= 21
        ]
        if not contenders:
            return []
        best = max(value for _, value in contenders)
        return [index for index, value in contenders if value == best]

    def pay_out(self, winners: list[int]) -> dict[str, int]:
        """
        Credit every winner from the pot.

        A winner who bet gets 2× the bet, or bet + 1.5× bet (rounded down)
        for a natural. A winner with no contribution shares the pot equally
        with the other non-contributing winners.

        Returns:
            Payout per winner name
        """
        total = self.pot.total
        if not winners or total <= 0:
            return {}

        non_contributors = [
            i for i in winners if self.pot.contribution(self.participants[i].name) <= 0
        ]
        payouts: dict[str, int] = {}
        for index in winners:
            winner = self.participants[index]
            bet = self.pot.contribution(winner.name)
            if bet > 0:
                if winner.hand.is_blackjack:
                    payout = bet + int(bet * self.game_config.blackjack_payout)
                else:
                    payout = bet * 2
            else:
                payout = total // len(non_contributors)

            winner.credit(payout)
            payouts[winner.name] = payout
            self._transactions.append(payout)
            self.ledger.record_payout(winner.name, payout)
            self.events.emit_new(
                EventType.PAYOUT,
                player=winner.name,
                amount=payout,
                chips=winner.chips,
            )

        self._payouts = payouts
        return payouts

    def update_statistics(self, winners: list[int]) -> None:
        """Record a win for every winner and a loss for every other seated participant."""
        winner_indices = set(winners)
        for index, participant in enumerate(self.participants):
            if not participant.is_seated:
                continue
            if index in winner_indices:
                self.ledger.record_win(participant.name)
            else:
                self.ledger.record_loss(participant.name)

    def evaluate_achievements(self, winners: list[int]) -> list[str]:
        """
        Unlock the human's achievements for this round.

        Returns:
            Identifiers unlocked for the first time
        """
        human = self.human
        if human is None or not human.is_seated:
            return []

        won = any(self.participants[i] is human for i in winners)
        view = RoundView(
            natural=human.name in self._naturals,
            won=won,
            stood=human.stood,
            busted=human.busted,
            value=human.hand_value,
            payout=self._payouts.get(human.name, 0),
            chips=human.chips,
            opponent_values=tuple(
                p.hand_value for p in self.participants if p is not human and p.is_seated
            ),
        )
        record = self.ledger.record(human.name)
        earned = earned_achievements(view, record, self.game_config.high_roller_payout)
        return [a.value for a in earned if self.ledger.unlock(human.name, a)]

    # Session helpers

    def recent_transactions(self, n: int = 10) -> list[int]:
        """Return the last ``n`` chip deltas, oldest first."""
        if n <= 0:
            return []
        return self._transactions[-n:]

    def eliminate_bankrupt(self) -> list[str]:
        """Remove seats left without chips; returns their names."""
        removed = [p.name for p in self.participants if p.chips <= 0]
        self.participants = [p for p in self.participants if p.chips > 0]
        for name in removed:
            logger.info("%s is bankrupt and leaves the table", name)
            self.events.emit_new(EventType.SEAT_ELIMINATED, player=name)
        return removed

    def reset_profile(self, name: str) -> bool:
        """Reset one player's record and restore their starting chips."""
        if not self.ledger.reset(name):
            return False
        participant = self.participant(name)
        if participant is not None:
            participant.chips = self.game_config.starting_chips
        return True

    def reset_all_profiles(self) -> None:
        """Reset every record, chip stack and wager history."""
        self.ledger.reset_all()
        for participant in self.participants:
            participant.chips = self.game_config.starting_chips
            participant.wager_history.clear()

    def leaderboard(self) -> list[Participant]:
        """Seats ordered by chips, richest first."""
        return sorted(self.participants, key=lambda p: p.chips, reverse=True)

    def snapshot(self, transactions: int = 12) -> TableSnapshot:
        """Return a read-only view of the table."""
        return TableSnapshot(
            round_number=self.round_number,
            pot_total=self.pot.total,
            seats=tuple(
                SeatView(
                    name=p.name,
                    is_human=p.is_human,
                    chips=p.chips,
                    cards=tuple(p.hand.cards),
                    value=p.hand_value,
                    status=p.status,
                )
                for p in self.participants
            ),
            recent_transactions=tuple(self.recent_transactions(transactions)),
        )

    def close(self) -> None:
        """End the session and flush the ledger."""
        if self.state != RoundState.GAME_OVER:
            self.end_game()
        self.ledger.save()
