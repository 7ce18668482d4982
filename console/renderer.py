"""Text rendering of table events and views."""

import time
from typing import Callable

from cardroom.events import EventType, GameEvent
from cardroom.game import TableSnapshot
from cardroom.ledger import ACHIEVEMENTS, PersistedRecord
from cardroom.participant import SeatStatus

RESET = "\033[0m"
BOLD = "\033[1m"
RED = "\033[1;31m"
GREEN = "\033[1;32m"
YELLOW = "\033[1;33m"
CYAN = "\033[1;36m"
MAGENTA = "\033[35m"

Writer = Callable[[str], None]


def chip_color(chips: int) -> str:
    if chips >= 200:
        return GREEN
    if chips >= 100:
        return "\033[32m"
    if chips >= 40:
        return YELLOW
    return RED


class ConsoleRenderer:
    """Turns events into lines of text."""

    def __init__(
        self,
        write: Writer = print,
        delay_ms: int = 0,
        upcard_mode: bool = False,
        human_name: str = "You",
    ) -> None:
        self.write = write
        self.delay_ms = delay_ms
        self.upcard_mode = upcard_mode
        self.human_name = human_name

    def pause(self) -> None:
        if self.delay_ms > 0:
            time.sleep(self.delay_ms / 1000)

    def __call__(self, event: GameEvent) -> None:
        data = event.data
        kind = event.event_type
        player = data.get("player")

        if kind == EventType.ROUND_STARTED:
            self.write(f"{CYAN}================== ROUND {data['round']} =================={RESET}")
        elif kind == EventType.ROUND_ENDED:
            self.write(f"{CYAN}============== END ROUND {data['round']} =============={RESET}\n")
        elif kind == EventType.SHOE_REBUILT:
            self.write(f"Shoe rebuilt and shuffled ({data['cards']} cards).")
        elif kind == EventType.BET_PLACED:
            self.write(f"{player:>16} bets {data['amount']} chips.")
            self.pause()
        elif kind == EventType.CARD_DEALT:
            self._render_deal(player, data["card"], data["upcard"])
            self.pause()
        elif kind == EventType.NATURAL_BLACKJACK:
            self.write(f"{GREEN}{player} has a natural blackjack!{RESET}")
        elif kind == EventType.PLAYER_HIT:
            verb = "You drew" if player == self.human_name else f"{YELLOW}{player}{RESET} draws"
            self.write(f"{verb}: {data['card']} -> value={data['hand_value']}")
            self.pause()
        elif kind == EventType.PLAYER_STAND:
            self.write(f"{player} stands at {data['hand_value']}")
        elif kind == EventType.PLAYER_DISCARD:
            self.write(f"Discarded {data['card']} to discard pile.")
        elif kind == EventType.PLAYER_BUSTS:
            self.write(f"{RED}{player} busted with {data['hand_value']}!{RESET}")
        elif kind == EventType.PAYOUT:
            self.write(f"{GREEN}{player}{RESET} receives payout: {data['amount']} chips.")
            self.pause()
        elif kind == EventType.PUSH_TO_HOUSE:
            self.write(f"{YELLOW}Everyone busted. House keeps the pot.{RESET}")
        elif kind == EventType.ACHIEVEMENT_UNLOCKED:
            self.write(
                f"{BOLD}\033[32m\n>>> Achievement Unlocked: {data['achievement']}!\n"
                f"    {data['description']}{RESET}"
            )
        elif kind == EventType.PERSISTENCE_FAILED:
            self.write(f"Warning: cannot {data['operation']} player stats ({data['message']})")
        elif kind == EventType.SEAT_ELIMINATED:
            self.write(f"{player} is bankrupt and removed from game.")
        elif kind in (EventType.INVALID_INPUT, EventType.INVALID_ACTION):
            self.write(data.get("message", "Invalid input."))

    def _render_deal(self, player: str, card: str, upcard: bool) -> None:
        if player == self.human_name:
            self.write(f"{GREEN}Dealt to You: {RESET}{card}")
        elif self.upcard_mode and upcard:
            self.write(f"{YELLOW}{player}{RESET} receives upcard: {card}")
        elif self.upcard_mode:
            self.write(f"{YELLOW}{player}{RESET} receives a hidden card")
        else:
            self.write(f"{YELLOW}{player}{RESET} receives: {card}")

    def scoreboard(self, snapshot: TableSnapshot) -> None:
        """Print every seat with chips, status and hand."""
        rule = f"{BOLD}{MAGENTA}{'-' * 63}{RESET}"
        self.write(rule)
        self.write(f"{'PLAYER':<20}{'CHIPS':<8}{'RESULT':<10}HAND")
        self.write(rule)
        for seat in snapshot.seats:
            name_color = GREEN if seat.is_human else YELLOW
            if seat.status == SeatStatus.BUSTED:
                result = f"{RED}{'BUST':<10}{RESET}"
            elif seat.value == 21:
                result = f"{GREEN}{'21':<10}{RESET}"
            else:
                result = f"{CYAN}{str(seat.status):<10}{RESET}"
            if seat.cards:
                hand = f"{seat.value} ({', '.join(str(c) for c in seat.cards)})"
            else:
                hand = "(no cards)"
            self.write(
                f"{name_color}{seat.name:<20}{RESET}"
                f"{chip_color(seat.chips)}{seat.chips:<8}{RESET}{result}{hand}"
            )
        self.write(rule)

    def transactions(self, deltas: tuple[int, ...] | list[int]) -> None:
        text = ", ".join(f"+{d}" if d >= 0 else str(d) for d in deltas)
        self.write(f"Recent transactions (oldest->newest): {text}")

    def profile(self, record: PersistedRecord) -> None:
        achievements = ", ".join(sorted(record.achievements))
        self.write(
            f"{record.name} : wins={record.wins} losses={record.losses} ties={record.ties}"
            f" total_games={record.total_games} best_streak={record.best_streak}"
            f" current_streak={record.current_streak} biggest_win={record.biggest_win}"
            f" blackjacks={record.blackjacks} achievements=[{achievements}]"
        )

    def achievements(self, record: PersistedRecord) -> None:
        self.write(f"\n=== Achievements for {record.name} ===\nUnlocked:")
        unlocked = sorted(record.achievements)
        if not unlocked:
            self.write("  (none)")
        for key in unlocked:
            self.write(f"  ✔ {key} - {ACHIEVEMENTS.get(key, '')}")
        self.write("\nLocked:")
        locked = [key for key in ACHIEVEMENTS if key not in record.achievements]
        if not locked:
            self.write("  (none, all unlocked!)")
        for key in locked:
            self.write(f"  ✘ {key} - {ACHIEVEMENTS[key]}")
