"""Console front-end: prompts, the profiles menu and the session loop."""

import dataclasses
import logging
from typing import Callable

from cardroom.game import HumanController, RoundEngine, SessionQuit
from cardroom.ledger import StatsLedger, get_record_store
from cardroom.participant import HUMAN_NAME, Participant, default_roster
from config import SUPPORTED_DECK_COUNTS, AppConfig, GameConfig, config
from console.renderer import BOLD, RESET, ConsoleRenderer

logger = logging.getLogger(__name__)

Reader = Callable[[str], str]

HELP_TEXT = (
    "\nActions:\n  h = hit\n  s = stand\n  d = discard card (remove last)\n"
    "  v = view profiles\n  q = quit\n  ? = help"
)

MENU_TEXT = (
    "\n--- Player Profiles Menu ---\n"
    "1) View all profiles\n2) View specific profile\n3) Reset a profile's stats\n"
    "4) Reset ALL stats\n5) Back to game\n6) View achievements for a player\n"
    "7) View chip counts\n8) View wager history for a player"
)


def startup_config(game: GameConfig, read: Reader = input) -> GameConfig:
    """Ask for shoe size, text speed and upcard mode; blanks keep the defaults."""
    decks = game.num_decks
    line = read(f"Choose shoe size (1,2,4,6) decks [default {decks}]: ").strip()
    if line:
        try:
            decks = int(line)
        except ValueError:
            decks = game.num_decks
        if decks not in SUPPORTED_DECK_COUNTS:
            decks = 1

    speed = game.text_speed
    line = read("Choose text speed: 0=Fast, 1=Normal, 2=Slow [default 1]: ").strip()
    if line:
        try:
            speed = int(line) if int(line) in (0, 1, 2) else game.text_speed
        except ValueError:
            speed = game.text_speed

    line = read("Enable dealer-upcard mode? (show only first card of NPCs) (y/n) [n]: ").strip()
    upcard_mode = line[:1].lower() == "y" if line else game.upcard_mode

    return dataclasses.replace(game, num_decks=decks, text_speed=speed, upcard_mode=upcard_mode)


class ConsoleController(HumanController):
    """Reads the human's bets and actions from standard input."""

    def __init__(self, renderer: ConsoleRenderer, read: Reader = input) -> None:
        self.renderer = renderer
        self.read = read

    def choose_bet(self, participant: Participant, default: int) -> str:
        return self.read(
            f"{BOLD}You have {participant.chips} chips. Press ENTER to bet {default}"
            f" or type an amount (1-{participant.chips}): {RESET}"
        )

    def choose_action(self, participant: Participant) -> str:
        value = participant.hand_value
        self.renderer.write(f"\nYour hand: {participant.hand}")
        if 17 <= value < 21:
            self.renderer.write("Dealer: You're close to 21, careful now!")
        return self.read("Choose action: (h)it, (s)tand, (d)iscard, (v)iew profiles, (q)uit, (?)help: ")

    def show_help(self) -> None:
        self.renderer.write(HELP_TEXT)

    def open_menu(self, engine: RoundEngine) -> None:
        profiles_menu(engine, self.renderer, self.read)


def profiles_menu(engine: RoundEngine, renderer: ConsoleRenderer, read: Reader = input) -> None:
    """Browse and reset profiles until the player goes back to the game."""
    ledger = engine.ledger
    while True:
        renderer.write(MENU_TEXT)
        choice = read("Choose: ").strip()

        if choice == "1":
            renderer.write("\n-- All Profiles --")
            for record in ledger.profiles():
                renderer.profile(record)
        elif choice == "2":
            name = read("Enter player name: ").strip()
            if name in ledger:
                renderer.profile(ledger.record(name))
                seat = engine.participant(name)
                if seat is not None:
                    renderer.write(f"Chips: {seat.chips}")
            else:
                renderer.write(f"No profile named '{name}'.")
        elif choice == "3":
            name = read("Enter player name to reset: ").strip()
            if engine.reset_profile(name):
                renderer.write(f"Profile reset for {name}.")
            else:
                renderer.write(f"No profile named '{name}'.")
        elif choice == "4":
            engine.reset_all_profiles()
            renderer.write("All profiles reset.")
        elif choice == "5":
            return
        elif choice == "6":
            name = read("Enter player name for achievements (default: You): ").strip() or HUMAN_NAME
            if name in ledger:
                renderer.achievements(ledger.record(name))
            else:
                renderer.write(f"No profile named '{name}'.")
        elif choice == "7":
            renderer.write("\n--- Chip Counts ---")
            for seat in engine.participants:
                renderer.write(f"{seat.name} : {seat.chips}")
        elif choice == "8":
            name = read("Enter player name for wager history (default: You): ").strip() or HUMAN_NAME
            seat = engine.participant(name)
            if seat is None:
                renderer.write(f"No player named '{name}'.")
            else:
                history = ", ".join(str(w) for w in seat.wager_history)
                renderer.write(f"Wager history for {name}: {history}")
        else:
            renderer.write("Unknown choice.")


def show_session_stats(engine: RoundEngine, renderer: ConsoleRenderer) -> None:
    renderer.write(f"\n{BOLD}===== SESSION STATS ====={RESET}")
    for seat in engine.participants:
        tally = engine.ledger.session_tally(seat.name)
        renderer.write(
            f"{seat.name} -> wins: {tally.wins}, losses: {tally.losses}, ties: {tally.ties},"
            f" blackjacks: {tally.blackjacks}, chips: {seat.chips}"
        )
    renderer.write("=========================")


def show_leaderboard(engine: RoundEngine, renderer: ConsoleRenderer) -> None:
    renderer.write("\nFinal stats and leaderboard:")
    for rank, seat in enumerate(engine.leaderboard(), start=1):
        renderer.write(f"{rank}. {seat.name} - chips: {seat.chips}")


def run_session(engine: RoundEngine, renderer: ConsoleRenderer, read: Reader = input) -> None:
    """Play rounds until the player stops or the table empties."""
    try:
        while True:
            result = engine.play_round()
            renderer.write(f"\nPot total: {result.pot_total} chips.")
            renderer.transactions(engine.recent_transactions(12))
            renderer.scoreboard(engine.snapshot())
            show_session_stats(engine, renderer)

            answer = read("Play another round? (y/n) or (p) profiles: ").strip().lower()
            if answer.startswith("p"):
                profiles_menu(engine, renderer, read)

            engine.eliminate_bankrupt()
            if answer.startswith("n"):
                break
            if len(engine.participants) <= 1:
                renderer.write("Not enough players to continue. Ending game.")
                break
    except SessionQuit:
        renderer.write("Quitting...")
        return

    show_leaderboard(engine, renderer)
    engine.close()
    renderer.write("Thank you for playing!")


def build_engine(app_config: AppConfig, renderer: ConsoleRenderer, read: Reader = input) -> RoundEngine:
    """Load the ledger and seat the default table."""
    ledger = StatsLedger(get_record_store(app_config.storage))
    ledger.events.subscribe(renderer)
    ledger.load()
    return RoundEngine(
        default_roster(app_config.game.starting_chips),
        ledger,
        controller=ConsoleController(renderer, read),
        game_config=app_config.game,
    )


def main() -> None:
    logging.basicConfig(
        level=logging.DEBUG if config.debug else config.log_level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    print(f"{BOLD}Welcome to Blackjack (colored edition)!\n{RESET}")
    try:
        game = startup_config(config.game)
    except (EOFError, KeyboardInterrupt):
        return
    app_config = dataclasses.replace(config, game=game)
    renderer = ConsoleRenderer(delay_ms=game.delay_ms, upcard_mode=game.upcard_mode)
    engine = build_engine(app_config, renderer)
    try:
        run_session(engine, renderer)
    except (EOFError, KeyboardInterrupt):
        engine.close()
