# =========================================================
# --- cli_cliHandlers.py ---
# =========================================================

from typing import Any, Callable, Dict

from gammon.core.state import GameState

from .cliColors import PLAYER, TColor, paint
from .cliUtils import pause
from .boardDisplay import BoardDisplay

# =========================================================

Event = Dict[str, Any]


class CLIHandlers:
    """
    Prints engine events to the terminal.

    Every event type yielded by GameEngine.play_game has one handler;
    events carrying a state redraw the board.
    """

    def __init__(self, delay: float = 1.5, clear_screen: bool = True):
        """
        Args:
            delay (float): Pause after each event so a human can follow bot play.
            clear_screen (bool): Clear the terminal before redrawing the board.
        """
        self.delay: float = delay
        self.clear_screen: bool = clear_screen

    def _board(self, state: GameState) -> None:
        BoardDisplay(state, clear_screen=self.clear_screen).draw_all()

    def _say(self, text: str) -> None:
        print(text)
        pause(self.delay)

    # ---------------- Event Handlers ----------------
    def on_roll(self, event: Event) -> None:
        dice = event["dice"]
        self._say(f"\n{PLAYER[event['turn']]} ({event['player_type']}) rolled {'🎲' * len(dice)} {dice}")

    def on_no_moves(self, event: Event) -> None:
        """The remaining dice cannot be played: the turn passes."""
        self._say(f"\n{PLAYER[event['turn']]} has no legal move, turn passes.")

    def on_chosen_move(self, event: Event) -> None:
        print(f"\n{PLAYER[event['turn']]} plays {event['move']}")

    def on_apply_move(self, event: Event) -> None:
        self._board(event["state"])
        self._say(f"\n{event['move']}  [{event['move_type'].name.lower().replace('_', ' ')}]")

    def on_move_rejected(self, event: Event) -> None:
        self._say(f"\n{paint('Rejected:', TColor.ERROR)} {event['reason']}")

    def on_undo(self, event: Event) -> None:
        self._board(event["state"])
        print("\nMove taken back.")

    def on_forfeit(self, event: Event) -> None:
        """Agent failure or refused move: the rest of the turn is lost."""
        self._say(f"\n{PLAYER[event['turn']]} {paint('loses the turn:', TColor.ERROR)} {event['reason']}")

    def on_turn_end(self, event: Event) -> None:
        self._say(f"\n--- {PLAYER[event['next_turn']]} to roll ---")

    def on_game_over(self, event: Event) -> None:
        self._board(event["state"])
        print(f"\n{PLAYER[event['winner']]} {paint('wins!', TColor.BOLD)} ({event['player_type']})\n")

    # ---------------- Handler Mapping ----------------
    @property
    def handlers(self) -> Dict[str, Callable[[Event], None]]:
        """Event type -> handler."""
        return {
            "roll_dice": self.on_roll,
            "no_moves": self.on_no_moves,
            "chosen_move": self.on_chosen_move,
            "apply_move": self.on_apply_move,
            "move_rejected": self.on_move_rejected,
            "undo": self.on_undo,
            "forfeit": self.on_forfeit,
            "turn_end": self.on_turn_end,
            "game_over": self.on_game_over,
        }
