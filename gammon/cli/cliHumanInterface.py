# =========================================================
# --- cli_cliHumanInterface.py ---
# =========================================================
from typing import Callable, List, Union

from gammon.core.moves import Move, CandidateMap
from gammon.core.state import GameState
from gammon.players.player import PlayerAction

from .boardDisplay import BoardDisplay
from .cliUtils import pause, parse_position, position_label, safe_input

# =========================================================

class HumanMoveNavigator:
    """
    Interactive CLI for a human player: pick an origin, then a destination.

    'u' asks for an undo of the previous move of this turn, 'b' goes back
    to the origin choice, 'q' quits the game.
    """

    def __init__(
        self,
        state: GameState,
        candidates: CandidateMap,
        dice: List[int],
        ask: Callable[[str], str] = safe_input,
        clear_screen: bool = True,
    ):
        """
        Args:
            state (GameState): Current board state.
            candidates (CandidateMap): Origin -> legal destinations.
            dice (List[int]): Dice still available.
            ask (Callable[[str], str]): Prompt function.
            clear_screen (bool): Clear the terminal before drawing the board.
        """
        self.state: GameState = state
        self.color = state.turn
        self.candidates: CandidateMap = candidates
        self.dice: List[int] = dice
        self.ask: Callable[[str], str] = ask
        self.board_display: BoardDisplay = BoardDisplay(state, clear_screen=clear_screen)

    # ---------------- Main method ----------------
    def navigate(self) -> Union[Move, PlayerAction]:
        """
        Run the origin/destination dialogue.

        Returns:
            The chosen Move, or PlayerAction.UNDO.
        """
        while True:
            self.board_display.draw_all()
            self._display_origins()
            choice = self.ask("\nMove from (u = undo): ").lower()
            if choice == "u":
                return PlayerAction.UNDO

            origin = parse_position(choice, self.color)
            if origin not in self.candidates:
                self._complain(f"No legal move from '{choice}'.")
                continue

            destinations = self.candidates[origin]
            self.board_display.draw_all(origin=origin, targets=destinations)
            print("\nDestinations: " + self._labels(destinations))
            target_choice = self.ask("Move to (b = back): ").lower()
            if target_choice == "b":
                continue

            target = parse_position(target_choice, self.color)
            if target not in destinations:
                self._complain(f"'{target_choice}' is not a legal destination.")
                continue

            return Move(origin, target, self.color)

    # ---------------- Helpers ----------------
    def _labels(self, positions: List[int]) -> str:
        return ", ".join(position_label(p, self.color) for p in positions)

    def _display_origins(self) -> None:
        print("\nDice 🎲: " + str(self.dice))
        for origin, dests in self.candidates.items():
            print(f"  {position_label(origin, self.color).rjust(3)} -> {self._labels(dests)}")

    def _complain(self, message: str) -> None:
        print(message)
        pause(0.5)
