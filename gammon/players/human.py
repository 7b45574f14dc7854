# =========================================================
# --- players_human.py ---
# =========================================================

from typing import Callable, List, Optional, Union

from gammon.core.board import Color
from gammon.core.moves import Move, CandidateMap
from gammon.core.state import GameState

from .player import Player, PlayerAction

# =========================================================

MoveInput = Callable[[CandidateMap, GameState, List[int]], Optional[Union[Move, PlayerAction]]]


class HumanPlayer(Player):
    """
    Human-controlled player class.

    Move selection is delegated to an input function, so the same player
    works with the CLI navigator or with scripted answers in tests.

    Attributes:
        color (Color): The color this player moves.
        name (str): Player display name.
        input_func (MoveInput): Function used to select a move from the candidate map.
    """

    is_human = True

    def __init__(self, color: Color, input_func: MoveInput, name: str = "Human Player"):
        """
        Initialize a human player.

        Args:
            color (Color): The color this player moves.
            input_func (MoveInput): Function to select a move or request an undo.
            name (str, optional): Player display name. Defaults to "Human Player".
        """
        super().__init__(color)
        self.name: str = name
        self.input_func: MoveInput = input_func

    def __str__(self) -> str:
        """Return player name with color."""
        return f"{self.name} ({self.color})"

    def select_move(
        self,
        candidates: CandidateMap,
        state: GameState,
        dice: List[int],
    ) -> Optional[Union[Move, PlayerAction]]:
        """
        Prompt the human player to select a move.

        Returns:
            The selected Move, PlayerAction.UNDO, or None to give up the turn.
        """
        return self.input_func(candidates, state, dice)
