# =========================================================
# --- players_player.py ---
# =========================================================

from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Optional, Union

from gammon.core.board import Color
from gammon.core.moves import Move, CandidateMap
from gammon.core.state import GameState

# =========================================================

class PlayerAction(Enum):
    """Non-move answers a player may give instead of a Move."""
    UNDO = "undo"


class Player(ABC):
    """
    Abstract base class for a Backgammon player.

    Attributes:
        color (Color): The color this player moves.
        is_human (bool): Human players may undo moves within their turn.
    """

    is_human: bool = False

    def __init__(self, color: Color):
        """
        Initialize a player for a color.

        Args:
            color (Color): The color this player moves.
        """
        self.color: Color = Color(color)

    @abstractmethod
    def select_move(
        self,
        candidates: CandidateMap,
        state: GameState,
        dice: List[int],
    ) -> Optional[Union[Move, PlayerAction]]:
        """
        Select one move from the candidate map.

        Args:
            candidates (CandidateMap): Origin -> legal destinations; never empty.
            state (GameState): A copy of the current game state.
            dice (List[int]): Dice still available this turn.

        Returns:
            The chosen Move, a PlayerAction, or None to give up the turn.
        """
        pass

    def __str__(self) -> str:
        return f"{type(self).__name__}({self.color})"
