# =========================================================
# --- core_moves.py ---
# =========================================================

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List

from .board import BAR_ANCHOR, BAR_ORIGIN, BEAR_OFF_ANCHOR, DIRECTION, Color

# =========================================================

class MoveType(Enum):
    """
    Enumeration of possible move types in Backgammon.

    Attributes:
        NORMAL: Standard move from one point to another.
        HIT: Move that hits an opponent's blot.
        ENTER: Move that re-enters a stone from the bar.
        BEAR_OFF: Move that bears a stone off the board.
    """
    NORMAL = 1
    HIT = 2
    ENTER = 3
    BEAR_OFF = 4


@dataclass(frozen=True)
class Move:
    """
    Represents a single atomic move in Backgammon.

    Attributes:
        from_point (int): Starting point, or -1 for the bar.
        to_point (int): Target point, or the color's bear-off anchor.
        color (Color): The color making the move.
    """
    from_point: int
    to_point: int
    color: Color

    @property
    def from_bar(self) -> bool:
        """True if the move re-enters a stone from the bar."""
        return self.from_point == BAR_ORIGIN

    @property
    def bears_off(self) -> bool:
        """True if the move bears a stone off."""
        return self.to_point == BEAR_OFF_ANCHOR[self.color]

    @property
    def distance(self) -> int:
        """
        Pip distance in the color's direction of travel.

        Bar moves count from the color's bar anchor. Backward moves
        are negative.
        """
        start = BAR_ANCHOR[self.color] if self.from_bar else self.from_point
        return (self.to_point - start) * DIRECTION[self.color]

    def __str__(self) -> str:
        """Return a human-readable string representation of the move."""
        start = "bar" if self.from_bar else f"{self.from_point}"
        target = "off" if self.bears_off else f"{self.to_point}"
        return f"{self.color}: " + start.rjust(3) + " > " + target.rjust(3)


#: Candidate map: origin -> ordered legal destinations
CandidateMap = Dict[int, List[int]]
