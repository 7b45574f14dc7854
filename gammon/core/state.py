# =========================================================
# --- core_state.py ---
# =========================================================

import numpy as np
from enum import Enum
from typing import Optional, List, Dict, Any, Tuple

from .board import (
    BOARD_START, BOARD_END, STONE, NUM_OF_ALL_STONES, DEFAULT_POSITIONS,
    HOME_MARKER, BAR_MARKER, Color,
)
from .dice import Dice
from .moves import Move
from .state_invariants import assert_state_invariant

from gammon.utils.bitmask import bits_from_indices, set_bit, clear_bit, indices_from_bits

# =========================================================

class Phase(Enum):
    """Turn phase of the game."""
    ROLLING = "rolling"
    MOVING = "moving"
    GAME_OVER = "gameOver"


class BackgammonMovesMixin:
    """
    Mixin class providing all stone-moving operations:
    - adding and removing stones
    - hitting, entering and bearing off
    - applying a single validated move including dice consumption
    """

    def enter_stone(self, target: int, color: Color) -> None:
        """Move a stone of color from its bar to target."""
        self.bar[color] -= 1
        self._land_stone(target, color)

    def move_stone(self, start: int, target: int, color: Color) -> None:
        """Move a stone from start to target for the given color."""
        self._remove_stone(start, color)
        self._land_stone(target, color)

    def bear_off(self, point: int, color: Color) -> None:
        """Bear off a stone from the board for the given color."""
        self._remove_stone(point, color)
        self.home[color] += 1

    def hit_stone(self, point: int, color: Color) -> None:
        """Send the opponent's blot on point to the opponent's bar."""
        opp = color.opponent
        self._remove_stone(point, opp)
        self.bar[opp] += 1

    def _land_stone(self, target: int, color: Color) -> None:
        """Place a stone on target, hitting a lone opposing stone first."""
        if self.num_of_stones(target, color.opponent) == 1:
            self.hit_stone(target, color)
        self._add_stone(target, color)

    def apply_move(self, move: Move) -> None:
        """
        Apply a single move to the state in place.

        The move is assumed to be validated. The stone is moved (hitting
        or bearing off as needed), the matching die is consumed and the
        turn passes to the opponent once no dice remain.

        Args:
            move (Move): The move to apply.
        """
        if move.from_bar:
            self.enter_stone(move.to_point, move.color)
        elif move.bears_off:
            self.bear_off(move.from_point, move.color)
        else:
            self.move_stone(move.from_point, move.to_point, move.color)

        die = self.dice.die_for(move.distance)
        if die is not None:
            self.dice.consume(die)

        if not self.dice.available:
            self.switch_turn()
            self.phase = Phase.ROLLING

        self._assert("apply_move")

    def applied(self, move: Move) -> "GameState":
        """Return a copy of the state with move applied; self is untouched."""
        new_state = self.copy()
        new_state.apply_move(move)
        return new_state


# =========================================================

class GameState(BackgammonMovesMixin):
    """
    Represents the complete mutable Backgammon game state.

    Attributes:
        points (np.ndarray): 26 signed counts; slots 1-24 are board points,
            positive for white stones, negative for black stones.
        bar (np.ndarray): Stones on the bar per color.
        home (np.ndarray): Stones borne off per color.
        dice (Dice): Rolled and still available dice.
        turn (Color): Color to move.
        phase (Phase): Rolling, moving or game over.
        winner (Optional[Color]): Set once a color has borne off all stones.
        _occ_mask (List[int]): Points occupied per color.
        _blocked_mask (List[int]): Points blocked for each color (2+ opposing stones).
        debug (bool): Enable state invariant assertions.
    """

    def __init__(
        self,
        positions: Optional[List[List[Tuple[int, int]]]] = None,
        start_player: Color = Color.WHITE,
        debug: bool = False,
    ):
        self.debug: bool = debug

        self.points: np.ndarray = np.zeros(26, dtype=np.int8)
        self.bar: np.ndarray = np.zeros(2, dtype=np.int8)
        self.home: np.ndarray = np.zeros(2, dtype=np.int8)

        self._occ_mask: List[int] = [0, 0]
        self._blocked_mask: List[int] = [0, 0]

        self.dice: Dice = Dice()
        self.phase: Phase = Phase.ROLLING
        self.winner: Optional[Color] = None

        self.start_game(positions, start_player)

    # ---------- Setup / Copy ----------
    def copy(self) -> "GameState":
        """Return a deep copy of the current game state."""
        new_state = GameState.__new__(GameState)
        new_state.debug = self.debug
        new_state.points = self.points.copy()
        new_state.bar = self.bar.copy()
        new_state.home = self.home.copy()
        new_state._occ_mask = self._occ_mask.copy()
        new_state._blocked_mask = self._blocked_mask.copy()
        new_state.dice = self.dice.copy()
        new_state.turn = self.turn
        new_state.phase = self.phase
        new_state.winner = self.winner
        return new_state

    def restore(self, snapshot: "GameState") -> None:
        """Overwrite this state in place with the content of snapshot."""
        self.points[:] = snapshot.points
        self.bar[:] = snapshot.bar
        self.home[:] = snapshot.home
        self.dice = snapshot.dice.copy()
        self.turn = snapshot.turn
        self.phase = snapshot.phase
        self.winner = snapshot.winner
        self._recompute_masks()

    def reset_board(self) -> None:
        """Reset the board, masks, and counters to an empty state."""
        self.points[:] = 0
        self.bar[:] = 0
        self.home[:] = 0
        self._occ_mask[:] = [0, 0]
        self._blocked_mask[:] = [0, 0]

    def start_game(
        self,
        positions: Optional[List[List[Tuple[int, int]]]] = None,
        start_player: Color = Color.WHITE,
    ) -> None:
        """Initialize a new game with optional starting positions and starting color."""
        self.reset_board()
        self.turn: Color = Color(start_player)
        self.dice = Dice()
        self.phase = Phase.ROLLING
        self.winner = None
        if positions is None:
            positions = DEFAULT_POSITIONS
        self.place_stones_from_list(positions)

    # ---------- Properties ----------
    def is_on_board(self, point: int) -> bool:
        """Check if a point index is on the board."""
        return BOARD_START <= point <= BOARD_END

    def num_of_stones(self, point: int, color: Color) -> int:
        """
        Return the number of stones of color on a board point.

        Args:
            point (int): Board point index.
            color (Color): Color to count.

        Returns:
            int: Number of stones of the color at the point (0 if off board).
        """
        if not self.is_on_board(point):
            return 0
        val = int(self.points[point]) * STONE[color]
        return val if val > 0 else 0

    def owner(self, point: int) -> Optional[Color]:
        """Color occupying a point, or None for an empty point."""
        val = int(self.points[point])
        if val > 0:
            return Color.WHITE
        if val < 0:
            return Color.BLACK
        return None

    def stones_on_board(self, color: Color) -> int:
        """Total stones of color on points 1-24."""
        return sum(self.num_of_stones(p, color) for p in range(BOARD_START, BOARD_END + 1))

    def occupied_mask(self, color: Color) -> int:
        """Bitmask of points holding at least one stone of color."""
        return self._occ_mask[color]

    def blocked_mask(self, color: Color) -> int:
        """Bitmask of points color cannot land on."""
        return self._blocked_mask[color]

    def occupied_points(self, color: Color) -> List[int]:
        """Ascending list of points holding stones of color."""
        return indices_from_bits(self._occ_mask[color])

    # ---------- Masks / Updates ----------
    def _update_masks(self, point: int) -> None:
        """Update occupancy and blocked bitmasks for a given point."""
        for color in Color:
            if self.num_of_stones(point, color) > 0:
                self._occ_mask[color] = set_bit(point, self._occ_mask[color])
            else:
                self._occ_mask[color] = clear_bit(point, self._occ_mask[color])

            if self.num_of_stones(point, color.opponent) >= 2:
                self._blocked_mask[color] = set_bit(point, self._blocked_mask[color])
            else:
                self._blocked_mask[color] = clear_bit(point, self._blocked_mask[color])

    def _recompute_masks(self) -> None:
        """Recompute all occupancy and blocked masks for both colors."""
        for color in Color:
            board = self.points[BOARD_START:BOARD_END + 1]
            occ = np.flatnonzero(board * STONE[color] > 0) + BOARD_START
            blocked = np.flatnonzero(board * STONE[color.opponent] >= 2) + BOARD_START
            self._occ_mask[color] = bits_from_indices(occ)
            self._blocked_mask[color] = bits_from_indices(blocked)

    # ---------- Stone primitives ----------
    def _add_stone(self, point: int, color: Color) -> None:
        """Add a stone to a point for a color and update masks."""
        self.points[point] += STONE[color]
        self._update_masks(point)

    def _remove_stone(self, point: int, color: Color) -> int:
        """
        Remove a stone from a point for a color and update masks.

        Returns:
            int: The stone removed (+1 or -1), 0 if the color has no stone there.
        """
        if self.num_of_stones(point, color) == 0:
            return 0
        self.points[point] -= STONE[color]
        self._update_masks(point)
        return STONE[color]

    # ---------- Turn ----------
    def switch_turn(self) -> None:
        """Switch the color to move."""
        self.turn = self.turn.opponent

    # ---------- Serialization ----------
    def place_stones_from_list(self, positions: List[List[Tuple[int, int]]]) -> None:
        """
        Place stones given a position list per color.

        Point -1 counts borne-off stones, point 0 counts stones on the bar.

        Raises:
            ValueError: If a color does not total exactly 15 stones, or two
                colors share a point.
        """
        for color in Color:
            total = 0
            for point, count in positions[color]:
                if point == HOME_MARKER:
                    self.home[color] += count
                elif point == BAR_MARKER:
                    self.bar[color] += count
                else:
                    if not self.is_on_board(point):
                        raise ValueError(f"Invalid point {point}")
                    if self.num_of_stones(point, color.opponent) > 0:
                        raise ValueError(f"Point {point} already holds the other color")
                    self.points[point] += count * STONE[color]
                total += count
            if total != NUM_OF_ALL_STONES[color]:
                raise ValueError("Invalid number of stones")
        self._recompute_masks()

    def state_to_list(self) -> List[List[Tuple[int, int]]]:
        """Serialize the stones into a position list per color."""
        positions: List[List[Tuple[int, int]]] = [[], []]
        for color in Color:
            for point in self.occupied_points(color):
                positions[color].append((point, self.num_of_stones(point, color)))
            if self.bar[color] > 0:
                positions[color].append((BAR_MARKER, int(self.bar[color])))
            if self.home[color] > 0:
                positions[color].append((HOME_MARKER, int(self.home[color])))
        return positions

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly description of the state."""
        points = []
        for point in range(BOARD_START, BOARD_END + 1):
            color = self.owner(point)
            points.append({
                "position": point,
                "color": str(color) if color is not None else None,
                "count": abs(int(self.points[point])),
            })
        return {
            "points": points,
            "bar": {str(c): int(self.bar[c]) for c in Color},
            "home": {str(c): int(self.home[c]) for c in Color},
            "currentPlayer": str(self.turn),
            "dice": {"values": list(self.dice.values), "available": list(self.dice.available)},
            "gamePhase": self.phase.value,
            "winner": str(self.winner) if self.winner is not None else None,
        }

    # ---------- Equality ----------
    def __eq__(self, other: Any) -> bool:
        """Check equality with another GameState."""
        if not isinstance(other, GameState):
            return NotImplemented
        return (
            np.array_equal(self.points, other.points) and
            np.array_equal(self.bar, other.bar) and
            np.array_equal(self.home, other.home) and
            self.dice == other.dice and
            self.turn == other.turn and
            self.phase == other.phase and
            self.winner == other.winner
        )

    __hash__ = None

    def __repr__(self) -> str:
        return f"<GameState turn={self.turn} phase={self.phase.value} dice={self.dice.available}>"

    # ---------- Debug / Assertions ----------
    def _assert(self, where: str = "") -> None:
        """Assert state invariants if debug mode is active."""
        if self.debug:
            assert_state_invariant(self, where)
