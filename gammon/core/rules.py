# =========================================================
# --- core_rules.py ---
# =========================================================

from typing import List, Optional, Union

from .board import (
    BOARD_START, BOARD_END, BAR_ORIGIN, BAR_ANCHOR, BEAR_OFF_ANCHOR, DIRECTION,
    ENTRY_START, ENTRY_END, OUTSIDE_HOME_MASK, NUM_OF_ALL_STONES, Color,
)
from .moves import MoveType, Move
from .state import GameState

from gammon.utils.bitmask import is_bit_set, set_all_bits

# =========================================================

class Rule:
    """Base class for Backgammon rules."""

    def __init__(self, rule_id: str, description: str) -> None:
        """
        Initialize a rule.

        Args:
            rule_id: Unique identifier for the rule.
            description: Human-readable description.
        """
        self.id: str = rule_id
        self.description: str = description

    def check(self, state: GameState, **kwargs) -> Union[bool, List[int], Optional[Color]]:
        """
        Evaluate the rule on the given state.

        Raises:
            NotImplementedError: Must be implemented in subclasses.
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{self.id}: {self.description}>"


# --- Specific Rules ---

class BarPriorityRule(Rule):
    """R1: Player must re-enter stones from the bar first."""

    def __init__(self) -> None:
        super().__init__("R1", "Player must re-enter stones from the bar before moving any other stones.")

    def origins(self, state: GameState, color: Color) -> List[int]:
        """Return the origins color may move from: the bar alone, or every occupied point."""
        if state.bar[color] > 0:
            return [BAR_ORIGIN]
        return state.occupied_points(color)

    def check(self, state: GameState, color: Color, start: int, **kwargs) -> bool:
        """
        Check that start is an origin color may use.

        With stones on the bar only the bar is allowed; otherwise start must
        be a point holding at least one stone of color.
        """
        if state.bar[color] > 0:
            return start == BAR_ORIGIN
        return state.num_of_stones(start, color) > 0


class BarEntryRule(Rule):
    """R2: A stone from the bar enters in the first quadrant of its track."""

    def __init__(self) -> None:
        super().__init__("R2", "A stone from the bar must enter on one of the six entry points.")

    def check(self, state: GameState, color: Color, target: int, **kwargs) -> bool:
        return ENTRY_START[color] <= target <= ENTRY_END[color]


class BearingOffEligibilityRule(Rule):
    """R3: Player may bear off only if all stones are in their home board."""

    def __init__(self) -> None:
        super().__init__("R3", "Player may bear off only if all stones are in their home board.")

    def check(self, state: GameState, color: Color, **kwargs) -> bool:
        """
        Check if all stones of color are inside its home board and the bar is empty.

        Returns:
            True if bearing off is allowed, False otherwise.
        """
        if state.bar[color] > 0:
            return False
        return (OUTSIDE_HOME_MASK[color] & state.occupied_mask(color)) == 0


class BearOffTargetRule(Rule):
    """R4: Checks if a move can bear off, including 'overshoot' logic."""

    def __init__(self, eligibility: BearingOffEligibilityRule) -> None:
        super().__init__("R4", "Bear off with the exact die, or a larger one if no stone is behind.")
        self.eligibility = eligibility

    def _no_stone_behind(self, start: int, state: GameState, color: Color) -> bool:
        """Check that no stone of color sits farther from home than start."""
        if DIRECTION[color] > 0:
            mask_behind = set_all_bits(BOARD_START, start - 1)
        else:
            mask_behind = set_all_bits(start + 1, BOARD_END)
        return (state.occupied_mask(color) & mask_behind) == 0

    def check(self, state: GameState, move: Move, **kwargs) -> bool:
        """
        Determine if a stone can legally bear off.

        Returns:
            True if the move can bear off, False otherwise.
        """
        color = move.color
        if not self.eligibility.check(state, color=color):
            return False
        if move.from_bar or not state.is_on_board(move.from_point):
            return False

        exact = move.distance
        available = state.dice.available
        if exact in available:
            return True

        if any(d > exact for d in available):
            return self._no_stone_behind(move.from_point, state, color)

        return False


class BoardTargetRule(Rule):
    """R5: Any target other than the bear-off anchor must be a board point."""

    def __init__(self) -> None:
        super().__init__("R5", "Target must be a board point or the mover's bear-off anchor.")

    def check(self, state: GameState, target: int, **kwargs) -> bool:
        return state.is_on_board(target)


class DirectionRule(Rule):
    """R6: Stones only move toward their home board."""

    def __init__(self) -> None:
        super().__init__("R6", "Stones may not move backwards.")

    def check(self, state: GameState, move: Move, **kwargs) -> bool:
        return move.distance > 0


class OccupancyRule(Rule):
    """R7: A point held by two or more opposing stones is blocked."""

    def __init__(self) -> None:
        super().__init__("R7", "Target may not hold two or more opposing stones.")

    def check(self, state: GameState, color: Color, target: int, **kwargs) -> bool:
        return not is_bit_set(target, state.blocked_mask(color))


class DistanceRule(Rule):
    """R8: The pip distance must match an available die."""

    def __init__(self) -> None:
        super().__init__("R8", "Move distance must equal an available die.")

    def check(self, state: GameState, move: Move, **kwargs) -> bool:
        return move.distance in state.dice.available


class SingleHitRule(Rule):
    """R9: Target with exactly one opponent stone is hit."""

    def __init__(self) -> None:
        super().__init__("R9", "Target point with exactly one opponent stone is hit.")

    def check(self, state: GameState, color: Color, target: int, **kwargs) -> bool:
        return state.num_of_stones(target, color.opponent) == 1


class GameOverRule(Rule):
    """R10: A color that has borne off all stones wins."""

    def __init__(self) -> None:
        super().__init__("R10", "A color with all stones borne off wins.")

    def check(self, state: GameState, **kwargs) -> Optional[Color]:
        """
        Determine the winner, if any.

        Returns:
            The winning color, or None while the game goes on.
        """
        for color in Color:
            if state.home[color] == NUM_OF_ALL_STONES[color]:
                return color
        return None


class BackgammonRules:
    """Aggregates all rules and provides a convenient interface for game logic."""

    def __init__(self) -> None:
        """Initialize all rule instances."""
        self.R1 = BarPriorityRule()
        self.R2 = BarEntryRule()
        self.R3 = BearingOffEligibilityRule()
        self.R4 = BearOffTargetRule(self.R3)
        self.R5 = BoardTargetRule()
        self.R6 = DirectionRule()
        self.R7 = OccupancyRule()
        self.R8 = DistanceRule()
        self.R9 = SingleHitRule()
        self.R10 = GameOverRule()

        self.rules = [self.R1, self.R2, self.R3, self.R4, self.R5,
                      self.R6, self.R7, self.R8, self.R9, self.R10]

    def is_legal(self, state: GameState, start: int, target: int, color: Optional[Color] = None) -> bool:
        """
        Decide whether moving a stone of color from start to target is legal.

        Checks run in order: bar priority, bar entry, bear-off, board target,
        direction, occupancy and dice distance. The state is never modified.

        Args:
            state: Current game state.
            start: Origin point, or -1 for the bar.
            target: Destination point, or the color's bear-off anchor.
            color: Moving color; defaults to the color to move.

        Returns:
            True if the move is legal, False otherwise.
        """
        color = state.turn if color is None else Color(color)

        if not self.R1.check(state, color=color, start=start):
            return False
        if start == BAR_ORIGIN and not self.R2.check(state, color=color, target=target):
            return False

        move = Move(start, target, color)
        if target == BEAR_OFF_ANCHOR[color]:
            return self.R4.check(state, move=move)

        return (
            self.R5.check(state, target=target) and
            self.R6.check(state, move=move) and
            self.R7.check(state, color=color, target=target) and
            self.R8.check(state, move=move)
        )

    def allowed_origins(self, state: GameState, color: Optional[Color] = None) -> List[int]:
        """Return origins color may move from (bar priority applied)."""
        color = state.turn if color is None else color
        return self.R1.origins(state, color)

    def bearing_off_allowed(self, state: GameState, color: Optional[Color] = None) -> bool:
        """Return True if color may bear off."""
        color = state.turn if color is None else color
        return self.R3.check(state, color=color)

    def hittable_target(self, state: GameState, target: int, color: Optional[Color] = None) -> bool:
        """Return True if landing on target hits a blot."""
        color = state.turn if color is None else color
        return self.R9.check(state, color=color, target=target)

    def target_for_die(self, start: int, die: int, color: Color) -> int:
        """
        Return where a stone lands when moved from start by die.

        Anything past the end of the track is reported as the bear-off anchor.
        """
        origin = BAR_ANCHOR[color] if start == BAR_ORIGIN else start
        target = origin + die * DIRECTION[color]
        if (target - BEAR_OFF_ANCHOR[color]) * DIRECTION[color] >= 0:
            return BEAR_OFF_ANCHOR[color]
        return target

    def die_for_move(self, state: GameState, move: Move) -> Optional[int]:
        """Return the die the move consumes: exact distance or smallest larger die."""
        return state.dice.die_for(move.distance)

    def move_type(self, state: GameState, move: Move) -> MoveType:
        """Classify a move before it is applied."""
        if move.bears_off:
            return MoveType.BEAR_OFF
        if self.hittable_target(state, move.to_point, move.color):
            return MoveType.HIT
        if move.from_bar:
            return MoveType.ENTER
        return MoveType.NORMAL

    def winner(self, state: GameState) -> Optional[Color]:
        """Check if the game is over and return the winning color."""
        return self.R10.check(state)

