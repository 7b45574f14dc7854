# =========================================================
# --- core_generator.py ---
# =========================================================

from typing import List, Optional

from .board import BOARD_START, BOARD_END, BAR_ORIGIN, BEAR_OFF_ANCHOR, Color
from .moves import Move, CandidateMap
from .state import GameState
from .rules import BackgammonRules

# =========================================================

class DestinationGenerator:
    """Enumerates legal destinations by probing the rules against every target."""

    def __init__(self, rules: Optional[BackgammonRules] = None) -> None:
        self.rules: BackgammonRules = rules or BackgammonRules()

    def possible_moves(self, state: GameState, origin: int, color: Optional[Color] = None) -> List[int]:
        """
        Return every legal destination from origin for the color to move.

        Points are probed in ascending order, then the bear-off anchor is
        appended when bearing off is allowed.

        Args:
            state: Current game state (not modified).
            origin: Origin point, or -1 for the bar.
            color: Moving color; defaults to the color to move.

        Returns:
            List of legal destinations, empty if origin cannot move.
        """
        color = state.turn if color is None else color

        if state.bar[color] > 0 and origin != BAR_ORIGIN:
            return []

        destinations: List[int] = [
            target for target in range(BOARD_START, BOARD_END + 1)
            if self.rules.is_legal(state, origin, target, color)
        ]

        if self.rules.bearing_off_allowed(state, color):
            off = BEAR_OFF_ANCHOR[color]
            if self.rules.is_legal(state, origin, off, color):
                destinations.append(off)

        return destinations

    def candidate_moves(self, state: GameState, color: Optional[Color] = None) -> CandidateMap:
        """
        Map every origin with at least one legal destination to its destinations.

        Returns:
            Dict origin -> destinations, in ascending origin order.
        """
        color = state.turn if color is None else color
        candidates: CandidateMap = {}
        for origin in self.rules.allowed_origins(state, color):
            destinations = self.possible_moves(state, origin, color)
            if destinations:
                candidates[origin] = destinations
        return candidates


class TurnMoveGenerator:
    """Answers turn-level questions: blocked turns and the forced use of both dice."""

    def __init__(self, rules: Optional[BackgammonRules] = None) -> None:
        self.rules: BackgammonRules = rules or BackgammonRules()

    def _playable(self, state: GameState, die: int, color: Color) -> List[Move]:
        """
        Return moves that play exactly the given die for color.

        Each allowed origin is moved by die; overshooting the end of the
        track becomes a bear-off attempt.
        """
        moves: List[Move] = []
        for origin in self.rules.allowed_origins(state, color):
            target = self.rules.target_for_die(origin, die, color)
            if not self.rules.is_legal(state, origin, target, color):
                continue
            move = Move(origin, target, color)
            if self.rules.die_for_move(state, move) == die:
                moves.append(move)
        return moves

    def any_move_left(self, state: GameState, color: Optional[Color] = None) -> bool:
        """
        Check if any legal move is possible for color with the remaining dice.

        Returns:
            True if at least one move is possible, False otherwise.
        """
        color = state.turn if color is None else color
        if not state.dice.available:
            return False

        for die in state.dice.distinct:
            if self._playable(state, die, color):
                return True
        return False

    def can_use_both_dice(self, state: GameState) -> bool:
        """
        Check whether some ordering of the two available dice plays both.

        Only meaningful with exactly two distinct dice available; returns
        False otherwise. Every first move is applied to a copy and the
        remaining die is probed on the result. Stops at the first success.
        """
        available = state.dice.available
        if len(available) != 2 or available[0] == available[1]:
            return False

        color = state.turn
        for first, second in ((available[0], available[1]), (available[1], available[0])):
            for move in self._playable(state, first, color):
                hypothetical = state.applied(move)
                if self._playable(hypothetical, second, color):
                    return True
        return False

    def _keeps_playing(self, state: GameState, move: Move) -> bool:
        """True if move wins outright or leaves a die playable afterwards."""
        after = state.applied(move)
        return self.rules.winner(after) is not None or self.any_move_left(after, move.color)

    def filter_forced(self, state: GameState, candidates: CandidateMap) -> CandidateMap:
        """
        Drop destinations that would strand the second die.

        The two-ply search runs once for the state; each remaining
        candidate is then checked for a continuation. A move that bears
        off the last stone is always kept.
        """
        if not self.can_use_both_dice(state):
            return candidates
        color = state.turn
        filtered: CandidateMap = {}
        for origin, dests in candidates.items():
            allowed = [t for t in dests if self._keeps_playing(state, Move(origin, t, color))]
            if allowed:
                filtered[origin] = allowed
        return filtered

    def strands_die(self, state: GameState, move: Move) -> bool:
        """
        Check whether move would forfeit a die that another first move keeps playable.

        Applies only when two distinct dice remain. Winning moves never strand.
        """
        available = state.dice.available
        if len(available) != 2 or available[0] == available[1]:
            return False
        if not self.can_use_both_dice(state):
            return False
        return not self._keeps_playing(state, move)
