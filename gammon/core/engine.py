# =========================================================
# --- core_engine.py ---
# =========================================================

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from gammon.players.player import Player, PlayerAction
from gammon.agentCtrl.resolver import AgentFailure

from .board import Color
from .dice import Dice
from .generator import DestinationGenerator, TurnMoveGenerator
from .moves import Move, MoveType, CandidateMap
from .rules import BackgammonRules
from .state import GameState, Phase
from .state_invariants import assert_phase_invariant
from .undo import Undo

# ========================================================

logger = logging.getLogger(__name__)

FORCED_USAGE_REASON = "This move leaves the other die unplayable; both dice must be used."


@dataclass
class RollResult:
    """
    Outcome of a roll.

    Attributes:
        values (List[int]): Dice rolled (4 entries on a double). Empty if the roll was refused.
        blocked (bool): True if no move was possible and the turn passed at once.
    """
    values: List[int] = field(default_factory=list)
    blocked: bool = False

    @property
    def accepted(self) -> bool:
        return bool(self.values)


@dataclass
class MoveResult:
    """
    Outcome of a move request.

    Attributes:
        accepted (bool): Whether the move was applied.
        reason (Optional[str]): Why the move was rejected.
        move (Optional[Move]): The applied move.
        move_type (Optional[MoveType]): NORMAL, HIT, ENTER or BEAR_OFF.
        passed (bool): True if the turn passed because no further move was possible.
        winner (Optional[Color]): Set when the move won the game.
    """
    accepted: bool
    reason: Optional[str] = None
    move: Optional[Move] = None
    move_type: Optional[MoveType] = None
    passed: bool = False
    winner: Optional[Color] = None


class EngineEvents:
    """
    Event factory for game engine events.
    Returns structured dictionaries for UI, logging, or network updates.
    """

    def roll_dice(self, dice: List[int], turn: Color, player_type: str) -> Dict[str, Any]:
        """Event: Dice have been rolled."""
        return {"type": "roll_dice", "dice": dice, "turn": turn, "player_type": player_type}

    def no_moves(self, turn: Color) -> Dict[str, Any]:
        """Event: Player has no legal moves available and the turn passes."""
        return {"type": "no_moves", "turn": turn}

    def chosen_move(self, turn: Color, move: Move) -> Dict[str, Any]:
        """Event: Player has chosen a move."""
        return {"type": "chosen_move", "turn": turn, "move": move}

    def apply_move(self, move: Move, move_type: MoveType, state: GameState) -> Dict[str, Any]:
        """Event: A move has been applied to the game state."""
        return {"type": "apply_move", "move": move, "move_type": move_type, "state": state}

    def move_rejected(self, turn: Color, move: Optional[Move], reason: str) -> Dict[str, Any]:
        """Event: A requested move was refused; state unchanged."""
        return {"type": "move_rejected", "turn": turn, "move": move, "reason": reason}

    def undo(self, turn: Color, state: GameState) -> Dict[str, Any]:
        """Event: The last move of the turn was taken back."""
        return {"type": "undo", "turn": turn, "state": state}

    def forfeit(self, turn: Color, reason: str) -> Dict[str, Any]:
        """Event: A player failed to deliver a move and loses the rest of the turn."""
        return {"type": "forfeit", "turn": turn, "reason": reason}

    def turn_end(self, next_turn: Color, state: GameState) -> Dict[str, Any]:
        """Event: The current turn has ended."""
        return {"type": "turn_end", "next_turn": next_turn, "state": state}

    def game_over(self, state: GameState, winner: Color, player_type: str) -> Dict[str, Any]:
        """Event: The game has ended."""
        return {"type": "game_over", "state": state, "winner": winner, "player_type": player_type}


class GameEngine:
    """
    Backgammon game engine: the turn scheduler around a single game state.

    Inbound actions (roll, select, move, undo, reset) never raise for
    illegal requests; they return a result and leave the state untouched.

    Attributes:
        players (list): Two player objects indexed by Color (may be None when
            the engine is driven directly).
        state (GameState): Current mutable game state.
        rules (BackgammonRules): Rules engine.
        destinations (DestinationGenerator): Legal destination enumerator.
        turn_moves (TurnMoveGenerator): Blocked-turn and forced-dice checks.
        undo (Undo): Snapshot history of the current turn.
        selected_point (Optional[int]): Origin picked by the UI, if any.
        highlighted (List[int]): Destinations offered for selected_point.
        emit_enabled (bool): If True, yield events during play.
        events (EngineEvents): Event generator for logging/UI.
        rng (random.Random): Random number generator for dice rolls.
    """

    def __init__(
        self,
        player0: Optional[Player] = None,
        player1: Optional[Player] = None,
        state: Optional[GameState] = None,
        rules: Optional[BackgammonRules] = None,
        emit_enabled: bool = True,
        rng: Optional[random.Random] = None,
        undo_depth: int = 8,
        debug: bool = False,
    ):
        self.players: List[Optional[Player]] = [player0, player1]
        self.state: GameState = state or GameState(debug=debug)
        self.state.debug = self.state.debug or debug
        self.rules: BackgammonRules = rules or BackgammonRules()
        self.destinations: DestinationGenerator = DestinationGenerator(self.rules)
        self.turn_moves: TurnMoveGenerator = TurnMoveGenerator(self.rules)
        self.rng: random.Random = rng or random.Random()

        self.undo: Undo = Undo(undo_depth)
        self.selected_point: Optional[int] = None
        self.highlighted: List[int] = []

        self.emit_enabled: bool = emit_enabled
        self.events: EngineEvents = EngineEvents()

    # ---------- Properties ----------
    @property
    def turn(self) -> Color:
        """Color to move."""
        return self.state.turn

    @property
    def player(self) -> Optional[Player]:
        """Return the current player object."""
        return self.players[self.turn]

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def winner(self) -> Optional[Color]:
        return self.state.winner

    def get_player_type(self, color: Color) -> str:
        """Return string representation of a player."""
        return str(self.players[color])

    def candidate_moves(self) -> CandidateMap:
        """
        Return origin -> destinations for the color to move.

        Destinations that would strand a playable second die are left out,
        so every listed move is accepted by move().
        """
        candidates = self.destinations.candidate_moves(self.state)
        return self.turn_moves.filter_forced(self.state, candidates)

    # ---------- Dice ----------
    def roll(self, values: Optional[Sequence[int]] = None) -> RollResult:
        """
        Roll the dice and start the moving phase.

        Only valid in the rolling phase. If the color to move has no legal
        move the turn passes straight to the opponent.

        Args:
            values: Optional fixed roll (two dice), otherwise random.

        Returns:
            RollResult with the dice and whether the turn was blocked.
        """
        if self.state.phase != Phase.ROLLING:
            logger.debug("Roll refused in phase %s", self.state.phase.value)
            return RollResult()

        dice = Dice.from_values(*values) if values is not None else Dice.roll(self.rng)
        rolled = list(dice.values)
        self.state.dice = dice
        self.state.phase = Phase.MOVING
        self.undo.clear()
        self.clear_selection()
        logger.info("%s rolled %s", self.turn, dice.values)

        if not self.turn_moves.any_move_left(self.state):
            logger.info("%s has no legal move, turn passes", self.turn)
            self._pass_turn()
            return RollResult(rolled, blocked=True)

        self._check()
        return RollResult(rolled)

    # ---------- Turn Management ----------
    def _pass_turn(self) -> None:
        """Clear the dice and hand the turn to the opponent."""
        self.state.dice.clear()
        self.state.switch_turn()
        self.state.phase = Phase.ROLLING
        self.undo.clear()
        self.clear_selection()

    def pass_turn(self) -> bool:
        """
        Forfeit the rest of the current turn.

        Returns:
            True if the turn passed, False outside the moving phase.
        """
        if self.state.phase != Phase.MOVING:
            return False
        logger.info("%s forfeits the rest of the turn", self.turn)
        self._pass_turn()
        self._check()
        return True

    def game_finished(self) -> Optional[Color]:
        """Check if the game is over, returning the winner if so."""
        return self.rules.winner(self.state)

    # ---------- Selection ----------
    def select(self, origin: int) -> List[int]:
        """
        Select an origin and return its legal destinations.

        Destinations match candidate_moves(): those that would strand the
        second die are not offered. An origin without destinations clears
        the selection.
        """
        if self.state.phase != Phase.MOVING:
            return []
        raw = {origin: self.destinations.possible_moves(self.state, origin)}
        destinations = self.turn_moves.filter_forced(self.state, raw).get(origin, [])
        if destinations:
            self.selected_point = origin
            self.highlighted = destinations
        else:
            self.clear_selection()
        return destinations

    def clear_selection(self) -> None:
        self.selected_point = None
        self.highlighted = []

    def move_selected(self, target: int) -> MoveResult:
        """Move the selected stone to target, which must be highlighted."""
        if self.selected_point is None:
            return MoveResult(False, "No origin selected.")
        if target not in self.highlighted:
            self.clear_selection()
            return MoveResult(False, f"{target} is not a legal destination.")
        return self.move(self.selected_point, target)

    # ---------- Moves ----------
    def move(self, start: int, target: int) -> MoveResult:
        """
        Validate and apply one move for the color to move.

        The move must be legal and must not strand the second die when
        both dice could be played. After the move the engine checks for a
        winner and for a blocked remainder of the turn.

        Args:
            start: Origin point, or -1 for the bar.
            target: Destination point or bear-off anchor.

        Returns:
            MoveResult describing what happened.
        """
        if self.state.phase != Phase.MOVING:
            return MoveResult(False, f"No moves accepted in phase '{self.state.phase.value}'.")

        color = self.turn
        move = Move(start, target, color)
        if not self.rules.is_legal(self.state, start, target, color):
            logger.debug("Illegal move rejected: %s", move)
            return MoveResult(False, f"Illegal move {move}.", move)

        if self.turn_moves.strands_die(self.state, move):
            logger.info("Move %s rejected: would strand a die", move)
            return MoveResult(False, FORCED_USAGE_REASON, move)

        move_type = self.rules.move_type(self.state, move)
        self.undo.record_snapshot(self.state)
        self.state.apply_move(move)
        self.clear_selection()

        winner = self.game_finished()
        passed = False
        if winner is not None:
            self.state.winner = winner
            self.state.phase = Phase.GAME_OVER
            self.undo.clear()
            logger.info("%s wins", winner)
        elif self.state.phase == Phase.MOVING and not self.turn_moves.any_move_left(self.state):
            logger.info("%s cannot use the remaining dice %s", color, self.state.dice.available)
            self._pass_turn()
            passed = True

        self._check()
        return MoveResult(True, None, move, move_type, passed, winner)

    # ---------- Undo / Reset ----------
    def undo_move(self) -> bool:
        """
        Take back the last move of the current turn.

        Only a human player may undo, and only while still moving.

        Returns:
            True if a move was undone.
        """
        if self.state.phase != Phase.MOVING or not self.undo:
            return False
        player = self.player
        if player is not None and not player.is_human:
            return False
        self.undo.undo_last_snapshot(self.state)
        self.clear_selection()
        return True

    def reset(self) -> None:
        """Start a new game from the opening layout."""
        self.state.start_game()
        self.undo.clear()
        self.clear_selection()
        logger.info("Game reset")

    def _check(self) -> None:
        if self.state.debug:
            assert_phase_invariant(self.state, "engine")

    # ---------- Event Emission ----------
    def emit(self, event: dict) -> Any:
        """Yield an event if emission is enabled."""
        if self.emit_enabled:
            yield event

    # ---------- Game Loop ----------
    def _ask_player(self, player: Player) -> Any:
        """Query a player for its next move; agent failures become None plus a reason."""
        try:
            return player.select_move(self.candidate_moves(), self.state.copy(), list(self.state.dice.available)), None
        except AgentFailure as e:
            return None, str(e)

    def play_turn(self, stepwise: bool = True):
        """
        Play one full turn of the color to move, yielding events.

        Args:
            stepwise (bool): If True, an event is yielded after each applied move.
        """
        color = self.turn
        player = self.players[color]

        roll = self.roll()
        yield from self.emit(self.events.roll_dice(roll.values, color, self.get_player_type(color)))

        if roll.blocked:
            yield from self.emit(self.events.no_moves(color))

        while self.state.phase == Phase.MOVING and self.turn == color:
            choice, failure = self._ask_player(player)

            if choice is PlayerAction.UNDO:
                if self.undo_move():
                    yield from self.emit(self.events.undo(color, self.state))
                else:
                    yield from self.emit(self.events.move_rejected(color, None, "Nothing to undo."))
                continue

            if choice is None:
                reason = failure or "No move selected."
                logger.warning("%s forfeits: %s", player, reason)
                self.pass_turn()
                yield from self.emit(self.events.forfeit(color, reason))
                break

            yield from self.emit(self.events.chosen_move(color, choice))
            result = self.move(choice.from_point, choice.to_point)

            if not result.accepted:
                yield from self.emit(self.events.move_rejected(color, choice, result.reason))
                if not player.is_human:
                    self.pass_turn()
                    yield from self.emit(self.events.forfeit(color, result.reason))
                    break
                continue

            if stepwise:
                yield from self.emit(self.events.apply_move(result.move, result.move_type, self.state))
            if result.passed:
                yield from self.emit(self.events.no_moves(color))

        if self.state.phase != Phase.GAME_OVER:
            yield from self.emit(self.events.turn_end(self.turn, self.state))

    def play_game(self, stepwise: bool = True, max_turns: Optional[int] = None):
        """
        Play the game from the current state, yielding events.

        Args:
            stepwise (bool): If True, events are yielded after each move.
            max_turns (Optional[int]): Maximum turns to play. None = no limit.

        Yields:
            dict: Engine events describing the game progression.
        """
        if None in self.players:
            raise ValueError("Both players must be set to play a game")

        turns_played = 0
        while self.state.phase != Phase.GAME_OVER:
            if max_turns is not None and turns_played >= max_turns:
                break
            yield from self.play_turn(stepwise)
            turns_played += 1

        if self.state.winner is not None:
            winner = self.state.winner
            yield from self.emit(self.events.game_over(self.state, winner, self.get_player_type(winner)))
