"""
Tests for GameState, Dice, Undo and the state invariants.
"""

import random

import numpy as np
import pytest

from gammon.core.board import BAR_ORIGIN, Color, NUM_OF_ALL_STONES
from gammon.core.dice import Dice
from gammon.core.moves import Move
from gammon.core.state import GameState, Phase
from gammon.core.state_invariants import (
    assert_mask_invariant,
    assert_phase_invariant,
    assert_stone_invariant,
)
from gammon.core.undo import Undo


def total_stones(state: GameState, color: Color) -> int:
    return state.stones_on_board(color) + int(state.bar[color]) + int(state.home[color])


# =============================================================================
# Dice
# =============================================================================


class TestDice:

    def test_from_values(self):
        dice = Dice.from_values(6, 5)
        assert dice.values == [6, 5]
        assert dice.available == [6, 5]

    def test_doubles_give_four_moves(self):
        assert Dice.from_values(3, 3).available == [3, 3, 3, 3]

    def test_invalid_value(self):
        with pytest.raises(ValueError):
            Dice.from_values(0, 4)
        with pytest.raises(ValueError):
            Dice.from_values(2, 7)

    def test_roll_is_in_range(self):
        rng = random.Random(7)
        for _ in range(50):
            dice = Dice.roll(rng)
            assert len(dice.available) in (2, 4)
            assert all(1 <= d <= 6 for d in dice.available)

    def test_consume_removes_one_entry(self):
        dice = Dice.from_values(4, 4)
        dice.consume(4)
        assert dice.available == [4, 4, 4]
        assert dice.values == [4, 4, 4, 4]

    def test_consume_missing_die(self):
        with pytest.raises(ValueError):
            Dice.from_values(6, 5).consume(3)

    def test_die_for(self):
        dice = Dice.from_values(6, 4)
        assert dice.die_for(4) == 4
        assert dice.die_for(2) == 4
        assert dice.die_for(5) == 6
        assert Dice.from_values(2, 1).die_for(3) is None

    def test_copy_is_independent(self):
        dice = Dice.from_values(6, 5)
        other = dice.copy()
        other.consume(6)
        assert dice.available == [6, 5]


# =============================================================================
# GameState
# =============================================================================


class TestGameState:

    def test_opening_layout(self, opening):
        assert opening.num_of_stones(1, Color.WHITE) == 2
        assert opening.num_of_stones(12, Color.WHITE) == 5
        assert opening.num_of_stones(17, Color.WHITE) == 3
        assert opening.num_of_stones(19, Color.WHITE) == 5
        assert opening.num_of_stones(24, Color.BLACK) == 2
        assert opening.num_of_stones(13, Color.BLACK) == 5
        assert opening.num_of_stones(8, Color.BLACK) == 3
        assert opening.num_of_stones(6, Color.BLACK) == 5
        assert opening.turn == Color.WHITE
        assert opening.phase == Phase.ROLLING
        for color in Color:
            assert total_stones(opening, color) == NUM_OF_ALL_STONES[color]

    def test_signed_points(self, opening):
        assert opening.points[1] == 2
        assert opening.points[6] == -5
        assert opening.owner(6) == Color.BLACK
        assert opening.owner(2) is None

    def test_invalid_stone_count(self):
        with pytest.raises(ValueError):
            GameState(positions=[[(1, 14)], [(24, 15)]])

    def test_shared_point(self):
        with pytest.raises(ValueError):
            GameState(positions=[[(5, 15)], [(5, 15)]])

    def test_state_list_round_trip(self, make_state):
        state = make_state(white=[(0, 1), (3, 4), (20, 2)], black=[(7, 3), (0, 2)])
        copy = GameState(positions=state.state_to_list())
        assert copy == state

    def test_copy_is_independent(self, opening):
        other = opening.copy()
        other.move_stone(1, 2, Color.WHITE)
        assert opening.num_of_stones(1, Color.WHITE) == 2
        assert other.num_of_stones(2, Color.WHITE) == 1

    def test_to_dict(self, opening):
        data = opening.to_dict()
        assert data["currentPlayer"] == "white"
        assert data["gamePhase"] == "rolling"
        assert data["winner"] is None
        assert data["bar"] == {"white": 0, "black": 0}
        assert len(data["points"]) == 24
        assert data["points"][0] == {"position": 1, "color": "white", "count": 2}
        assert data["points"][5] == {"position": 6, "color": "black", "count": 5}
        assert data["points"][1] == {"position": 2, "color": None, "count": 0}

    def test_masks_follow_moves(self, opening):
        opening.move_stone(12, 14, Color.WHITE)
        opening.move_stone(12, 14, Color.WHITE)
        assert 14 in opening.occupied_points(Color.WHITE)
        assert opening.blocked_mask(Color.BLACK) & (1 << 14)
        assert_mask_invariant(opening, "test")


# =============================================================================
# Applying moves
# =============================================================================


class TestApplyMove:

    def test_hit_sends_blot_to_bar(self, make_state):
        state = make_state(
            white=[(1, 2), (12, 5), (17, 3), (19, 5)],
            black=[(5, 1), (24, 1), (13, 5), (8, 3), (6, 5)],
            dice=[4, 2],
        )
        state.apply_move(Move(1, 5, Color.WHITE))
        assert state.bar[Color.BLACK] == 1
        assert state.num_of_stones(5, Color.WHITE) == 1
        assert state.num_of_stones(5, Color.BLACK) == 0
        assert state.dice.available == [2]
        assert state.turn == Color.WHITE
        for color in Color:
            assert total_stones(state, color) == 15

    def test_enter_from_bar(self, make_state):
        state = make_state(white=[(0, 1), (19, 2)], black=[(6, 2)], dice=[5, 3])
        state.apply_move(Move(BAR_ORIGIN, 5, Color.WHITE))
        assert state.bar[Color.WHITE] == 0
        assert state.num_of_stones(5, Color.WHITE) == 1
        assert state.dice.available == [3]

    def test_bear_off_with_larger_die(self, make_state):
        state = make_state(white=[(22, 5), (23, 5), (24, 5)], black=[(1, 2)], dice=[6, 5])
        state.apply_move(Move(22, 25, Color.WHITE))
        assert state.home[Color.WHITE] == 1
        assert state.num_of_stones(22, Color.WHITE) == 4
        # smallest die larger than the distance is used
        assert state.dice.available == [6]

    def test_last_die_passes_the_turn(self, make_state):
        state = make_state(white=[(12, 2)], black=[(1, 2)], dice=[6, 5])
        state.apply_move(Move(12, 18, Color.WHITE))
        assert state.turn == Color.WHITE
        state.apply_move(Move(12, 17, Color.WHITE))
        assert state.dice.available == []
        assert state.turn == Color.BLACK
        assert state.phase == Phase.ROLLING

    def test_applied_leaves_original(self, make_state):
        state = make_state(white=[(12, 2)], black=[(1, 2)], dice=[6, 5])
        after = state.applied(Move(12, 18, Color.WHITE))
        assert state.num_of_stones(12, Color.WHITE) == 2
        assert after.num_of_stones(18, Color.WHITE) == 1


# =============================================================================
# Undo
# =============================================================================


class TestUndo:

    def test_round_trip(self, make_state):
        state = make_state(
            white=[(1, 2), (12, 5)],
            black=[(5, 1), (13, 5)],
            dice=[4, 2],
        )
        before = state.copy()
        undo = Undo()
        undo.record_snapshot(state)
        state.apply_move(Move(1, 5, Color.WHITE))
        assert state != before

        undo.undo_last_snapshot(state)
        assert state == before
        assert state.bar[Color.BLACK] == 0
        assert_mask_invariant(state, "undo")
        assert len(undo) == 0

    def test_nothing_to_undo(self, opening):
        with pytest.raises(ValueError):
            Undo().undo_last_snapshot(opening)

    def test_depth_is_bounded(self, opening):
        undo = Undo(max_snapshots=2)
        for _ in range(3):
            undo.record_snapshot(opening)
        assert len(undo) == 2


# =============================================================================
# Invariants
# =============================================================================


class TestInvariants:

    def test_lost_stone_is_detected(self, opening):
        opening.points[1] -= 1
        with pytest.raises(AssertionError):
            assert_stone_invariant(opening, "test")

    def test_mask_desync_is_detected(self, opening):
        opening.points[2] = 1
        opening.points[1] = 1
        with pytest.raises(AssertionError):
            assert_mask_invariant(opening, "test")

    def test_phase_invariant(self, opening):
        assert_phase_invariant(opening, "test")
        opening.phase = Phase.MOVING
        with pytest.raises(AssertionError):
            assert_phase_invariant(opening, "test")
        opening.phase = Phase.GAME_OVER
        with pytest.raises(AssertionError):
            assert_phase_invariant(opening, "test")

    def test_debug_state_checks_on_apply(self, opening):
        opening.dice = Dice.from_values(6, 5)
        opening.phase = Phase.MOVING
        opening.points[24] = 0
        with pytest.raises(AssertionError):
            opening.apply_move(Move(1, 7, Color.WHITE))

    def test_board_arrays(self, opening):
        assert opening.points.dtype == np.int8
        assert int(np.abs(opening.points).sum()) == 30
