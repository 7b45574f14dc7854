# =========================================================
# --- core_state_invariants.py ---
# =========================================================

import numpy as np
from typing import Any

from .board import BOARD_START, BOARD_END, STONE, NUM_OF_ALL_STONES, Color
from gammon.utils.bitmask import bits_from_indices

# =========================================================

def assert_stone_invariant(state: Any, where: str = "") -> None:
    """
    Check that the total number of stones for each color is consistent.

    This includes stones on the board, on the bar, and borne off stones.

    Raises:
        AssertionError: If the total stones for a color do not equal NUM_OF_ALL_STONES.
    """
    for color in Color:
        board = state.stones_on_board(color)
        bar = int(state.bar[color])
        home = int(state.home[color])
        total = board + bar + home

        if bar < 0 or home < 0 or total != NUM_OF_ALL_STONES[color]:
            raise AssertionError(
                f"[STONE LOST] {color}: {total}/{NUM_OF_ALL_STONES[color]} at {where}\n"
                f"Board={board}, Bar={bar}, Home={home}"
            )


def assert_mask_invariant(state: Any, where: str = "") -> None:
    """
    Check that the occupancy and blocked masks are consistent with the board.

    Raises:
        AssertionError: If any occupancy or blocked mask does not match the board.
    """
    board = state.points[BOARD_START:BOARD_END + 1]
    for color in Color:
        occ = bits_from_indices(np.flatnonzero(board * STONE[color] > 0) + BOARD_START)
        if state._occ_mask[color] != occ:
            raise AssertionError(
                f"[MASK DESYNC] occupied mask mismatch at {where}\n"
                f"Color={color}\n"
                f"Current ={bin(state._occ_mask[color])}\n"
                f"Expected={bin(occ)}"
            )

        blocked = bits_from_indices(np.flatnonzero(board * STONE[color.opponent] >= 2) + BOARD_START)
        if state._blocked_mask[color] != blocked:
            raise AssertionError(
                f"[MASK DESYNC] blocked mask mismatch at {where}\n"
                f"Color={color}"
            )


def assert_phase_invariant(state: Any, where: str = "") -> None:
    """
    Check that phase, dice and winner agree.

    Raises:
        AssertionError: If the state is in 'moving' without dice, in 'rolling'
            with dice left, or the winner does not match the phase.
    """
    phase = state.phase.value
    if phase == "moving" and not state.dice.available:
        raise AssertionError(f"[PHASE] moving without available dice at {where}")
    if phase == "rolling" and state.dice.available:
        raise AssertionError(f"[PHASE] rolling with dice left {state.dice.available} at {where}")
    if (phase == "gameOver") != (state.winner is not None):
        raise AssertionError(f"[PHASE] phase={phase} winner={state.winner} at {where}")


def assert_state_invariant(state: Any, where: str = "") -> None:
    """
    Perform full invariant check for a Backgammon state.

    This includes:
    - Stone count consistency
    - Occupancy and blocked mask consistency
    """
    assert_stone_invariant(state, where)
    assert_mask_invariant(state, where)
