"""
Shared pytest fixtures for the gammon tests.

Positions are written as lists of (point, count) per color. Stones not
listed are counted as borne off, so a fixture only names what matters.
"""

from typing import Callable, List, Optional, Sequence, Tuple

import pytest

from gammon.core.board import Color, HOME_MARKER, NUM_OF_ALL_STONES
from gammon.core.dice import Dice
from gammon.core.engine import GameEngine
from gammon.core.generator import DestinationGenerator, TurnMoveGenerator
from gammon.core.rules import BackgammonRules
from gammon.core.state import GameState, Phase


# =============================================================================
# Position helpers
# =============================================================================


def _padded(stones: List[Tuple[int, int]], color: Color) -> List[Tuple[int, int]]:
    """Add the missing stones of a color as borne off."""
    missing = NUM_OF_ALL_STONES[color] - sum(count for _, count in stones)
    if missing > 0:
        return list(stones) + [(HOME_MARKER, missing)]
    return list(stones)


def build_state(
    white: List[Tuple[int, int]],
    black: List[Tuple[int, int]],
    turn: Color = Color.WHITE,
    dice: Optional[Sequence[int]] = None,
) -> GameState:
    """
    Build a debug GameState from partial position lists.

    With dice given the state is put in the moving phase, as if those
    dice had just been rolled.
    """
    state = GameState(
        positions=[_padded(white, Color.WHITE), _padded(black, Color.BLACK)],
        start_player=turn,
        debug=True,
    )
    if dice is not None:
        state.dice = Dice.from_values(*dice)
        state.phase = Phase.MOVING
    return state


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def make_state() -> Callable[..., GameState]:
    return build_state


@pytest.fixture
def opening() -> GameState:
    """Opening layout, white to roll."""
    return GameState(debug=True)


@pytest.fixture
def rules() -> BackgammonRules:
    return BackgammonRules()


@pytest.fixture
def destinations(rules) -> DestinationGenerator:
    return DestinationGenerator(rules)


@pytest.fixture
def turn_moves(rules) -> TurnMoveGenerator:
    return TurnMoveGenerator(rules)


@pytest.fixture
def engine_for() -> Callable[[GameState], GameEngine]:
    """Factory for a player-less engine driving a given state."""
    def _engine(state: GameState) -> GameEngine:
        return GameEngine(state=state, debug=True)
    return _engine


@pytest.fixture
def forced_usage_state() -> GameState:
    """
    White to play [2, 3] with stones on 10 and 3.

    Black holds 15 and 6. Playing 10->12 first leaves no move for the 3,
    while 10->13 or 3->5 first keeps both dice playable.
    """
    return build_state(
        white=[(10, 1), (3, 1)],
        black=[(15, 2), (6, 2)],
        dice=[2, 3],
    )
