# =========================================================
# --- players_random.py ---
# =========================================================

import random
from typing import List, Optional

from gammon.core.board import Color
from gammon.core.moves import Move, CandidateMap
from gammon.core.state import GameState

from .player import Player

# =========================================================

class RandomPlayer(Player):
    """
    Player choosing uniformly among the candidate moves.

    Attributes:
        color (Color): The color this player moves.
        rng (random.Random): Random number generator.
    """

    def __init__(self, color: Color, rng: Optional[random.Random] = None):
        """
        Initialize a RandomPlayer.

        Args:
            color (Color): The color this player moves.
            rng (Optional[random.Random]): Optional RNG instance. If None, a new RNG is created.
        """
        super().__init__(color)
        self.rng: random.Random = rng or random.Random()

    def __str__(self) -> str:
        """Return a human-readable name for the player."""
        return f"Random player 🎲 {self.color}"

    def select_move(
        self,
        candidates: CandidateMap,
        state: GameState,
        dice: List[int],
    ) -> Optional[Move]:
        """
        Select a move randomly from the candidate map.

        Returns:
            Optional[Move]: Selected move, or None if no candidates are given.
        """
        moves = [Move(origin, target, self.color) for origin, dests in candidates.items() for target in dests]
        if not moves:
            return None
        return self.rng.choice(moves)
