# =========================================================
# --- core_dice.py ---
# =========================================================

import random
from dataclasses import dataclass, field
from typing import List, Optional

# =========================================================

@dataclass
class Dice:
    """
    Dice of the current turn.

    Attributes:
        values (List[int]): The roll as displayed (2 entries, 4 on a double).
        available (List[int]): Die values not yet consumed this turn.
    """
    values: List[int] = field(default_factory=list)
    available: List[int] = field(default_factory=list)

    @staticmethod
    def expand(d1: int, d2: int) -> List[int]:
        """Expand a roll to the usable dice (four entries on a double)."""
        if d1 == d2:
            return [d1] * 4
        return [d1, d2]

    @classmethod
    def roll(cls, rng: Optional[random.Random] = None) -> "Dice":
        """Roll two dice and return a fresh Dice with all values available."""
        rng = rng or random.Random()
        values = cls.expand(rng.randint(1, 6), rng.randint(1, 6))
        return cls(values, values.copy())

    @classmethod
    def from_values(cls, d1: int, d2: int) -> "Dice":
        """Build a Dice for a known roll."""
        for d in (d1, d2):
            if not 1 <= d <= 6:
                raise ValueError(f"Invalid die value: {d}")
        values = cls.expand(d1, d2)
        return cls(values, values.copy())

    def consume(self, die: int) -> None:
        """
        Remove exactly one entry of die from the available dice.

        Raises:
            ValueError: If die is not available.
        """
        self.available.remove(die)

    def clear(self) -> None:
        """Drop both the displayed roll and the available dice."""
        self.values = []
        self.available = []

    def copy(self) -> "Dice":
        return Dice(self.values.copy(), self.available.copy())

    @property
    def distinct(self) -> List[int]:
        """Distinct available values, ascending."""
        return sorted(set(self.available))

    def die_for(self, distance: int) -> Optional[int]:
        """
        Return the die a move of the given pip distance consumes.

        The exact value is preferred; otherwise the smallest larger die
        (bear-off overage). None if no die fits.
        """
        if distance in self.available:
            return distance
        larger = [d for d in self.available if d > distance]
        return min(larger) if larger else None
