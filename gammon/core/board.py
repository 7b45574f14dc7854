# =========================================================
# --- core_board.py ---
# =========================================================

from enum import IntEnum

from gammon.utils.bitmask import set_all_bits

# =========================================================

"""
Board-related constants and initial configuration for Backgammon.

This module defines:
- Piece colors and per-color direction of travel
- Board points, bar anchors and bear-off anchors
- Home board and bar-entry ranges
- Bitmasks for board regions
- Default starting positions

Every per-color table is a 2-tuple indexed by ``Color``.
"""


class Color(IntEnum):
    """Piece color. White moves up the board (1 -> 24), black moves down (24 -> 1)."""
    WHITE = 0
    BLACK = 1

    @property
    def opponent(self) -> "Color":
        """Return the other color."""
        return Color(1 - self)

    def __str__(self) -> str:
        return self.name.lower()


#: Board point range (1-24 are normal playable points)
BOARD_START = 1
BOARD_END = 24

#: Origin used by moves that start on the bar
BAR_ORIGIN = -1

#: Virtual position a piece on the bar moves from.
#: White enters from 0 (die d lands on point d), black from 25 (lands on 25 - d).
BAR_ANCHOR = (0, 25)

#: Bear-off target for each color. Each color only recognizes its own anchor.
BEAR_OFF_ANCHOR = (25, 0)

#: Home board ranges
#: White: points 19-24, Black: points 1-6
HOME_START = (19, 1)
HOME_END = (24, 6)

#: Points a piece may land on when entering from the bar
ENTRY_START = (1, 19)
ENTRY_END = (6, 24)

#: Movement directions per color
DIRECTION = (1, -1)

#: Stone sign on the point array: positive for white, negative for black
STONE = (1, -1)

#: Total number of stones per color
NUM_OF_ALL_STONES = (15, 15)

#: Bitmask representing all playable points on the board
FULL_BOARD_MASK = set_all_bits(BOARD_START, BOARD_END)

#: Bitmasks for each color's home board
HOME_MASK = (
    set_all_bits(HOME_START[Color.WHITE], HOME_END[Color.WHITE]),
    set_all_bits(HOME_START[Color.BLACK], HOME_END[Color.BLACK]),
)

#: Bitmasks for outside home board (complement of home)
OUTSIDE_HOME_MASK = (
    HOME_MASK[Color.WHITE] ^ FULL_BOARD_MASK,
    HOME_MASK[Color.BLACK] ^ FULL_BOARD_MASK,
)

#: Default starting positions
#: Each entry: list of (point, number_of_stones) for that color
#: White: 2 on 1, 5 on 12, 3 on 17, 5 on 19
#: Black: 2 on 24, 5 on 13, 3 on 8, 5 on 6
DEFAULT_POSITIONS = [
    [(1, 2), (12, 5), (17, 3), (19, 5)],
    [(24, 2), (13, 5), (8, 3), (6, 5)],
]

#: Position list markers for stones that are not on a point
HOME_MARKER = -1
BAR_MARKER = 0
