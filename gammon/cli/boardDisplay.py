# =========================================================
# --- cli_boardDisplay.py ---
# =========================================================

from typing import Iterable, List, Optional

from gammon.core.board import BOARD_START, BOARD_END, HOME_START, HOME_END, Color
from gammon.core.state import GameState

from .cliColors import STONE, TColor, paint
from .cliUtils import clear

# =========================================================

class BoardDisplay:
    """
    Class for displaying the Backgammon board in the terminal.

    Attributes:
        state (GameState): The current game state.
        clear_screen (bool): Whether to clear the screen before drawing.
        field_size (int): Width of a board point for formatting.
        use_color (bool): Whether to use colored output.
    """

    def __init__(self, state: GameState, clear_screen: bool = True, use_color: bool = True) -> None:
        """
        Initializes the BoardDisplay.

        Args:
            state (GameState): The current game state.
            clear_screen (bool, optional): Whether to clear the screen before drawing. Defaults to True.
            use_color (bool, optional): Whether to use colored output. Defaults to True.
        """
        self.state: GameState = state
        self.clear_screen: bool = clear_screen
        self.field_size: int = 3  # Width of each board point for alignment
        self.use_color: bool = use_color

    def _paint(self, text: str, color: str) -> str:
        return paint(text, color) if self.use_color else text

    def _point_str(self, point: int) -> str:
        """Formatted stone count for a board point ('W3', 'B2' or '...')."""
        white = self.state.num_of_stones(point, Color.WHITE)
        black = self.state.num_of_stones(point, Color.BLACK)

        if white:
            return self._paint(f"W{white}".rjust(self.field_size), STONE[Color.WHITE])
        if black:
            return self._paint(f"B{black}".rjust(self.field_size), STONE[Color.BLACK])
        return "..."

    def _index_str(self, point: int, origin: Optional[int], targets: Iterable[int]) -> str:
        """
        Point number, highlighted in green for the selected origin
        and yellow for legal destinations.
        """
        s = f"{point}".rjust(self.field_size)
        if point == origin:
            return self._paint(s, TColor.ORIGIN)
        if point in targets:
            return self._paint(s, TColor.TARGET)
        return s

    def render_points(self, origin: Optional[int] = None, targets: Iterable[int] = ()) -> List[str]:
        """
        Render both halves of the board: points 13-24 on top, 12-1 below.

        Each half has an index row and a stone row.
        """
        targets = set(targets)
        half = (BOARD_END - BOARD_START + 1) // 2
        sep = " "
        width = (half - 1) * len(sep) + half * self.field_size

        upper_range = range(half + 1, BOARD_END + 1)
        lower_range = range(half, BOARD_START - 1, -1)

        white_home = f"HOME W ({HOME_START[Color.WHITE]}-{HOME_END[Color.WHITE]}) -> off"
        black_home = f"off <- HOME B ({HOME_START[Color.BLACK]}-{HOME_END[Color.BLACK]})"

        return [
            self._paint(white_home.rjust(width), STONE[Color.WHITE]),
            sep.join(self._index_str(p, origin, targets) for p in upper_range),
            sep.join(self._point_str(p) for p in upper_range),
            sep.join(self._point_str(p) for p in lower_range),
            sep.join(self._index_str(p, origin, targets) for p in lower_range),
            self._paint(black_home.rjust(width), STONE[Color.BLACK]),
        ]

    def render_counts(self) -> List[str]:
        """Render bar, home and dice lines."""
        w, b = Color.WHITE, Color.BLACK
        dice = self.state.dice
        return [
            f"Bar  {self._paint('W:' + str(self.state.bar[w]), STONE[w])} | "
            f"{self._paint('B:' + str(self.state.bar[b]), STONE[b])}",
            f"Home {self._paint('W:' + str(self.state.home[w]), STONE[w])} | "
            f"{self._paint('B:' + str(self.state.home[b]), STONE[b])}",
            f"Dice {dice.values} available {dice.available}",
        ]

    def render(self, origin: Optional[int] = None, targets: Iterable[int] = ()) -> str:
        """Return the whole board as text."""
        lines = [self._paint("--- Board ---", TColor.BOLD)]
        lines += self.render_points(origin, targets)
        lines += self.render_counts()
        return "\n".join(lines)

    def draw_all(self, origin: Optional[int] = None, targets: Iterable[int] = ()) -> None:
        """
        Draws the entire board, including points, bar, home and dice.

        Args:
            origin (Optional[int]): Selected origin to highlight.
            targets (Iterable[int]): Destinations to highlight.
        """
        if self.clear_screen:
            clear()
        print(self.render(origin, targets))
