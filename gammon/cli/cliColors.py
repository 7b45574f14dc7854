# =========================================================
# --- cli_cliColors.py ---
# =========================================================

from typing import Tuple

from gammon.core.board import Color

# =========================================================

class TColor:
    """ANSI escape codes used by the board and the event messages."""
    WHITE: str  = "\033[97m"
    BLACK: str  = "\033[94m"   # blue, readable on dark terminals
    ORIGIN: str = "\033[92m"
    TARGET: str = "\033[93m"
    ERROR: str  = "\033[91m"
    BOLD: str   = "\033[1m"
    RESET: str  = "\033[0m"


#: Stone color indexed by Color
STONE: Tuple[str, str] = (TColor.WHITE, TColor.BLACK)


def paint(text: str, code: str) -> str:
    """Wrap text in an escape code, resetting afterwards."""
    return f"{code}{text}{TColor.RESET}"


#: Player name indexed by Color, e.g. "(W)hite"
PLAYER: Tuple[str, ...] = tuple(
    paint(f"({color.name[0]}){color.name[1:].lower()}", STONE[color]) for color in Color
)
