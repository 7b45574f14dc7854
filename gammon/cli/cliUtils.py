# =========================================================
# --- cli_cliUtils.py ---
# =========================================================
import os
import time
from typing import Callable, Dict, Optional, TypeVar

from gammon.core.board import BAR_ORIGIN, BEAR_OFF_ANCHOR, Color

# =========================================================

T = TypeVar("T")

QUIT_WORDS = ("q", "quit", "exit")


class ExitGame(Exception):
    """Raised by `safe_input` when the user quits (q / quit / exit, Ctrl+C or end of input)."""
    pass


def safe_input(prompt: str) -> str:
    """
    Read one line from the terminal.

    Raises:
        ExitGame: On a quit word, Ctrl+C or a closed stdin.

    Returns:
        str: The answer without surrounding whitespace.
    """
    try:
        answer: str = input(prompt).strip()
    except (KeyboardInterrupt, EOFError):
        raise ExitGame()
    if answer.lower() in QUIT_WORDS:
        raise ExitGame()
    return answer


def ask_choice(prompt: str, options: Dict[str, Callable[[], T]], ask: Callable[[str], str] = safe_input) -> T:
    """
    Repeat prompt until the answer is one of the option keys, then build that option.

    Args:
        prompt: Text shown before every attempt.
        options: Answer -> factory.
        ask: Prompt function.
    """
    while True:
        answer = ask(prompt)
        if answer in options:
            return options[answer]()
        print(f"Invalid input, enter one of {', '.join(options)}")


def parse_position(text: str, color: Color) -> Optional[int]:
    """
    Translate a typed position into an engine position.

    'bar' is the bar origin and 'off' the color's bear-off anchor;
    anything else must be a point number. None if unreadable.
    """
    text = text.strip().lower()
    if text == "bar":
        return BAR_ORIGIN
    if text == "off":
        return BEAR_OFF_ANCHOR[color]
    try:
        return int(text)
    except ValueError:
        return None


def position_label(position: int, color: Color) -> str:
    """Inverse of parse_position for display."""
    if position == BAR_ORIGIN:
        return "bar"
    if position == BEAR_OFF_ANCHOR[color]:
        return "off"
    return str(position)


def pause(seconds: float) -> None:
    """Give the user time to follow the game; no-op for 0."""
    if seconds > 0:
        time.sleep(seconds)


def clear() -> None:
    """Clear the terminal screen."""
    os.system('cls' if os.name == 'nt' else 'clear')
