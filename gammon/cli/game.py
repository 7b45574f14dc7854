# =========================================================
# --- cli_game.py ---
# =========================================================

import logging
from typing import List, Optional, Union

from gammon.config import Config
from gammon.core.board import Color
from gammon.core.moves import Move, CandidateMap
from gammon.core.state import GameState
from gammon.core.rules import BackgammonRules
from gammon.core.engine import GameEngine

from gammon.players.player import Player, PlayerAction
from gammon.players.human import HumanPlayer
from gammon.players.random import RandomPlayer
from gammon.agentCtrl.bot import AgentBot
from gammon.agentCtrl.client import AgentClient

from .cliColors import PLAYER
from .cliUtils import ExitGame, ask_choice, safe_input, clear
from .cliHumanInterface import HumanMoveNavigator
from .cliHandlers import CLIHandlers

# =========================================================

class CLISetup:
    """Builds the two players (human, random or agent) and the engine for a CLI session."""

    def __init__(self, config: Config):
        self.config: Config = config

    @staticmethod
    def human_cli_input(
        candidates: CandidateMap,
        state: GameState,
        dice: List[int],
    ) -> Union[Move, PlayerAction]:
        """Handle human move selection via interactive CLI navigation."""
        return HumanMoveNavigator(state=state, candidates=candidates, dice=dice).navigate()

    def create_agent(self, color: Color) -> AgentBot:
        """Create an agent player talking to the configured endpoint."""
        client = AgentClient(self.config.AGENT_URL, timeout=self.config.AGENT_TIMEOUT)
        return AgentBot(color, client, log_file=self.config.AGENT_LOG_FILE or None)

    def choose_player(self, color: Color) -> Player:
        """
        Prompt the user to choose a player type for a color.

        Returns:
            Player: The chosen player for color.
        """
        print(f"\nChoose player for {PLAYER[color]}: 1-Human, 2-Random, 3-Agent")
        return ask_choice(
            "Choice (1/2/3): ",
            {
                "1": lambda: HumanPlayer(color, input_func=self.human_cli_input),
                "2": lambda: RandomPlayer(color),
                "3": lambda: self.create_agent(color),
            },
            ask=safe_input,
        )

    def setup_engine(self) -> GameEngine:
        """
        Initialize the game engine with rules, state and players.

        Returns:
            GameEngine: Engine with both players and a fresh opening state.
        """
        return GameEngine(
            self.choose_player(Color.WHITE),
            self.choose_player(Color.BLACK),
            GameState(debug=self.config.DEBUG),
            BackgammonRules(),
            undo_depth=self.config.UNDO_DEPTH,
        )


class BackgammonCLI:
    """Terminal session: player setup, the event loop and the play-again prompt."""

    def __init__(self, config: Optional[Config] = None, delay: float = 1.0, stepwise: bool = True):
        """
        Initialize the CLI.

        Args:
            config (Optional[Config]): Settings; read from the environment if None.
            delay (float): Pause in seconds after each printed event.
            stepwise (bool): Whether to show the board after each move.
        """
        self.config: Config = config or Config.from_env()
        self.setup = CLISetup(self.config)
        self.handlers = CLIHandlers(delay).handlers
        self.stepwise = stepwise

    def play_game(self, engine: GameEngine) -> None:
        """
        Play one game, printing every engine event.

        Raises:
            ExitGame: If a human quits at a prompt.
        """
        for event in engine.play_game(stepwise=self.stepwise):
            handler = self.handlers.get(event["type"])
            if handler:
                handler(event)

    def run(self) -> None:
        """
        Start the CLI application and run games until the user stops.
        """
        clear()
        try:
            engine = self.setup.setup_engine()
            while True:
                self.play_game(engine)
                again = safe_input("Play again? [y/N]: ").lower()
                if again != "y":
                    break
                engine.reset()
        except ExitGame:
            print("\nBye.")
        except KeyboardInterrupt:
            print("\nGame interrupted by user. Exiting...")


def main() -> None:
    """Console entry point."""
    config = Config.from_env()
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    BackgammonCLI(config).run()


# ---------------- Main ----------------
if __name__ == "__main__":
    main()
