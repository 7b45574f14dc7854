# =========================================================
# --- bot.py ---
# =========================================================

import json
import logging
import os
from datetime import datetime
from typing import Any, Dict, List, Optional

from gammon.core.board import Color
from gammon.core.moves import Move, CandidateMap
from gammon.core.state import GameState

from gammon.players.player import Player

from .client import AgentClient
from .parser import AgentResponseParser
from .resolver import AgentFailure, AgentMoveResolver

# =========================================================

logger = logging.getLogger(__name__)


class AgentBot(Player):
    """
    Player backed by a remote move-choosing agent.

    Sends the position and the candidate map, parses the single {from, to}
    answer and checks it is one of the offered moves. Any problem raises
    AgentFailure; the engine then forfeits the turn.
    """

    def __init__(
        self,
        color: Color,
        client: AgentClient,
        log_file: Optional[str] = None,
    ) -> None:
        """
        Initialize the bot.

        Args:
            color: The color the agent moves.
            client: Transport to the agent.
            log_file: Optional file path to log every exchange.
        """
        super().__init__(color)
        self.client: AgentClient = client
        self.parser: AgentResponseParser = AgentResponseParser()

        self.log_file: Optional[str] = log_file
        self.log_entry_counter: int = 1
        if log_file and os.path.dirname(log_file):
            os.makedirs(os.path.dirname(log_file), exist_ok=True)

    def __str__(self) -> str:
        return f"Agent 🤖 {self.color}"

    def select_move(
        self,
        candidates: CandidateMap,
        state: GameState,
        dice: List[int],
    ) -> Move:
        """
        Ask the agent for a move and validate it against the candidates.

        Returns:
            The chosen Move.

        Raises:
            AgentFailure: On transport failure, malformed answer or a move
                that is not in the candidate map.
        """
        wire_candidates: Dict[str, List[int]] = {str(k): list(v) for k, v in candidates.items()}
        payload = self.client.build_request(state, wire_candidates)

        response: Any = None
        try:
            response = self.client.request_move(payload)
            from_point, to_point = self.parser.parse(response)
            move = AgentMoveResolver(wire_candidates, self.color).resolve(from_point, to_point)
        except AgentFailure as e:
            logger.warning("Agent failure for %s: %s", self.color, e)
            self.log_exchange(payload, response, error=str(e))
            raise

        logger.info("Agent chose %s", move)
        self.log_exchange(payload, response)
        return move

    # --- Logging ---
    def log_exchange(self, payload: Dict[str, Any], response: Any, error: Optional[str] = None) -> None:
        """
        Append one request/response exchange to the log file.

        Args:
            payload: Request sent to the agent.
            response: Decoded answer, or None if nothing was received.
            error: Failure message, if the exchange failed.
        """
        if not self.log_file:
            return
        try:
            with open(self.log_file, "a", encoding="utf-8") as f:
                f.write("\n" + "=" * 50 + "\n")
                f.write(f"ENTRY {self.log_entry_counter} - {datetime.now()}\n\n")
                f.write("REQUEST:\n")
                f.write(payload.get("description", "") + "\n")
                f.write("\nCANDIDATES:\n")
                f.write(json.dumps(payload.get("availableMoves", {})) + "\n")
                f.write("\nRESPONSE:\n")
                f.write((json.dumps(response) if response is not None else "<no response>") + "\n")
                if error:
                    f.write(f"\nERROR:\n{error}\n")
        except OSError as e:
            logger.warning("Cannot write agent log %s: %s", self.log_file, e)
            return
        self.log_entry_counter += 1
