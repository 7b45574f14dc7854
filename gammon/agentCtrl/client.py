# =========================================================
# --- client.py ---
# =========================================================

import logging
from typing import Any, Dict, List, Mapping, Optional

import requests

from gammon.core.board import Color
from gammon.core.state import GameState

from .resolver import AgentFailure

# =========================================================

logger = logging.getLogger(__name__)


def describe_positions(state: GameState, color: Color) -> str:
    """Summarize where the stones of color stand, e.g. '2 on point 1, 5 on point 12'."""
    parts = [f"{state.num_of_stones(p, color)} on point {p}" for p in state.occupied_points(color)]
    return ", ".join(parts) if parts else "none"


def describe_state(state: GameState, candidates: Mapping[str, List[int]]) -> str:
    """
    Return a plain-text description of the position and the moves on offer.

    Args:
        state: Current game state.
        candidates: Stringified origin -> destinations.

    Returns:
        Multi-line description for the agent.
    """
    me = state.turn
    opp = me.opponent
    lines = [
        "Current game state:",
        f"- Your pieces ({me}) positions: {describe_positions(state, me)}",
        f"- Opponent pieces ({opp}) positions: {describe_positions(state, opp)}",
        f"- Pieces on bar: {state.bar[me]} {me}, {state.bar[opp]} {opp}",
        f"- Pieces in home: {state.home[me]} {me}, {state.home[opp]} {opp}",
        f"- Dice values available: {', '.join(str(d) for d in state.dice.available)}",
        "",
        "Available moves (you MUST choose one of these):",
    ]
    for origin, dests in candidates.items():
        lines.append(f"From {origin}: can move to points [{', '.join(str(d) for d in dests)}]")
    lines.append("")
    lines.append("Respond with a JSON object containing 'from' and 'to' matching one of the moves above.")
    return "\n".join(lines)


class AgentClient:
    """
    HTTP transport to the remote move-choosing agent.

    Attributes:
        url (str): Endpoint receiving the move request.
        timeout (float): Seconds to wait for an answer.
        session (requests.Session): Session used for the POST requests.
    """

    def __init__(self, url: str, timeout: float = 30.0, session: Optional[requests.Session] = None) -> None:
        """
        Args:
            url: Agent endpoint.
            timeout: Request timeout in seconds.
            session: Optional session (connection reuse, testing).
        """
        self.url: str = url
        self.timeout: float = timeout
        self.session: requests.Session = session or requests.Session()

    def build_request(self, state: GameState, candidates: Mapping[str, List[int]]) -> Dict[str, Any]:
        """Build the JSON payload for a move request."""
        return {
            "gameState": state.to_dict(),
            "availableMoves": {str(k): list(v) for k, v in candidates.items()},
            "description": describe_state(state, candidates),
        }

    def request_move(self, payload: Dict[str, Any]) -> Any:
        """
        POST the payload and return the decoded JSON answer.

        Raises:
            AgentFailure: On timeout, connection error, non-2xx status or a non-JSON body.
        """
        logger.debug("Requesting agent move from %s (%d origins)", self.url, len(payload["availableMoves"]))
        try:
            response = self.session.post(self.url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.Timeout as e:
            raise AgentFailure(f"Agent timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise AgentFailure(f"Agent request failed: {e}") from e
        except ValueError as e:
            raise AgentFailure(f"Agent response is not JSON: {e}") from e
