# =========================================================
# --- resolver.py ---
# =========================================================

from typing import Dict, List, Mapping, Union

from gammon.core.board import Color
from gammon.core.moves import Move

# =========================================================

class AgentFailure(Exception):
    """
    Raised when the move-choosing agent cannot deliver a usable move.

    Covers transport errors, timeouts, malformed payloads and moves that
    are not part of the candidate map the agent was given. The engine
    recovers by forfeiting the agent's turn.
    """
    pass


class AgentMoveResolver:
    """
    Translates an agent's {from, to} answer into an engine Move.

    The answer must be an exact member of the candidate map sent to the
    agent; legality is not re-derived here.
    """

    def __init__(self, candidates: Mapping[Union[int, str], List[int]], color: Color) -> None:
        """
        Args:
            candidates: Origin -> destinations, keys as ints or stringified ints.
            color: The color the agent moves.
        """
        self.candidates: Dict[str, List[int]] = {str(k): list(v) for k, v in candidates.items()}
        self.color: Color = color

    def resolve(self, from_point: int, to_point: int) -> Move:
        """
        Validate an answer against the candidate map.

        Returns:
            The Move for the answer.

        Raises:
            AgentFailure: If the origin is absent or the destination is not listed for it.
        """
        destinations = self.candidates.get(str(from_point))
        if destinations is None:
            raise AgentFailure(f"No candidate moves from position {from_point}")
        if to_point not in destinations:
            raise AgentFailure(f"Move to {to_point} not in valid destinations {destinations}")
        return Move(from_point, to_point, self.color)
