# =========================================================
# --- parser.py ---
# =========================================================

import json
from typing import Any, Dict, Tuple, Union

from marshmallow import EXCLUDE, Schema, fields, pre_load, ValidationError

from .resolver import AgentFailure

# =========================================================

class AgentMoveSchema(Schema):
    """A single {from, to} answer. Both fields are required integers."""

    from_point = fields.Integer(
        required=True, strict=True, data_key="from",
        error_messages={"required": "Missing 'from'."},
    )
    to_point = fields.Integer(
        required=True, strict=True, data_key="to",
        error_messages={"required": "Missing 'to'."},
    )

    @pre_load
    def unwrap_move(self, data, **kwargs):
        """Accept both {"move": {...}} and a bare {"from", "to"} object."""
        if isinstance(data, dict) and isinstance(data.get("move"), dict):
            return data["move"]
        return data


class AgentResponseParser:
    """
    Parser for move-choosing agent responses.

    Turns a JSON body (text or decoded) into a (from, to) pair, or raises
    AgentFailure for error bodies and malformed payloads.
    """

    def __init__(self) -> None:
        self.schema: AgentMoveSchema = AgentMoveSchema()

    def parse(self, body: Union[str, bytes, Dict[str, Any]]) -> Tuple[int, int]:
        """
        Parse an agent response.

        Args:
            body: Raw JSON text or an already decoded object.

        Returns:
            Tuple (from_point, to_point).

        Raises:
            AgentFailure: If the body is not JSON, reports an error or fails validation.
        """
        if isinstance(body, (str, bytes)):
            try:
                body = json.loads(body)
            except ValueError as e:
                raise AgentFailure(f"Agent response is not JSON: {e}") from e

        if not isinstance(body, dict):
            raise AgentFailure(f"Agent response must be an object, got {type(body).__name__}")
        if "error" in body:
            raise AgentFailure(f"Agent reported an error: {body['error']}")

        try:
            data = self.schema.load(body, unknown=EXCLUDE)
        except ValidationError as e:
            raise AgentFailure(f"Malformed agent move: {e.messages}") from e

        return data["from_point"], data["to_point"]
