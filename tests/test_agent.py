"""
Tests for the move-choosing agent boundary: response parsing, candidate
membership, the HTTP client and the AgentBot inside the game loop.

The HTTP session is replaced by a MagicMock, so no network is used.
"""

from unittest.mock import MagicMock

import pytest
import requests

from gammon.agentCtrl.bot import AgentBot
from gammon.agentCtrl.client import AgentClient, describe_state
from gammon.agentCtrl.parser import AgentResponseParser
from gammon.agentCtrl.resolver import AgentFailure, AgentMoveResolver
from gammon.core.board import Color
from gammon.core.dice import Dice
from gammon.core.engine import GameEngine
from gammon.core.moves import Move
from gammon.core.state import GameState, Phase
from gammon.players.random import RandomPlayer


def fake_session(*answers):
    """Session whose post() returns a response decoding to each answer in turn."""
    response = MagicMock()
    response.raise_for_status.return_value = None
    response.json.side_effect = list(answers)
    session = MagicMock()
    session.post.return_value = response
    return session


def fixed_rng(*values):
    rng = MagicMock()
    rng.randint.side_effect = list(values)
    return rng


@pytest.fixture
def black_to_move():
    """Opening layout, black to move with 6-5."""
    state = GameState(start_player=Color.BLACK)
    state.dice = Dice.from_values(6, 5)
    state.phase = Phase.MOVING
    return state


# =============================================================================
# Parser
# =============================================================================


class TestParser:

    @pytest.fixture
    def parser(self):
        return AgentResponseParser()

    def test_bare_object(self, parser):
        assert parser.parse({"from": 13, "to": 7}) == (13, 7)

    def test_wrapped_object(self, parser):
        assert parser.parse({"move": {"from": -1, "to": 20}}) == (-1, 20)

    def test_json_text(self, parser):
        assert parser.parse('{"from": 24, "to": 18, "reason": "safe"}') == (24, 18)

    def test_error_body(self, parser):
        with pytest.raises(AgentFailure, match="error"):
            parser.parse({"error": "model unavailable"})

    def test_missing_field(self, parser):
        with pytest.raises(AgentFailure):
            parser.parse({"from": 13})

    def test_non_integer_field(self, parser):
        with pytest.raises(AgentFailure):
            parser.parse({"from": "13", "to": 7})

    def test_not_json(self, parser):
        with pytest.raises(AgentFailure):
            parser.parse("13 to 7")

    def test_not_an_object(self, parser):
        with pytest.raises(AgentFailure):
            parser.parse([13, 7])


# =============================================================================
# Resolver
# =============================================================================


class TestResolver:

    def test_member_move(self):
        resolver = AgentMoveResolver({"13": [7, 8], "-1": [20]}, Color.BLACK)
        assert resolver.resolve(13, 8) == Move(13, 8, Color.BLACK)
        assert resolver.resolve(-1, 20) == Move(-1, 20, Color.BLACK)

    def test_int_keys_are_accepted(self):
        resolver = AgentMoveResolver({13: [7]}, Color.BLACK)
        assert resolver.resolve(13, 7) == Move(13, 7, Color.BLACK)

    def test_unknown_origin(self):
        with pytest.raises(AgentFailure, match="No candidate moves"):
            AgentMoveResolver({"13": [7]}, Color.BLACK).resolve(12, 7)

    def test_unlisted_destination(self):
        with pytest.raises(AgentFailure, match="not in valid destinations"):
            AgentMoveResolver({"13": [7]}, Color.BLACK).resolve(13, 8)


# =============================================================================
# Client
# =============================================================================


class TestClient:

    def test_build_request(self, black_to_move):
        client = AgentClient("http://agent.test/move", session=MagicMock())
        payload = client.build_request(black_to_move, {"24": [18], "13": [7, 8]})

        assert set(payload) == {"gameState", "availableMoves", "description"}
        assert payload["availableMoves"] == {"24": [18], "13": [7, 8]}
        assert payload["gameState"]["currentPlayer"] == "black"
        assert payload["gameState"]["dice"]["available"] == [6, 5]

    def test_description(self, black_to_move):
        text = describe_state(black_to_move, {"13": [7, 8]})
        assert "Your pieces (black)" in text
        assert "2 on point 24" in text
        assert "From 13: can move to points [7, 8]" in text
        assert "Dice values available: 6, 5" in text

    def test_request_move_posts_json(self):
        session = fake_session({"from": 13, "to": 7})
        client = AgentClient("http://agent.test/move", timeout=2.5, session=session)

        assert client.request_move({"availableMoves": {}}) == {"from": 13, "to": 7}
        session.post.assert_called_once_with(
            "http://agent.test/move", json={"availableMoves": {}}, timeout=2.5
        )

    def test_timeout(self):
        session = MagicMock()
        session.post.side_effect = requests.Timeout("slow")
        client = AgentClient("http://agent.test/move", timeout=1.0, session=session)
        with pytest.raises(AgentFailure, match="timed out"):
            client.request_move({"availableMoves": {}})

    def test_http_error(self):
        session = fake_session()
        session.post.return_value.raise_for_status.side_effect = requests.HTTPError("500 Server Error")
        client = AgentClient("http://agent.test/move", session=session)
        with pytest.raises(AgentFailure, match="request failed"):
            client.request_move({"availableMoves": {}})

    def test_connection_error(self):
        session = MagicMock()
        session.post.side_effect = requests.ConnectionError("refused")
        client = AgentClient("http://agent.test/move", session=session)
        with pytest.raises(AgentFailure):
            client.request_move({"availableMoves": {}})

    def test_body_not_json(self):
        session = fake_session(ValueError("Expecting value"))
        client = AgentClient("http://agent.test/move", session=session)
        with pytest.raises(AgentFailure, match="not JSON"):
            client.request_move({"availableMoves": {}})


# =============================================================================
# AgentBot
# =============================================================================


class TestAgentBot:

    def test_select_move(self, black_to_move):
        client = AgentClient("http://agent.test/move", session=fake_session({"from": 24, "to": 18}))
        bot = AgentBot(Color.BLACK, client)
        move = bot.select_move({24: [18], 13: [7, 8]}, black_to_move, [6, 5])
        assert move == Move(24, 18, Color.BLACK)

    def test_move_outside_candidates_raises(self, black_to_move):
        client = AgentClient("http://agent.test/move", session=fake_session({"from": 6, "to": 1}))
        bot = AgentBot(Color.BLACK, client)
        with pytest.raises(AgentFailure):
            bot.select_move({24: [18]}, black_to_move, [6, 5])

    def test_exchanges_are_logged(self, black_to_move, tmp_path):
        log_file = tmp_path / "logs" / "agent.log"
        client = AgentClient(
            "http://agent.test/move",
            session=fake_session({"from": 24, "to": 18}, {"error": "busy"}),
        )
        bot = AgentBot(Color.BLACK, client, log_file=str(log_file))

        bot.select_move({24: [18]}, black_to_move, [6, 5])
        with pytest.raises(AgentFailure):
            bot.select_move({24: [18]}, black_to_move, [6, 5])

        text = log_file.read_text(encoding="utf-8")
        assert "ENTRY 1" in text
        assert "ENTRY 2" in text
        assert "ERROR:" in text
        assert bot.log_entry_counter == 3


class TestAgentInGame:

    def _engine(self, session):
        bot = AgentBot(Color.BLACK, AgentClient("http://agent.test/move", session=session))
        state = GameState(start_player=Color.BLACK, debug=True)
        return GameEngine(RandomPlayer(Color.WHITE), bot, state=state, rng=fixed_rng(6, 5), debug=True)

    def test_agent_plays_its_turn(self):
        session = fake_session({"move": {"from": 24, "to": 18}}, {"from": 18, "to": 13})
        engine = self._engine(session)

        types = [e["type"] for e in engine.play_turn()]

        assert types == [
            "roll_dice", "chosen_move", "apply_move", "chosen_move", "apply_move", "turn_end",
        ]
        assert engine.state.num_of_stones(13, Color.BLACK) == 6
        assert engine.state.num_of_stones(24, Color.BLACK) == 1
        assert engine.turn == Color.WHITE

        payload = session.post.call_args_list[0].kwargs["json"]
        assert payload["availableMoves"] == {"8": [2, 3], "13": [7, 8], "24": [18]}

    def test_invalid_answer_forfeits_turn(self):
        engine = self._engine(fake_session({"from": 6, "to": 1}))
        before = engine.state.copy()

        events = list(engine.play_turn())

        assert [e["type"] for e in events] == ["roll_dice", "forfeit", "turn_end"]
        assert "No candidate moves" in events[1]["reason"]
        assert (engine.state.points == before.points).all()
        assert engine.turn == Color.WHITE
        assert engine.phase == Phase.ROLLING

    def test_unwritable_log_still_forfeits_turn(self, tmp_path):
        log_dir = tmp_path / "agent.log"
        log_dir.mkdir()
        bot = AgentBot(
            Color.BLACK,
            AgentClient("http://agent.test/move", session=fake_session({"from": 6, "to": 1})),
            log_file=str(log_dir),
        )
        state = GameState(start_player=Color.BLACK, debug=True)
        engine = GameEngine(RandomPlayer(Color.WHITE), bot, state=state, rng=fixed_rng(6, 5), debug=True)

        events = list(engine.play_turn())

        assert [e["type"] for e in events] == ["roll_dice", "forfeit", "turn_end"]
        assert engine.turn == Color.WHITE
        assert bot.log_entry_counter == 1

    def test_timeout_forfeits_turn(self):
        session = MagicMock()
        session.post.side_effect = requests.Timeout("slow")
        engine = self._engine(session)

        events = list(engine.play_turn())

        assert events[1]["type"] == "forfeit"
        assert "timed out" in events[1]["reason"]
        assert engine.turn == Color.WHITE
