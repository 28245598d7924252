"""Tests for the game connection dispatcher against an in-memory network."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import json
import random

from shared.constants import TurnPhase, Direction
from shared.models import Position
from shared.protocol import Move, CastVote
from client.game_session import GameSession


def frame(action, data):
    return json.dumps({"action": action, "data": data})


def player(pid, name, x=None, y=None, alive=True):
    return {"id": pid, "username": name,
            "pos": {"x": x, "y": y} if x is not None else None,
            "cannonball_count": 0, "is_alive": alive}


def state(turn, bob=(2, 3), mode=None, bob_alive=True):
    return {
        "grid": [["Solid"] * 5 for _ in range(5)],
        "players": [player("wallet-a", "Ann", 0, 0), player("wallet-b", "Bob", *bob, alive=bob_alive)],
        "cannonballs": [],
        "turn": turn,
        "targeted_tiles": [],
        "mode": mode,
    }


PRE_GAME = frame("GamePreGameData", {
    "modes": ["Classic", "Cracked"], "deadline_secs": 10,
    "players": [player("wallet-a", "Ann"), player("wallet-b", "Bob")],
    "grid_row": 5, "grid_col": 5,
})


def make(context, network, clock):
    session = GameSession(context, "game 1", "example.org", 9000, network=network,
                          clock=clock, rng=random.Random(5))
    session.open()
    return session


class TestConnection:
    def test_uri_carries_identity(self, context, network, clock):
        make(context, network, clock)
        assert network.uri == "ws://example.org:9000/ws/game/game%201?wallet=wallet-b&username=Bob"

    def test_messages_handled_in_order(self, context, network, clock):
        session = make(context, network, clock)
        network.push_raw(PRE_GAME)
        network.push_raw(frame("GameStateUpdate", {"state": state(1), "turn_duration": 5}))
        network.push_raw(frame("GameStateUpdate", {"state": state(2), "turn_duration": 5}))
        handled = session.pump()
        assert len(handled) == 3
        assert session.turns.turn == 2

    def test_malformed_frames_skipped(self, context, network, clock):
        session = make(context, network, clock)
        network.push_raw("not json")
        network.push_raw(frame("Teleport", {}))
        network.push_raw(PRE_GAME)
        assert len(session.pump()) == 1
        assert session.turns.phase == TurnPhase.PREGAME_VOTE

    def test_connection_loss_stops_timers(self, context, network, clock):
        session = make(context, network, clock)
        network.push_raw(PRE_GAME)
        session.pump()
        network.drop()
        session.pump()
        assert session.closed
        assert not session.turns.vote_timer.active

    def test_close_is_idempotent(self, context, network, clock):
        session = make(context, network, clock)
        network.push_raw(frame("GameStateUpdate", {"state": state(1)}))
        session.pump()
        session.close()
        session.close()
        assert network.disconnects == 1
        assert not session.turns.turn_timer.active
        assert not session.move(Direction.UP)


class TestPreGame:
    def test_pre_game_opens_vote(self, context, network, clock):
        session = make(context, network, clock)
        network.push_raw(PRE_GAME)
        session.pump()
        assert session.turns.voting_open
        assert session.local_player_id == "wallet-b"
        assert session.vote.modes == ["Classic", "Cracked"]
        assert session.turns.is_placeholder

    def test_cast_vote_once(self, context, network, clock):
        session = make(context, network, clock)
        network.push_raw(PRE_GAME)
        session.pump()
        assert session.cast_vote("Classic")
        assert not session.cast_vote("Cracked")
        assert network.sent == [CastVote("Classic")]

    def test_vote_after_deadline_rejected(self, context, network, clock):
        session = make(context, network, clock)
        network.push_raw(PRE_GAME)
        session.pump()
        clock.advance(10)
        session.turns.vote_timer.tick()
        assert not session.cast_vote("Classic")
        assert network.sent == []

    def test_deadline_preempts_draw(self, context, network, clock):
        session = make(context, network, clock)
        network.push_raw(PRE_GAME)
        network.push_raw(frame("GameModeChosen", {"mode": "Classic", "chosen_by": "wallet-a"}))
        session.pump()
        assert session.vote.draw.rolling
        clock.advance(10)
        session.turns.vote_timer.tick()
        assert not session.vote.draw.rolling
        assert session.vote.result_text == "Ann was drawn! Mode: Classic"

    def test_first_snapshot_ends_draw(self, context, network, clock):
        session = make(context, network, clock)
        network.push_raw(PRE_GAME)
        network.push_raw(frame("GameModeVoteUpdate", {"player_id": "wallet-a", "mode": "Classic"}))
        network.push_raw(frame("GameModeVoteUpdate", {"player_id": "wallet-b", "mode": "Classic"}))
        network.push_raw(frame("GameModeChosen", {"mode": "Classic", "chosen_by": "wallet-b"}))
        network.push_raw(frame("GameStateUpdate", {"state": state(1, mode="Classic"), "turn_duration": 5}))
        session.pump()
        assert session.turns.phase == TurnPhase.MOVE
        assert session.turns.mode == "Classic"
        assert session.vote.draw.final_index == 1
        assert not session.turns.vote_timer.active

    def test_game_init_sets_mode(self, context, network, clock):
        session = make(context, network, clock)
        network.push_raw(frame("GameInit", {"state": state(1), "mode": "Cracked"}))
        session.pump()
        assert session.turns.mode == "Cracked"
        assert session.turns.phase == TurnPhase.MOVE


class TestMoves:
    def test_prediction_scenario(self, context, network, clock):
        session = make(context, network, clock)
        network.push_raw(frame("GameStateUpdate", {"state": state(1), "turn_duration": 5}))
        session.pump()
        assert session.local_render_position == Position(2, 3)

        assert session.move(Direction.RIGHT)
        assert network.sent == [Move(Direction.RIGHT)]
        assert session.local_render_position == Position(3, 3)
        assert not session.move(Direction.UP)
        assert len(network.sent) == 1

        # Server kept Bob in place on turn 2.
        network.push_raw(frame("GameStateUpdate", {"state": state(2), "turn_duration": 5}))
        session.pump()
        assert session.local_render_position == Position(2, 3)
        assert session.turns.accepting_input

    def test_within_turn_update_keeps_prediction(self, context, network, clock):
        session = make(context, network, clock)
        network.push_raw(frame("GameStateUpdate", {"state": state(1)}))
        session.pump()
        session.move(Direction.UP)
        network.push_raw(frame("GameStateUpdate", {"state": state(1)}))
        session.pump()
        assert session.local_render_position == Position(2, 2)
        assert session.turns.has_submitted

    def test_move_after_turn_timer_rejected(self, context, network, clock):
        session = make(context, network, clock)
        network.push_raw(frame("GameStateUpdate", {"state": state(1), "turn_duration": 3}))
        session.pump()
        clock.advance(2)
        session.turns.turn_timer.tick()
        assert not session.move(Direction.LEFT)
        assert network.sent == []

    def test_dead_player_not_predicted(self, context, network, clock):
        session = make(context, network, clock)
        network.push_raw(frame("GameStateUpdate", {"state": state(1, bob_alive=False)}))
        session.pump()
        assert session.move(Direction.LEFT)
        assert session.predictor.prediction is None

    def test_snapshot_ids_differ_from_roster_ids(self, context, network, clock):
        session = make(context, network, clock)
        network.push_raw(PRE_GAME)
        session.pump()
        assert session.local_player_id == "wallet-b"

        numbered = state(1)
        numbered["players"][0]["id"] = 1
        numbered["players"][1]["id"] = 2
        network.push_raw(frame("GameStateUpdate", {"state": numbered, "turn_duration": 5}))
        session.pump()
        assert session.local_player_id == "2"
        assert session.local_player.username == "Bob"

        assert session.move(Direction.RIGHT)
        assert session.local_render_position == Position(3, 3)

    def test_identify_by_username_fallback(self, network, clock):
        from client.settings import SessionContext
        session = make(SessionContext("other-wallet", "Ann"), network, clock)
        network.push_raw(frame("GameStateUpdate", {"state": state(1)}))
        session.pump()
        assert session.local_player_id == "wallet-a"


class TestEndAndErrors:
    def test_game_ended(self, context, network, clock):
        session = make(context, network, clock)
        network.push_raw(frame("GameStateUpdate", {"state": state(1)}))
        network.push_raw(frame("GameEnded", {"winner": "wallet-a"}))
        network.push_raw(frame("GameStateUpdate", {"state": state(2)}))
        session.pump()
        assert session.turns.phase == TurnPhase.ENDED
        assert session.turns.winner == "wallet-a"
        assert session.turns.turn == 1
        assert not session.turns.turn_timer.active

    def test_plain_error_keeps_session(self, context, network, clock):
        session = make(context, network, clock)
        network.push_raw(frame("Error", {"code": "INVALID_MOVE", "message": "nope"}))
        session.pump()
        assert session.error_message == "nope"
        assert not session.closed

    def test_kicked_error_closes(self, context, network, clock):
        session = make(context, network, clock)
        network.push_raw(frame("Error", {"code": "SESSION_KICKED", "message": "elsewhere"}))
        network.push_raw(frame("GameStateUpdate", {"state": state(1)}))
        handled = session.pump()
        assert session.closed
        assert session.kicked_reason == "elsewhere"
        assert len(handled) == 1
        assert session.turns.phase == TurnPhase.IDLE

    def test_session_kicked_message(self, context, network, clock):
        session = make(context, network, clock)
        network.push_raw(frame("SessionKicked", {"reason": None}))
        session.pump()
        assert session.closed
        assert session.kicked_reason
