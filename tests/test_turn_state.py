"""Tests for the turn phase machine."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from shared.constants import TurnPhase, Cell, DEFAULT_TURN_DURATION
from shared.models import Player, Position, PreGameConfig, TurnSnapshot
from client.turn_state import TurnStateMachine, safe_turn_seconds


PLAYERS = [Player("a", "Ann"), Player("b", "Bob")]


def config(deadline=10):
    return PreGameConfig(modes=["Classic", "Cracked"], deadline_secs=deadline,
                         players=PLAYERS, grid_rows=5, grid_cols=5)


def snapshot(turn, mode=None, bob_pos=Position(2, 3)):
    return TurnSnapshot(
        grid=[[Cell.SOLID] * 5 for _ in range(5)],
        players=[Player("a", "Ann", Position(0, 0)), Player("b", "Bob", bob_pos)],
        turn=turn,
        mode=mode,
    )


class TestSafeTurnSeconds:
    def test_subtracts_margin(self):
        assert safe_turn_seconds(8, 1) == 7

    def test_default_when_missing(self):
        assert safe_turn_seconds(None, 1) == DEFAULT_TURN_DURATION - 1

    def test_never_below_one(self):
        assert safe_turn_seconds(1, 1) == 1
        assert safe_turn_seconds(2, 5) == 1


class TestPreGame:
    def test_enters_vote_with_placeholder(self, clock):
        sm = TurnStateMachine(clock=clock)
        assert sm.on_pre_game(config())
        assert sm.phase == TurnPhase.PREGAME_VOTE
        assert sm.voting_open
        assert sm.is_placeholder
        assert sm.snapshot.turn == 0
        assert sm.snapshot.rows == 5 and sm.snapshot.cols == 5
        assert all(p.pos is None for p in sm.snapshot.players)
        assert sm.vote_seconds_left == 10
        assert not sm.accepting_input

    def test_vote_deadline_closes_voting(self, clock):
        fired = []
        sm = TurnStateMachine(clock=clock, on_vote_expired=lambda: fired.append(True))
        sm.on_pre_game(config(deadline=3))
        clock.advance(3)
        sm.vote_timer.tick()
        assert sm.vote_expired
        assert not sm.voting_open
        assert fired == [True]
        assert sm.phase == TurnPhase.PREGAME_VOTE

    def test_ignored_once_playing(self, clock):
        sm = TurnStateMachine(clock=clock)
        sm.on_pre_game(config())
        sm.on_snapshot(snapshot(1))
        assert not sm.on_pre_game(config())
        assert sm.phase == TurnPhase.MOVE


class TestTurns:
    def test_first_snapshot_opens_turn(self, clock):
        sm = TurnStateMachine(clock=clock, safety_margin=1)
        sm.on_pre_game(config())
        assert sm.on_snapshot(snapshot(1, mode="Classic"), turn_duration=6)
        assert sm.phase == TurnPhase.MOVE
        assert sm.accepting_input
        assert not sm.vote_timer.active
        assert sm.turn_seconds_left == 5
        assert sm.mode == "Classic"
        assert not sm.is_placeholder

    def test_snapshot_from_idle(self, clock):
        sm = TurnStateMachine(clock=clock)
        assert sm.on_snapshot(snapshot(7))
        assert sm.turn == 7
        assert sm.phase == TurnPhase.MOVE

    def test_submit_once_per_turn(self, clock):
        sm = TurnStateMachine(clock=clock)
        sm.on_snapshot(snapshot(1))
        assert sm.submit_move()
        assert sm.phase == TurnPhase.WAIT
        assert sm.has_submitted
        assert not sm.submit_move()
        assert sm.action_message == "Waiting for other players..."

    def test_within_turn_update_keeps_flags(self, clock):
        sm = TurnStateMachine(clock=clock)
        sm.on_snapshot(snapshot(1))
        sm.submit_move()
        clock.advance(2)
        sm.turn_timer.tick()
        assert not sm.on_snapshot(snapshot(1, bob_pos=Position(3, 3)))
        assert sm.has_submitted
        assert sm.phase == TurnPhase.WAIT
        assert sm.snapshot.player("b").pos == Position(3, 3)
        assert sm.turn_seconds_left == DEFAULT_TURN_DURATION - 1 - 2

    def test_new_turn_resets(self, clock):
        sm = TurnStateMachine(clock=clock)
        sm.on_snapshot(snapshot(1))
        sm.submit_move()
        assert sm.on_snapshot(snapshot(2))
        assert sm.turn == 2
        assert not sm.has_submitted
        assert sm.accepting_input

    def test_stale_snapshot_ignored(self, clock):
        sm = TurnStateMachine(clock=clock)
        sm.on_snapshot(snapshot(3))
        assert not sm.on_snapshot(snapshot(2, bob_pos=Position(0, 4)))
        assert sm.turn == 3
        assert sm.snapshot.player("b").pos == Position(2, 3)

    def test_turn_expiry_blocks_input(self, clock):
        sm = TurnStateMachine(clock=clock, safety_margin=1)
        sm.on_snapshot(snapshot(1), turn_duration=3)
        clock.advance(2)
        sm.turn_timer.tick()
        assert sm.turn_expired
        assert not sm.accepting_input
        assert not sm.submit_move()
        assert sm.action_message.startswith("Time's up")

    def test_expiry_cleared_on_next_turn(self, clock):
        sm = TurnStateMachine(clock=clock)
        sm.on_snapshot(snapshot(1), turn_duration=2)
        clock.advance(5)
        sm.turn_timer.tick()
        sm.on_snapshot(snapshot(2))
        assert not sm.turn_expired
        assert sm.accepting_input

    def test_duration_carries_over(self, clock):
        sm = TurnStateMachine(clock=clock, safety_margin=1)
        sm.on_snapshot(snapshot(1), turn_duration=9)
        sm.on_snapshot(snapshot(2))
        assert sm.turn_seconds_left == 8


class TestMatchEnd:
    def test_ended_is_terminal(self, clock):
        sm = TurnStateMachine(clock=clock)
        sm.on_snapshot(snapshot(1))
        assert sm.on_match_end("a")
        assert sm.phase == TurnPhase.ENDED
        assert sm.winner == "a"
        assert not sm.turn_timer.active
        assert not sm.on_snapshot(snapshot(2))
        assert not sm.on_match_end("b")
        assert sm.winner == "a"
        assert not sm.submit_move()
        assert sm.action_message == "Game over"

    def test_shutdown_stops_both_timers(self, clock):
        sm = TurnStateMachine(clock=clock)
        sm.on_pre_game(config())
        sm.shutdown()
        clock.advance(60)
        sm.vote_timer.tick()
        assert not sm.vote_expired
