"""Network protocol: message envelopes, typed inbound variants, outbound commands.

Every frame is a JSON object ``{"action": <kind>, "data": <payload>}``.
Unit commands (Pay, CancelPayment) carry no ``data``.
"""

from __future__ import annotations
import json
from dataclasses import dataclass
from typing import Any, Optional, Union

from shared.constants import MessageType, Direction, ROSTER_MESSAGES
from shared.models import PreGameConfig, TurnSnapshot, LobbyRoster


class ProtocolError(ValueError):
    """Raised when a frame is not a valid envelope."""


def create_message(msg_type: MessageType, payload: Any = None) -> str:
    """Create a JSON message string."""
    msg = {"action": msg_type.value}
    if payload is not None:
        msg["data"] = payload
    return json.dumps(msg)


def parse_message(data: str | bytes) -> tuple[MessageType, Any]:
    """Parse a JSON message string into (type, payload)."""
    try:
        msg = json.loads(data)
    except (TypeError, ValueError) as e:
        raise ProtocolError(f"not JSON: {e}") from e
    if not isinstance(msg, dict) or "action" not in msg:
        raise ProtocolError("envelope without action")
    try:
        msg_type = MessageType(msg["action"])
    except ValueError as e:
        raise ProtocolError(f"unknown action {msg['action']!r}") from e
    return msg_type, msg.get("data")


# ------------------------------------------------------------------ #
# Inbound variants
# ------------------------------------------------------------------ #

@dataclass
class PreGameData:
    config: PreGameConfig


@dataclass
class ModeVoteUpdate:
    player_id: str
    mode: str


@dataclass
class ModeChosen:
    mode: str
    chosen_by: str


@dataclass
class StateUpdate:
    state: TurnSnapshot
    turn_duration: Optional[int]


@dataclass
class GameInit:
    state: TurnSnapshot
    mode: str


@dataclass
class GameEnded:
    winner: str


@dataclass
class SessionKicked:
    reason: str


@dataclass
class LobbyUpdate:
    roster: LobbyRoster


@dataclass
class GameStarted:
    game_id: str


@dataclass
class ServerError:
    message: str
    code: Optional[str] = None
    context: Optional[str] = None


InboundMessage = Union[
    PreGameData, ModeVoteUpdate, ModeChosen, StateUpdate, GameInit, GameEnded,
    SessionKicked, LobbyUpdate, GameStarted, ServerError,
]


def _build_inbound(msg_type: MessageType, data: Any) -> Optional[InboundMessage]:
    if msg_type == MessageType.GAME_PRE_GAME_DATA:
        return PreGameData(PreGameConfig.from_dict(data))
    elif msg_type == MessageType.GAME_MODE_VOTE_UPDATE:
        return ModeVoteUpdate(player_id=str(data["player_id"]), mode=str(data["mode"]))
    elif msg_type == MessageType.GAME_MODE_CHOSEN:
        return ModeChosen(mode=str(data["mode"]), chosen_by=str(data["chosen_by"]))
    elif msg_type == MessageType.GAME_STATE_UPDATE:
        duration = data.get("turn_duration")
        return StateUpdate(
            state=TurnSnapshot.from_dict(data["state"]),
            turn_duration=int(duration) if duration is not None else None,
        )
    elif msg_type == MessageType.GAME_INIT:
        return GameInit(state=TurnSnapshot.from_dict(data["state"]), mode=str(data["mode"]))
    elif msg_type == MessageType.GAME_ENDED:
        return GameEnded(winner=str(data["winner"]))
    elif msg_type == MessageType.SESSION_KICKED:
        return SessionKicked(reason=str((data or {}).get("reason") or ""))
    elif msg_type in ROSTER_MESSAGES:
        return LobbyUpdate(LobbyRoster.from_dict(data))
    elif msg_type == MessageType.GAME_STARTED:
        return GameStarted(game_id=str(data["game_id"]))
    elif msg_type == MessageType.ERROR:
        data = data or {}
        return ServerError(
            message=data.get("message") or "An error occurred",
            code=data.get("code"),
            context=data.get("context"),
        )
    # Outbound-only kinds echoed back to us are not meaningful here.
    return None


def decode_message(raw: str | bytes) -> Optional[InboundMessage]:
    """Decode one inbound frame. Anything unusable yields None."""
    try:
        msg_type, data = parse_message(raw)
        return _build_inbound(msg_type, data)
    except ProtocolError as e:
        print(f"[net] Dropped frame: {e}")
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        print(f"[net] Dropped malformed payload: {e!r}")
    return None


# ------------------------------------------------------------------ #
# Outbound commands
# ------------------------------------------------------------------ #

@dataclass(frozen=True)
class Move:
    direction: Direction


@dataclass(frozen=True)
class CastVote:
    mode: str


@dataclass(frozen=True)
class Pay:
    pass


@dataclass(frozen=True)
class CancelPayment:
    pass


OutboundCommand = Union[Move, CastVote, Pay, CancelPayment]


def encode_command(command: OutboundCommand) -> str:
    """Serialize an outbound command to its wire frame."""
    if isinstance(command, Move):
        return create_message(MessageType.MOVE, Direction(command.direction).value)
    elif isinstance(command, CastVote):
        return create_message(MessageType.GAME_MODE_VOTE, {"mode": command.mode})
    elif isinstance(command, Pay):
        return create_message(MessageType.PAY)
    elif isinstance(command, CancelPayment):
        return create_message(MessageType.CANCEL_PAYMENT)
    raise TypeError(f"not an outbound command: {command!r}")
