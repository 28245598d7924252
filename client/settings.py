"""Session persistence: the {wallet, username} pair in session.json next to the project root."""

import os
import sys
import json
import uuid
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SessionContext:
    """Who we are. Read once at startup and handed to each connection."""
    wallet: str
    username: str


def _session_path() -> str:
    if getattr(sys, 'frozen', False):
        base = os.path.dirname(sys.executable)
    else:
        # Two levels up from client/settings.py → project root
        base = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return os.path.join(base, 'session.json')


def load_session(path: str = None) -> Optional[SessionContext]:
    """Saved session, or None when no wallet is stored (user must log in)."""
    path = path or _session_path()
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError):
        return None
    if not isinstance(data, dict) or not data.get("wallet"):
        return None
    return SessionContext(wallet=str(data["wallet"]), username=str(data.get("username", "")))


def save_session(context: SessionContext, path: str = None) -> None:
    path = path or _session_path()
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump({"wallet": context.wallet, "username": context.username}, f, indent=2)


def create_session(username: str, path: str = None) -> SessionContext:
    """Mock login: generate a fresh wallet id and store it."""
    context = SessionContext(wallet=str(uuid.uuid4()), username=username)
    save_session(context, path)
    return context


def clear_session(path: str = None) -> None:
    path = path or _session_path()
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
