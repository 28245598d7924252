"""Shared fixtures: a manual clock and an in-memory network."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from shared.protocol import decode_message
from client.settings import SessionContext


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeNetwork:
    """Stands in for NetworkClient: frames are pushed by the test, sends are recorded."""

    def __init__(self):
        self.incoming = []
        self.sent = []
        self.uri = None
        self.status = "Idle"
        self.closed = False
        self.disconnects = 0

    def connect(self, uri):
        self.uri = uri
        self.status = "Connected"

    def push(self, msg):
        self.incoming.append(msg)

    def push_raw(self, raw: str):
        msg = decode_message(raw)
        if msg is not None:
            self.incoming.append(msg)

    def drop(self):
        self.closed = True
        self.status = "Disconnected"

    def send(self, command):
        self.sent.append(command)

    def poll_all(self):
        messages, self.incoming = self.incoming, []
        return messages

    def disconnect(self):
        self.disconnects += 1
        self.drop()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def network():
    return FakeNetwork()


@pytest.fixture()
def context():
    return SessionContext(wallet="wallet-b", username="Bob")
