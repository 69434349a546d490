"""
Shared fixtures: a fresh store per test for the game core, and an app wired to
Socket.IO test clients (threading mode, no eventlet) for the realtime layer.
"""
from __future__ import annotations

import random

import pytest

from outsider.game import service
from outsider.game.models import GameSettings, Room
from outsider.game.store import RoomStore
from outsider.server import create_app


@pytest.fixture()
def settings() -> GameSettings:
    return GameSettings()


@pytest.fixture()
def store(settings: GameSettings) -> RoomStore:
    return RoomStore(settings)


@pytest.fixture()
def rng() -> random.Random:
    return random.Random(1234)


def make_room(count: int, code: str = "ABC123") -> Room:
    """A lobby room with members p0..p{count-1}; p0 is host."""
    room = Room(code=code)
    for i in range(count):
        service.join(room, f"p{i}", f"Player {i}")
    return room


@pytest.fixture()
def app_socketio():
    return create_app(
        {
            "TESTING": True,
            "SOCKETIO_ASYNC_MODE": "threading",
            "LOG_LEVEL": "WARNING",
        }
    )


@pytest.fixture()
def app(app_socketio):
    return app_socketio[0]


@pytest.fixture()
def connect(app_socketio):
    """Factory for connected Socket.IO test clients."""
    app, socketio = app_socketio
    clients = []

    def _connect():
        client = socketio.test_client(app)
        clients.append(client)
        return client

    yield _connect

    for client in clients:
        if client.is_connected():
            client.disconnect()


def drain(client) -> list[tuple[str, object]]:
    """Everything the client received since the last drain, as (event, payload)."""
    return [(pkt["name"], pkt["args"][0] if pkt["args"] else None) for pkt in client.get_received()]


def named(packets: list[tuple[str, object]], name: str) -> list:
    return [payload for event, payload in packets if event == name]
