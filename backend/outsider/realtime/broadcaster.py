from __future__ import annotations

from flask_socketio import SocketIO

from ..game.models import Departure, GameSettings, ReadyResult, Room, VoteOutcome
from ..logging_setup import get_logger
from . import events

logger = get_logger(__name__)


class RoomBroadcaster:
    """Fans room state out to connected members.

    Each room code doubles as a Socket.IO room, so ``to=room.code`` reaches
    every member. Every announcement ends with a full lobby snapshot when the
    membership or phase changed; clients can resync from any one of them.
    """

    def __init__(self, socketio: SocketIO, settings: GameSettings, namespace: str = "/") -> None:
        self.socketio = socketio
        self.settings = settings
        self.namespace = namespace

    def enter(self, sid: str, room: Room) -> None:
        self.socketio.server.enter_room(sid, room.code, namespace=self.namespace)

    def exit(self, sid: str, room: Room) -> None:
        self.socketio.server.leave_room(sid, room.code, namespace=self.namespace)

    def to_room(self, room: Room, event: str, payload=None) -> None:
        self.socketio.emit(event, payload, to=room.code, namespace=self.namespace)

    def to_member(self, sid: str, event: str, payload=None) -> None:
        self.socketio.emit(event, payload, to=sid, namespace=self.namespace)

    def lobby_update(self, room: Room) -> None:
        if room.closed or not room.members:
            return
        self.to_room(room, events.LOBBY_UPDATE, events.lobby_snapshot(room))

    def game_started(self, room: Room) -> None:
        # Roles and the word go to each member privately.
        for sid, member in room.members.items():
            self.to_member(sid, events.GAME_STARTED, events.game_started(room, member))
        self.lobby_update(room)

    def game_reset(self, room: Room, reason: str | None = None) -> None:
        self.to_room(room, events.GAME_RESET, events.game_reset(room, reason))
        self.lobby_update(room)

    def ready(self, room: Room, result: ReadyResult) -> None:
        self.to_room(room, events.READY_COUNT, events.ready_count(result.count, result.required))
        if result.voting_started:
            self.to_room(room, events.VOTING_STARTED, events.voting_started(room, self.settings.allow_self_vote))

    def vote_progress(self, room: Room, voted: int, total: int) -> None:
        self.to_room(room, events.VOTE_PROGRESS, events.vote_progress(voted, total))

    def voting_ended(self, room: Room, outcome: VoteOutcome) -> None:
        self.to_room(room, events.VOTING_ENDED, events.voting_ended(room, outcome))

    def departure(self, room: Room, result: Departure) -> None:
        if not result.was_member or result.room_destroyed:
            return
        if result.outcome is not None:
            self.voting_ended(room, result.outcome)
        if result.reset_reason:
            self.game_reset(room, result.reset_reason)
            return
        if result.ready is not None:
            self.ready(room, result.ready)
        self.lobby_update(room)
