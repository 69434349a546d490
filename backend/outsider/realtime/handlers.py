from __future__ import annotations

from typing import Any

from flask import request
from flask_socketio import SocketIO, emit

from ..game import service
from ..game.errors import GameError, InvalidName, RoomNotFound
from ..game.models import GameSettings, Room
from ..game.store import RoomStore, normalize_code
from ..logging_setup import get_logger
from . import events
from .broadcaster import RoomBroadcaster

logger = get_logger(__name__)


def _payload(data: Any) -> dict:
    return data if isinstance(data, dict) else {}


def register_socketio_handlers(socketio: SocketIO, store: RoomStore) -> RoomBroadcaster:
    settings: GameSettings = store.settings
    broadcaster = RoomBroadcaster(socketio, settings)

    def _room_code(payload: dict) -> str:
        return normalize_code(payload.get("roomCode"), settings.room_code_length)

    def _rejected(action: str, err: GameError) -> dict:
        logger.info("%s rejected for %s: %s", action, request.sid, err.code)
        return err.to_ack()

    def _schedule_vote_timeout(room: Room) -> None:
        if settings.vote_timeout_sec <= 0 or room.voting_ends_at_ms is None:
            return
        cycle = room.vote_cycle
        delay = max(0.0, (room.voting_ends_at_ms - service.now_ms()) / 1000)

        def _runner() -> None:
            socketio.sleep(delay)
            with store.hold(room) as held:
                if held is None:
                    return
                outcome = service.expire_vote(held, cycle)
                if outcome is not None:
                    broadcaster.voting_ended(held, outcome)
                    broadcaster.lobby_update(held)

        socketio.start_background_task(_runner)

    @socketio.on(events.CREATE_ROOM_CODE)
    def create_room_code(data=None):
        code = store.new_code()
        emit(events.ROOM_CODE_CREATED, code)
        return {"ok": True, "roomCode": code}

    @socketio.on(events.JOIN_ROOM)
    def join_room(data=None):
        payload = _payload(data)
        try:
            room_code = _room_code(payload)
            name = str(payload.get("name") or "").strip()
            if not name:
                raise InvalidName()

            with store.acquire(room_code, create=True) as room:
                service.join(room, request.sid, name, settings=settings)
                broadcaster.enter(request.sid, room)
                lobby = events.lobby_snapshot(room)
                broadcaster.lobby_update(room)
                return {
                    "ok": True,
                    "playerId": request.sid,
                    "isHost": room.host_id == request.sid,
                    "lobby": lobby,
                }
        except GameError as e:
            return _rejected(events.JOIN_ROOM, e)

    @socketio.on(events.LEAVE_ROOM)
    def leave_room(data=None):
        payload = _payload(data)
        try:
            room_code = _room_code(payload)
            with store.acquire(room_code) as room:
                result = service.depart(room, request.sid, settings=settings)
                broadcaster.exit(request.sid, room)
                broadcaster.departure(room, result)
                if result.ready is not None and result.ready.voting_started:
                    _schedule_vote_timeout(room)
        except RoomNotFound:
            pass
        except GameError as e:
            return _rejected(events.LEAVE_ROOM, e)
        return {"ok": True}

    @socketio.on(events.START_GAME)
    def start_game(data=None):
        payload = _payload(data)
        custom_word = payload.get("customWord")
        try:
            room_code = _room_code(payload)
            with store.acquire(room_code) as room:
                service.start_round(
                    room,
                    request.sid,
                    custom_word=str(custom_word) if custom_word is not None else None,
                    settings=settings,
                )
                broadcaster.game_started(room)
        except GameError as e:
            return _rejected(events.START_GAME, e)
        return {"ok": True}

    @socketio.on(events.RESET_GAME)
    def reset_game(data=None):
        payload = _payload(data)
        try:
            room_code = _room_code(payload)
            with store.acquire(room_code) as room:
                service.reset_game(room, request.sid)
                broadcaster.game_reset(room)
        except GameError as e:
            return _rejected(events.RESET_GAME, e)
        return {"ok": True}

    @socketio.on(events.READY_TO_VOTE)
    def ready_to_vote(data=None):
        payload = _payload(data)
        try:
            room_code = _room_code(payload)
            with store.acquire(room_code) as room:
                result = service.mark_ready(room, request.sid, settings=settings)
                broadcaster.ready(room, result)
                if result.voting_started:
                    _schedule_vote_timeout(room)
        except GameError as e:
            return _rejected(events.READY_TO_VOTE, e)
        return {"ok": True}

    @socketio.on(events.CAST_VOTE)
    def cast_vote(data=None):
        payload = _payload(data)
        target_id = str(payload.get("targetId") or "")
        try:
            room_code = _room_code(payload)
            with store.acquire(room_code) as room:
                result = service.cast_vote(room, request.sid, target_id, settings=settings)
                broadcaster.vote_progress(room, result.voted, result.total)
                if result.outcome is not None:
                    broadcaster.voting_ended(room, result.outcome)
                    broadcaster.lobby_update(room)
        except GameError as e:
            return _rejected(events.CAST_VOTE, e)
        return {"ok": True}

    @socketio.on("disconnect")
    def on_disconnect(reason=None):
        sid = request.sid
        for r in store.rooms_with_member(sid):
            with store.hold(r) as room:
                if room is None:
                    continue
                result = service.depart(room, sid, settings=settings)
                broadcaster.departure(room, result)
                if result.ready is not None and result.ready.voting_started:
                    _schedule_vote_timeout(room)

    return broadcaster
