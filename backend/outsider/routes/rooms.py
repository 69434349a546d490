from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from ..game.errors import InvalidRoomCode
from ..game.store import RoomStore, normalize_code
from ..realtime import events

bp = Blueprint("rooms", __name__)


def _store() -> RoomStore:
    return current_app.extensions["room_store"]


@bp.post("/rooms")
def create_room():
    # Code only; the room itself is created by the first join.
    return jsonify({"roomCode": _store().new_code()})


@bp.get("/rooms/<code>")
def get_room(code: str):
    store = _store()
    try:
        room_code = normalize_code(code, store.settings.room_code_length)
    except InvalidRoomCode as e:
        return jsonify({"error": e.code}), 400

    room = store.get(room_code)
    if not room:
        return jsonify({"error": "room_not_found"}), 404
    with store.hold(room) as held:
        if held is None:
            return jsonify({"error": "room_not_found"}), 404
        return jsonify(events.lobby_snapshot(held))
