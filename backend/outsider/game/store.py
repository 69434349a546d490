from __future__ import annotations

import secrets
from contextlib import contextmanager
from threading import RLock
from typing import Iterator

from ..logging_setup import get_logger
from .errors import InvalidRoomCode, RoomNotFound
from .models import GameSettings, Room

logger = get_logger(__name__)

# No 0/O, 1/I: codes get read aloud and typed on phones.
CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"


def normalize_code(raw: object, length: int = 6) -> str:
    code = str(raw or "").strip().upper()
    if len(code) != length or not code.isascii() or not code.isalnum():
        raise InvalidRoomCode()
    return code


class RoomStore:
    """Registry of live rooms.

    The registry lock only guards the code -> room mapping. Room state is
    guarded by each room's own lock, taken through ``acquire``. A room is
    dropped as soon as an acquire block leaves it without members.
    """

    def __init__(self, settings: GameSettings | None = None) -> None:
        self.settings = settings or GameSettings()
        self._lock = RLock()
        self._rooms: dict[str, Room] = {}

    def new_code(self) -> str:
        length = self.settings.room_code_length
        with self._lock:
            code = "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))
            while code in self._rooms:
                code = "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))
            return code

    def get(self, code: str) -> Room | None:
        with self._lock:
            return self._rooms.get(code)

    def list_rooms(self) -> list[Room]:
        with self._lock:
            return list(self._rooms.values())

    def rooms_with_member(self, participant_id: str) -> list[Room]:
        with self._lock:
            return [r for r in self._rooms.values() if participant_id in r.members]

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)

    @contextmanager
    def acquire(self, code: str, create: bool = False) -> Iterator[Room]:
        """Yield the room for ``code`` with its lock held.

        Raises ``RoomNotFound`` unless ``create`` is set. If the room was
        destroyed between lookup and locking, the lookup is repeated.
        """
        while True:
            with self._lock:
                room = self._rooms.get(code)
                if room is None:
                    if not create:
                        raise RoomNotFound()
                    room = Room(code=code)
                    self._rooms[code] = room
                    logger.info("room %s created", code)

            with room.lock:
                if room.closed:
                    continue
                try:
                    yield room
                finally:
                    if not room.members:
                        self.discard(room)
                return

    @contextmanager
    def hold(self, room: Room) -> Iterator[Room | None]:
        """Lock a room already in hand; yields None if it has been destroyed."""
        with room.lock:
            if room.closed:
                yield None
                return
            try:
                yield room
            finally:
                if not room.members:
                    self.discard(room)

    def discard(self, room: Room) -> None:
        with room.lock:
            with self._lock:
                if self._rooms.get(room.code) is room:
                    del self._rooms[room.code]
                    logger.info("room %s destroyed", room.code)
            room.closed = True
