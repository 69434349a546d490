from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from threading import RLock
from typing import Any, Mapping

from ..config import as_bool


class Phase(str, Enum):
    LOBBY = "lobby"
    ROUND = "round"
    VOTING = "voting"


@dataclass(frozen=True)
class GameSettings:
    """Rule knobs the game core needs, lifted out of the Flask config."""

    room_code_length: int = 6
    name_max_length: int = 24
    word_max_length: int = 48
    min_players: int = 3
    allow_self_vote: bool = True
    vote_timeout_sec: int = 0

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "GameSettings":
        return cls(
            room_code_length=int(config.get("ROOM_CODE_LENGTH", 6)),
            name_max_length=int(config.get("NAME_MAX_LENGTH", 24)),
            word_max_length=int(config.get("WORD_MAX_LENGTH", 48)),
            min_players=int(config.get("MIN_PLAYERS", 3)),
            allow_self_vote=as_bool(config.get("ALLOW_SELF_VOTE", True)),
            vote_timeout_sec=int(config.get("VOTE_TIMEOUT_SEC", 0)),
        )


@dataclass
class Member:
    id: str
    name: str
    is_outsider: bool = False


@dataclass
class Room:
    code: str
    host_id: str | None = None
    phase: Phase = Phase.LOBBY
    word: str | None = None
    members: dict[str, Member] = field(default_factory=dict)
    ready_set: set[str] = field(default_factory=set)
    votes: dict[str, int] = field(default_factory=dict)
    voted_set: set[str] = field(default_factory=set)
    vote_cycle: int = 0
    voting_ends_at_ms: int | None = None
    # Members who left mid-vote; an outcome may still need their name and role.
    departed: dict[str, Member] = field(default_factory=dict)
    closed: bool = False
    lock: RLock = field(default_factory=RLock, repr=False, compare=False)

    @property
    def started(self) -> bool:
        return self.phase != Phase.LOBBY

    @property
    def outsider_id(self) -> str | None:
        for m in self.members.values():
            if m.is_outsider:
                return m.id
        return None


@dataclass
class VoteOutcome:
    winner_id: str | None
    winner_name: str | None
    is_outsider: bool | None
    tally: dict[str, int]


@dataclass
class ReadyResult:
    count: int
    required: int
    voting_started: bool = False


@dataclass
class VoteResult:
    voted: int
    total: int
    outcome: VoteOutcome | None = None


@dataclass
class Departure:
    """What happened to a room after one of its members went away."""

    was_member: bool
    room_destroyed: bool = False
    host_changed: bool = False
    reset_reason: str | None = None
    ready: ReadyResult | None = None
    outcome: VoteOutcome | None = None
