from __future__ import annotations

from ..game.models import Member, Room, VoteOutcome

# Client -> server
CREATE_ROOM_CODE = "createRoomCode"
JOIN_ROOM = "joinRoom"
LEAVE_ROOM = "leaveRoom"
START_GAME = "startGame"
RESET_GAME = "resetGame"
READY_TO_VOTE = "readyToVote"
CAST_VOTE = "castVote"

# Server -> client
ROOM_CODE_CREATED = "roomCodeCreated"
LOBBY_UPDATE = "lobbyUpdate"
GAME_STARTED = "gameStarted"
GAME_RESET = "gameReset"
READY_COUNT = "readyCount"
VOTING_STARTED = "votingStarted"
VOTE_PROGRESS = "voteProgress"
VOTING_ENDED = "votingEnded"


def players_list(room: Room) -> list[dict]:
    return [{"id": m.id, "name": m.name} for m in room.members.values()]


def lobby_snapshot(room: Room) -> dict:
    """Complete public view of a room; never includes roles or the word."""
    return {
        "roomCode": room.code,
        "players": players_list(room),
        "hostId": room.host_id,
        "started": room.started,
    }


def game_started(room: Room, member: Member) -> dict:
    word = room.word or ""
    return {
        "role": "impostor" if member.is_outsider else "crewmate",
        "word": None if member.is_outsider else word,
        "wordLength": len(word),
    }


def game_reset(room: Room, reason: str | None = None) -> dict:
    payload = {"roomCode": room.code}
    if reason:
        payload["reason"] = reason
    return payload


def ready_count(count: int, required: int) -> dict:
    return {"count": count, "required": required}


def voting_started(room: Room, self_vote_allowed: bool = True) -> dict:
    payload = {
        "roomCode": room.code,
        "players": players_list(room),
        "selfVoteAllowed": self_vote_allowed,
    }
    if room.voting_ends_at_ms is not None:
        payload["endsAtMs"] = room.voting_ends_at_ms
    return payload


def vote_progress(voted: int, total: int) -> dict:
    return {"voted": voted, "total": total}


def voting_ended(room: Room, outcome: VoteOutcome) -> dict:
    return {
        "roomCode": room.code,
        "winnerId": outcome.winner_id,
        "winnerName": outcome.winner_name,
        "isImpostor": outcome.is_outsider,
        "tally": dict(outcome.tally),
    }
