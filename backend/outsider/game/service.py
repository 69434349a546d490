from __future__ import annotations

import random
import time

from ..logging_setup import get_logger
from . import errors
from .models import (
    Departure,
    GameSettings,
    Member,
    Phase,
    ReadyResult,
    Room,
    VoteOutcome,
    VoteResult,
)
from .words import resolve_word

logger = get_logger(__name__)

_DEFAULT_SETTINGS = GameSettings()


def now_ms() -> int:
    return int(time.time() * 1000)


def majority(member_count: int) -> int:
    return member_count // 2 + 1


def _require_member(room: Room, participant_id: str) -> Member:
    member = room.members.get(participant_id)
    if member is None:
        raise errors.NotInRoom()
    return member


def _require_host(room: Room, participant_id: str) -> None:
    if participant_id != room.host_id:
        raise errors.AuthorizationError()


def _promote_host(room: Room) -> bool:
    if room.host_id in room.members:
        return False
    # Earliest remaining member by join order.
    room.host_id = next(iter(room.members), None)
    return True


def _clear_votes(room: Room) -> None:
    room.ready_set = set()
    room.votes = {}
    room.voted_set = set()
    room.departed = {}
    room.voting_ends_at_ms = None


def _reset_to_lobby(room: Room) -> None:
    room.phase = Phase.LOBBY
    room.word = None
    for m in room.members.values():
        m.is_outsider = False
    _clear_votes(room)


# Membership


def join(
    room: Room,
    participant_id: str,
    name: str,
    settings: GameSettings = _DEFAULT_SETTINGS,
) -> Member:
    if room.phase != Phase.LOBBY:
        raise errors.RoundInProgress()

    n = (name or "").strip()[: settings.name_max_length].strip()
    if not n:
        raise errors.InvalidName()

    member = room.members.get(participant_id)
    if member is None:
        member = Member(id=participant_id, name=n)
        room.members[participant_id] = member
    else:
        member.name = n

    if room.host_id not in room.members:
        room.host_id = participant_id

    logger.info("%s joined room %s as %r (%d members)", participant_id, room.code, n, len(room.members))
    return member


def depart(
    room: Room,
    participant_id: str,
    settings: GameSettings = _DEFAULT_SETTINGS,
) -> Departure:
    """Remove a member who left or disconnected and reconcile the room.

    Votes already cast for the departing member stay in the tally.
    """
    member = room.members.pop(participant_id, None)
    if member is None:
        return Departure(was_member=False)

    logger.info("%s left room %s (%d members remain)", participant_id, room.code, len(room.members))

    if not room.members:
        return Departure(was_member=True, room_destroyed=True)

    result = Departure(was_member=True, host_changed=_promote_host(room))
    room.ready_set.discard(participant_id)
    room.voted_set.discard(participant_id)

    if room.phase == Phase.VOTING:
        room.departed[participant_id] = member
        top = max(room.votes.values(), default=0)
        if top >= majority(len(room.members)) or len(room.voted_set) >= len(room.members):
            result.outcome = conclude_voting(room)

    # The outcome above is still announced before the reset.
    if member.is_outsider and room.phase != Phase.LOBBY:
        _reset_to_lobby(room)
        result.reset_reason = "outsider_left"
        logger.info("room %s reset: outsider left", room.code)
        return result

    if room.phase == Phase.ROUND and result.outcome is None:
        result.ready = _check_ready_quorum(room, settings)

    return result


# Round setup


def start_round(
    room: Room,
    actor_id: str,
    custom_word: str | None = None,
    settings: GameSettings = _DEFAULT_SETTINGS,
    rng: random.Random | None = None,
) -> str:
    """Pick the word and the outsider; returns the outsider's id."""
    _require_host(room, actor_id)
    if room.phase != Phase.LOBBY:
        raise errors.RoundInProgress("The game has already started.")
    if len(room.members) < settings.min_players:
        raise errors.NotEnoughPlayers(f"You need at least {settings.min_players} players.")

    rng = rng or random
    word = resolve_word(custom_word, settings.word_max_length, rng=rng)
    outsider_id = rng.choice(list(room.members))

    for pid, m in room.members.items():
        m.is_outsider = pid == outsider_id
    room.word = word
    room.phase = Phase.ROUND
    _clear_votes(room)

    logger.info("room %s round started (%d players)", room.code, len(room.members))
    return outsider_id


def reset_game(room: Room, actor_id: str) -> None:
    _require_host(room, actor_id)
    _reset_to_lobby(room)
    logger.info("room %s reset by host", room.code)


# Voting


def _check_ready_quorum(room: Room, settings: GameSettings) -> ReadyResult:
    result = ReadyResult(count=len(room.ready_set), required=majority(len(room.members)))
    if result.count >= result.required:
        _begin_voting(room, settings)
        result.voting_started = True
    return result


def _begin_voting(room: Room, settings: GameSettings) -> None:
    room.phase = Phase.VOTING
    room.votes = {}
    room.voted_set = set()
    room.departed = {}
    room.vote_cycle += 1
    if settings.vote_timeout_sec > 0:
        room.voting_ends_at_ms = now_ms() + settings.vote_timeout_sec * 1000
    else:
        room.voting_ends_at_ms = None
    logger.info("room %s voting started (cycle %d)", room.code, room.vote_cycle)


def mark_ready(
    room: Room,
    participant_id: str,
    settings: GameSettings = _DEFAULT_SETTINGS,
) -> ReadyResult:
    if room.phase != Phase.ROUND:
        raise errors.PhaseError()
    _require_member(room, participant_id)

    room.ready_set.add(participant_id)
    return _check_ready_quorum(room, settings)


def cast_vote(
    room: Room,
    voter_id: str,
    target_id: str,
    settings: GameSettings = _DEFAULT_SETTINGS,
) -> VoteResult:
    if room.phase != Phase.VOTING:
        raise errors.PhaseError("Voting is not in progress.")
    _require_member(room, voter_id)
    if target_id not in room.members:
        raise errors.InvalidTarget()
    if voter_id in room.voted_set:
        raise errors.AlreadyVoted()
    if not settings.allow_self_vote and voter_id == target_id:
        raise errors.SelfVoteNotAllowed()

    room.voted_set.add(voter_id)
    room.votes[target_id] = room.votes.get(target_id, 0) + 1

    result = VoteResult(voted=len(room.voted_set), total=len(room.members))
    if room.votes[target_id] >= majority(len(room.members)) or result.voted >= result.total:
        result.outcome = conclude_voting(room)
    return result


def tally_winner(votes: dict[str, int]) -> str | None:
    """Unique holder of the highest count, or None on a tie at the top."""
    if not votes:
        return None
    top = max(votes.values())
    leaders = [pid for pid, count in votes.items() if count == top]
    if len(leaders) != 1:
        return None
    return leaders[0]


def conclude_voting(room: Room) -> VoteOutcome:
    tally = dict(room.votes)
    winner_id = tally_winner(tally)
    winner = None
    if winner_id is not None:
        winner = room.members.get(winner_id) or room.departed.get(winner_id)

    outcome = VoteOutcome(
        winner_id=winner_id,
        winner_name=winner.name if winner else None,
        is_outsider=winner.is_outsider if winner else None,
        tally=tally,
    )

    room.phase = Phase.ROUND
    _clear_votes(room)

    logger.info("room %s voting ended: winner=%s tally=%s", room.code, winner_id, tally)
    return outcome


def expire_vote(room: Room, vote_cycle: int) -> VoteOutcome | None:
    """Conclude a vote whose deadline passed, if it is still the same vote."""
    if room.phase != Phase.VOTING or room.vote_cycle != vote_cycle:
        return None
    logger.info("room %s vote cycle %d timed out", room.code, vote_cycle)
    return conclude_voting(room)
