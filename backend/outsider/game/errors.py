from __future__ import annotations


class GameError(Exception):
    """A rejected player action. Carries a stable code for the client ack."""

    code = "error"
    message = "Action rejected."

    def __init__(self, message: str | None = None, code: str | None = None) -> None:
        if code:
            self.code = code
        if message:
            self.message = message
        super().__init__(self.message)

    def to_ack(self) -> dict:
        return {"ok": False, "error": self.code, "message": self.message}


# Validation

class ValidationError(GameError):
    code = "invalid_payload"
    message = "Missing or malformed data."


class InvalidRoomCode(ValidationError):
    code = "invalid_room_code"
    message = "Room code is malformed."


class InvalidName(ValidationError):
    code = "invalid_name"
    message = "Name is required."


class SelfVoteNotAllowed(ValidationError):
    code = "self_vote_not_allowed"
    message = "You cannot vote for yourself."


# Authorization

class AuthorizationError(GameError):
    code = "only_host"
    message = "Only the host can do that."


# Phase

class PhaseError(GameError):
    code = "wrong_phase"
    message = "Not allowed in this phase."


class RoundInProgress(PhaseError):
    code = "round_in_progress"
    message = "A round is in progress. Wait for the next one."


class NotEnoughPlayers(PhaseError):
    code = "not_enough_players"
    message = "Not enough players to start."


# Not found

class NotFoundError(GameError):
    code = "not_found"
    message = "Not found."


class RoomNotFound(NotFoundError):
    code = "room_not_found"
    message = "Room does not exist."


class NotInRoom(NotFoundError):
    code = "not_in_room"
    message = "You are not in this room."


class InvalidTarget(NotFoundError):
    code = "invalid_target"
    message = "Invalid vote target."


# Conflict

class ConflictError(GameError):
    code = "conflict"
    message = "Conflicting action."


class AlreadyVoted(ConflictError):
    code = "already_voted"
    message = "You have already voted."
