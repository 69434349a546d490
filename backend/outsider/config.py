import os


def as_bool(value: object) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes")
    return bool(value)


def _env_bool(name: str, default: str) -> bool:
    return as_bool(os.environ.get(name, default))


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")

    # CORS
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Reverse proxy / IP headers
    TRUST_PROXY_HEADERS = _env_bool("TRUST_PROXY_HEADERS", "1")

    # Socket.IO ("" = pick per platform, see server.create_app)
    SOCKETIO_ASYNC_MODE = os.environ.get("SOCKETIO_ASYNC_MODE", "").strip()

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Rooms
    ROOM_CODE_LENGTH = int(os.environ.get("ROOM_CODE_LENGTH", "6"))
    NAME_MAX_LENGTH = int(os.environ.get("NAME_MAX_LENGTH", "24"))
    WORD_MAX_LENGTH = int(os.environ.get("WORD_MAX_LENGTH", "48"))

    # Game
    MIN_PLAYERS = int(os.environ.get("MIN_PLAYERS", "3"))
    ALLOW_SELF_VOTE = _env_bool("ALLOW_SELF_VOTE", "1")
    # 0 disables the timeout; votes then stay open until quorum or departures.
    VOTE_TIMEOUT_SEC = int(os.environ.get("VOTE_TIMEOUT_SEC", "0"))
