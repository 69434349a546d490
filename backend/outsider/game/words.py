from __future__ import annotations

import random


DEFAULT_WORDS = [
    "bicycle",
    "tornado",
    "keyboard",
    "pizza",
    "stadium",
    "theater",
    "astronaut",
    "library",
    "jungle",
    "microphone",
    "bank",
    "castle",
    "ice cream",
    "robot",
    "bridge",
]


def pick_word(words: list[str] | None = None, rng: random.Random | None = None) -> str:
    pool = [w for w in (words or DEFAULT_WORDS) if w.strip()]
    if not pool:
        pool = DEFAULT_WORDS
    return (rng or random).choice(pool)


def resolve_word(
    custom_word: str | None,
    max_length: int,
    rng: random.Random | None = None,
) -> str:
    """Host's custom word wins when it is non-empty after trimming."""
    w = (custom_word or "").strip()[:max_length].strip()
    if w:
        return w
    return pick_word(rng=rng)
