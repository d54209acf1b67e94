from __future__ import annotations
import logging
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Protocol, Tuple

from errors import NetworkUnavailable
from game_logic import pick_secret

log = logging.getLogger(__name__)

FALLBACK_WORDS: Tuple[str, ...] = ("react", "hooks", "games", "coder", "pixel")


class DailyStore(Protocol):
    async def get_daily_word(self, date_str: str) -> Optional[str]: ...
    async def create_daily_word(self, date_str: str, word: str) -> str: ...


@dataclass(frozen=True)
class Puzzle:
    word: str
    words: Tuple[str, ...]
    date_key: str
    daily: bool = True
    offline: bool = False


async def resolve_todays_word(store: DailyStore, words: List[str], date_key: str,
                              rng: random.Random | None = None) -> str:
    exist = await store.get_daily_word(date_key)
    if exist: return exist.upper()
    secret = pick_secret(words, rng)
    # the store decides the winner if another client raced us here
    stored = await store.create_daily_word(date_key, secret.lower())
    return stored.upper()


async def resolve_todays_puzzle(store: DailyStore, word_source: Callable[[], Awaitable[List[str]]],
                                date_key: str, rng: random.Random | None = None) -> Puzzle:
    try:
        words = await word_source()
        word = await resolve_todays_word(store, words, date_key, rng)
        return Puzzle(word=word, words=tuple(words), date_key=date_key)
    except NetworkUnavailable as e:
        log.warning("Falling back to the built-in word list: %s", e)
        return offline_puzzle(date_key, rng)


def offline_puzzle(date_key: str, rng: random.Random | None = None) -> Puzzle:
    return Puzzle(word=pick_secret(FALLBACK_WORDS, rng), words=FALLBACK_WORDS,
                  date_key=date_key, daily=False, offline=True)


def practice_puzzle(words: List[str], date_key: str, rng: random.Random | None = None) -> Puzzle:
    return Puzzle(word=pick_secret(words, rng), words=tuple(words), date_key=date_key, daily=False)
