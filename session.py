from __future__ import annotations
import asyncio
import logging
import random
from typing import Awaitable, Callable, List, Optional

from daily import Puzzle
from game_logic import Mark, Round
from local_store import LocalStore, save_completion
from lookup import PostGameDetails, fetch_details

log = logging.getLogger(__name__)

Lookup = Callable[..., Awaitable[PostGameDetails]]


class GameSession:
    """A device's current game plus what happens when it ends.

    Input goes through ``press``/``guess_word`` one at a time. The first time
    the round reaches WON or LOST a daily game is recorded as completed and
    the dictionary/translation lookup starts in the background.
    """

    def __init__(self, device, rnd: Round, date_key: str, completions: Optional[LocalStore] = None,
                 lookup: Lookup = fetch_details, langpair: str = "en|es", timeout: float = 5):
        self.device = device
        self.round = rnd
        self.date_key = date_key
        self.completions = completions
        self.langpair = langpair
        self.timeout = timeout
        self._lookup = lookup
        self._lock = asyncio.Lock()
        self._finished = rnd.is_over
        self.details: Optional[PostGameDetails] = None
        self.lookup_task: Optional[asyncio.Task] = None

    @classmethod
    def start(cls, device, puzzle: Puzzle, **kw) -> "GameSession":
        return cls(device, Round(puzzle.word, puzzle.words, daily=puzzle.daily), puzzle.date_key, **kw)

    @classmethod
    def restored(cls, device, date_key: str, details: PostGameDetails) -> "GameSession":
        s = cls(device, Round.restore(details.word, details.guesses, daily=True), date_key)
        s.details = details
        return s

    @property
    def daily(self) -> bool:
        return self.round.daily

    async def press(self, key: str) -> Optional[List[Mark]]:
        key = key.upper()
        async with self._lock:
            if key == "ENTER":
                return self._submit(self.round.submit_guess)
            if key == "DEL":
                self.round.delete_letter()
            else:
                self.round.append_letter(key)
            return None

    async def guess_word(self, word: str) -> List[Mark]:
        async with self._lock:
            return self._submit(lambda: self.round.type_word(word))

    def _submit(self, submit) -> List[Mark]:
        marks = submit()
        log.debug("Device %s guessed %s (%d/%s)", self.device, self.round.guesses[-1],
                  self.round.attempts_used, self.round.status.value)
        if self.round.is_over and not self._finished:
            self._finish()
        return marks

    def _finish(self):
        self._finished = True
        r = self.round
        self.details = PostGameDetails(word=r.secret, status=r.status.value, guesses=list(r.guesses))
        log.info("Device %s finished %s: %s in %d", self.device,
                 "daily" if r.daily else "practice", r.status.value, r.attempts_used)
        self._record()
        self.lookup_task = asyncio.create_task(self._fetch_details())

    async def _fetch_details(self) -> PostGameDetails:
        r = self.round
        self.details = await self._lookup(r.secret, r.status.value, list(r.guesses),
                                          langpair=self.langpair, timeout=self.timeout)
        self._record()
        return self.details

    def _record(self):
        if self.daily and self.completions is not None and self.details is not None:
            save_completion(self.completions, self.device, self.date_key, self.details)

    def reset(self, rng: random.Random | None = None):
        self.round.reset(rng)
        self._finished = False
        self.details = None
        self.lookup_task = None
