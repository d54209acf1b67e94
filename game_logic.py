from __future__ import annotations
from enum import Enum, IntEnum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
import random

from errors import IllegalWord, InputRejected
from utils import WORD_LENGTH, is_legal_guess

MAX_ATTEMPTS = 6
ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

GREEN, YELLOW, GREY = "🟩", "🟨", "⬛"


class Mark(IntEnum):
    # ordered by priority, the keyboard keeps the highest one seen
    ABSENT = 1
    PRESENT = 2
    EXACT = 3

    @property
    def tile(self) -> str:
        return {Mark.EXACT: GREEN, Mark.PRESENT: YELLOW, Mark.ABSENT: GREY}[self]


class GameStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    LOST = "lost"


def _counts(s: str) -> Dict[str, int]:
    c: Dict[str, int] = {}
    for ch in s: c[ch] = c.get(ch, 0) + 1
    return c


def classify(guess: str, secret: str) -> List[Mark]:
    guess, secret = guess.upper(), secret.upper()
    if len(guess) != len(secret):
        raise ValueError(f"guess {guess!r} and secret differ in length")
    marks: List[Optional[Mark]] = [None] * len(guess)
    inv = _counts(secret)
    for i, ch in enumerate(guess):
        if ch == secret[i]:
            marks[i] = Mark.EXACT
            inv[ch] -= 1
    for i, ch in enumerate(guess):
        if marks[i] is not None: continue
        if inv.get(ch, 0) > 0:
            marks[i] = Mark.PRESENT
            inv[ch] -= 1
        else:
            marks[i] = Mark.ABSENT
    return marks  # type: ignore[return-value]


def keyboard_state(history: Iterable[Optional[str]], secret: str) -> Dict[str, Mark]:
    state: Dict[str, Mark] = {}
    for guess in history:
        if not guess: continue
        for ch, mark in zip(guess.upper(), classify(guess, secret)):
            if mark > state.get(ch, 0):
                state[ch] = mark
    return state


def pick_secret(words: Sequence[str], rng: random.Random | None = None) -> str:
    if not words:
        raise ValueError("cannot pick a secret from an empty word list")
    return (rng or random).choice(list(words)).upper()


class Round:
    """One game against one secret word.

    ``guesses`` holds the submitted guesses in order; while the game is in
    progress it has exactly ``round`` entries, once it has ended it has
    ``round + 1``. ``composing`` is the row being typed.
    """

    def __init__(self, secret: str, words: Iterable[str], daily: bool = False):
        self.words = frozenset(w.lower() for w in words)
        self.daily = daily
        self._start(secret)
        # a stored daily word may come from another word list
        self.words |= {self.secret.lower()}

    def _start(self, secret: str):
        if len(secret) != WORD_LENGTH:
            raise ValueError(f"secret must have {WORD_LENGTH} letters")
        self.secret = secret.upper()
        self.round = 0
        self.composing = ""
        self.guesses: List[str] = []
        self.status = GameStatus.IN_PROGRESS

    @classmethod
    def restore(cls, secret: str, guesses: Sequence[str], daily: bool = True) -> "Round":
        """Rebuild a finished round from its guesses, without a word list."""
        r = cls(secret, (), daily=daily)
        guesses = [g.upper() for g in guesses]
        if not guesses or len(guesses) > MAX_ATTEMPTS:
            raise ValueError("a finished round has 1 to %d guesses" % MAX_ATTEMPTS)
        r.guesses = guesses
        r.round = len(guesses) - 1
        if guesses[-1] == r.secret:
            r.status = GameStatus.WON
        elif len(guesses) == MAX_ATTEMPTS:
            r.status = GameStatus.LOST
        else:
            raise ValueError("guesses do not describe a finished round")
        return r

    @property
    def is_over(self) -> bool:
        return self.status is not GameStatus.IN_PROGRESS

    @property
    def attempts_used(self) -> int:
        return len(self.guesses)

    @property
    def history(self) -> Tuple[Optional[str], ...]:
        return tuple(self.guesses) + (None,) * (MAX_ATTEMPTS - len(self.guesses))

    def rows(self) -> List[Tuple[str, List[Mark]]]:
        return [(g, classify(g, self.secret)) for g in self.guesses]

    def keyboard(self) -> Dict[str, Mark]:
        return keyboard_state(self.guesses, self.secret)

    def _require_in_progress(self):
        if self.is_over:
            raise InputRejected("The game is over.")

    def append_letter(self, c: str):
        self._require_in_progress()
        if len(c) != 1 or c.upper() not in ALPHABET:
            raise InputRejected(f"Not a letter: {c!r}")
        if len(self.composing) >= WORD_LENGTH:
            raise InputRejected("The row is full.")
        self.composing += c.upper()

    def delete_letter(self):
        self._require_in_progress()
        self.composing = self.composing[:-1]

    def submit_guess(self) -> List[Mark]:
        self._require_in_progress()
        guess = self.composing
        if len(guess) != WORD_LENGTH:
            raise InputRejected(f"Not enough letters, need {WORD_LENGTH}.")
        if not is_legal_guess(guess, self.words):
            raise IllegalWord(guess)
        self.guesses.append(guess)
        marks = classify(guess, self.secret)
        if guess == self.secret:
            self.status = GameStatus.WON
        elif self.round == MAX_ATTEMPTS - 1:
            self.status = GameStatus.LOST
        else:
            self.round += 1
            self.composing = ""
        return marks

    def type_word(self, word: str) -> List[Mark]:
        self._require_in_progress()
        previous = self.composing
        self.composing = ""
        try:
            for ch in word.strip():
                self.append_letter(ch)
            return self.submit_guess()
        except (IllegalWord, InputRejected):
            self.composing = previous
            raise

    def reset(self, rng: random.Random | None = None):
        if self.daily:
            raise InputRejected("The daily puzzle can't be reset.")
        self._start(pick_secret(sorted(self.words), rng))
