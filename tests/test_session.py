import asyncio

import pytest

from daily import Puzzle
from errors import IllegalWord, InputRejected
from game_logic import GameStatus, Mark
from local_store import LocalStore, is_completed, load_completion
from lookup import PostGameDetails
from session import GameSession

WORDS = ("crane", "slate", "mouth", "alert", "eerie", "pause", "leper")
DAY = "2024-05-01"


class FakeLookup:
    def __init__(self):
        self.calls = []

    async def __call__(self, word, status, guesses, langpair="en|es", timeout=5):
        self.calls.append((word, status, tuple(guesses)))
        return PostGameDetails(word=word, status=status, guesses=list(guesses), translation="grúa")


def _session(tmp_path, daily=True, lookup=None):
    store = LocalStore(str(tmp_path / "c.json"))
    puzzle = Puzzle(word="CRANE", words=WORDS, date_key=DAY, daily=daily)
    return GameSession.start(1, puzzle, completions=store, lookup=lookup or FakeLookup()), store


async def _type(sess, word):
    for ch in word:
        await sess.press(ch)
    return await sess.press("ENTER")


def test_keys_dispatch_to_the_round(tmp_path):
    async def run():
        sess, _ = _session(tmp_path)
        await sess.press("s")
        await sess.press("L")
        await sess.press("DEL")
        assert sess.round.composing == "S"
        with pytest.raises(InputRejected):
            await sess.press("ENTER")
    asyncio.run(run())


def test_win_records_completion_and_looks_up_once(tmp_path):
    lookup = FakeLookup()

    async def run():
        sess, store = _session(tmp_path, lookup=lookup)
        assert await _type(sess, "SLATE") == [Mark.ABSENT, Mark.ABSENT, Mark.EXACT, Mark.ABSENT, Mark.EXACT]
        assert sess.lookup_task is None
        await _type(sess, "CRANE")
        assert sess.round.status is GameStatus.WON
        # recorded before the lookup finishes
        assert is_completed(store, 1, DAY)
        details = await sess.lookup_task
        with pytest.raises(InputRejected):
            await sess.press("ENTER")
        return store, details

    store, details = asyncio.run(run())
    assert lookup.calls == [("CRANE", "won", ("SLATE", "CRANE"))]
    assert details.translation == "grúa"
    assert load_completion(store, 1, DAY).translation == "grúa"


def test_illegal_word_is_reported_and_state_kept(tmp_path):
    async def run():
        sess, _ = _session(tmp_path)
        with pytest.raises(IllegalWord):
            await sess.guess_word("qqzzz")
        assert sess.round.round == 0 and sess.round.guesses == []
    asyncio.run(run())


def test_loss_after_six_wrong_guesses(tmp_path):
    lookup = FakeLookup()

    async def run():
        sess, store = _session(tmp_path, lookup=lookup)
        for w in ["slate", "mouth", "alert", "eerie", "pause", "leper"]:
            await sess.guess_word(w)
        assert sess.round.status is GameStatus.LOST
        await sess.lookup_task
        return store

    store = asyncio.run(run())
    assert len(lookup.calls) == 1
    assert load_completion(store, 1, DAY).status == "lost"


def test_concurrent_submissions_count_one_round(tmp_path):
    async def run():
        sess, _ = _session(tmp_path)
        for ch in "SLATE":
            await sess.press(ch)
        results = await asyncio.gather(sess.press("ENTER"), sess.press("ENTER"), return_exceptions=True)
        assert sum(isinstance(r, list) for r in results) == 1
        assert sum(isinstance(r, InputRejected) for r in results) == 1
        assert sess.round.guesses == ["SLATE"]
    asyncio.run(run())


def test_practice_games_are_not_recorded_and_can_reset(tmp_path):
    async def run():
        sess, store = _session(tmp_path, daily=False)
        await sess.guess_word("crane")
        await sess.lookup_task
        assert not is_completed(store, 1, DAY)
        sess.reset()
        assert sess.round.status is GameStatus.IN_PROGRESS
        assert sess.details is None and sess.lookup_task is None
    asyncio.run(run())


def test_daily_session_cannot_reset(tmp_path):
    sess, _ = _session(tmp_path)
    with pytest.raises(InputRejected):
        sess.reset()


def test_restored_session_takes_no_input():
    details = PostGameDetails(word="CRANE", status="won", guesses=["SLATE", "CRANE"])

    async def run():
        sess = GameSession.restored(1, DAY, details)
        assert sess.round.status is GameStatus.WON
        assert sess.details is details
        with pytest.raises(InputRejected):
            await sess.press("A")
        with pytest.raises(InputRejected):
            sess.reset()
    asyncio.run(run())
