import asyncio
import logging
from typing import Dict, List, Optional, Tuple

from pymongo.errors import PyMongoError
from pyrogram import Client, filters, idle
from pyrogram.errors import MessageNotModified
from pyrogram.types import CallbackQuery, InlineKeyboardButton, InlineKeyboardMarkup, Message

import config
import storage_mongo as storage  # MongoDB backend for the shared daily word
from daily import FALLBACK_WORDS, Puzzle, practice_puzzle, resolve_todays_puzzle
from errors import IllegalWord, InputRejected, NetworkUnavailable
from game_logic import MAX_ATTEMPTS, GameStatus
from local_store import LocalStore, is_completed, load_completion
from lookup import render_details
from session import GameSession
from utils import fetch_wordlist, load_wordlist, render_history, today_key

log = logging.getLogger(__name__)

KEY_ROWS = ["QWERTYUIOP", "ASDFGHJKL", "ZXCVBNM"]
DAILY, PRACTICE = "d", "p"

completions = LocalStore(config.LOCAL_STORE_PATH)
sessions: Dict[Tuple[int, str], GameSession] = {}
_puzzles: Dict[str, Puzzle] = {}
_words: Optional[List[str]] = None

app = Client("wordquiz-bot", api_id=config.API_ID, api_hash=config.API_HASH, bot_token=config.BOT_TOKEN)


async def word_source() -> List[str]:
    global _words
    if _words is None:
        if config.WORDLIST_PATH:
            try:
                _words = load_wordlist(config.WORDLIST_PATH)
            except OSError as e:
                raise NetworkUnavailable(f"word list file unreadable: {e}") from e
        else:
            _words = await fetch_wordlist(config.WORDLIST_URL, timeout=config.HTTP_TIMEOUT)
    return _words


async def todays_puzzle() -> Puzzle:
    d = today_key(config.DATE_TZ)
    if d in _puzzles: return _puzzles[d]
    puzzle = await resolve_todays_puzzle(storage, word_source, d)
    if not puzzle.offline:
        _puzzles[d] = puzzle
    return puzzle


def new_session(device: int, puzzle: Puzzle) -> GameSession:
    return GameSession.start(device, puzzle, completions=completions,
                             langpair=config.TRANSLATE_LANGPAIR, timeout=config.HTTP_TIMEOUT)


def keyboard(sess: GameSession, mode: str) -> Optional[InlineKeyboardMarkup]:
    if sess.round.is_over: return None
    marks = sess.round.keyboard()
    def key(ch: str) -> InlineKeyboardButton:
        label = f"{marks[ch].tile}{ch}" if ch in marks else ch
        return InlineKeyboardButton(label, callback_data=f"k:{mode}:{ch}")
    rows = [[key(ch) for ch in row] for row in KEY_ROWS]
    rows.append([InlineKeyboardButton("⌫", callback_data=f"k:{mode}:DEL"),
                 InlineKeyboardButton("⏎ Enter", callback_data=f"k:{mode}:ENTER")])
    return InlineKeyboardMarkup(rows)


def board_text(sess: GameSession) -> str:
    r = sess.round
    if r.daily:
        title = f"📅 Today's WordQuiz — {sess.date_key}"
    else:
        title = "🎯 Practice mode"
    board = render_history(r.rows(), None if r.is_over else r.composing, MAX_ATTEMPTS)
    if r.status is GameStatus.WON:
        footer = f"🎉 Solved in {r.attempts_used}/{MAX_ATTEMPTS}!"
    elif r.status is GameStatus.LOST:
        footer = f"😢 Game over — the word was {r.secret}."
    else:
        footer = f"Attempt {r.round + 1}/{MAX_ATTEMPTS}"
    return f"{title}\n\n{board}\n\n{footer}"


def help_text() -> str:
    return ("Welcome to WordQuiz!\n"
            "/daily — today's puzzle, the same word for everyone, once per day.\n"
            "/practice — a random word you can replay.\n"
            "/reset — new practice word.\n"
            "/rules — rules.\n"
            "Type with the buttons, or just send a 5-letter word.")


@app.on_message(filters.command(["start", "help"]))
async def start_cmd(_, m: Message):
    await m.reply_text(help_text())


@app.on_message(filters.command("rules"))
async def rules_cmd(_, m: Message):
    await m.reply_text(
        "Rules:\n"
        f"- Guess the 5-letter word in {MAX_ATTEMPTS} attempts.\n"
        "- 🟩 right letter, right spot. 🟨 in the word, wrong spot. ⬛ not in the word.\n"
        "- Repeated letters are only marked as often as they occur in the word.\n"
        "- Guesses must be real words from the word list.\n"
        "- The daily word can be played once per day; practice as much as you like.\n"
    )


@app.on_message(filters.command("daily"))
async def daily_cmd(_, m: Message):
    device = m.from_user.id
    d = today_key(config.DATE_TZ)
    if is_completed(completions, device, d):
        details = load_completion(completions, device, d)
        if details is None:
            await m.reply_text("You already played today's puzzle. Come back tomorrow, or try /practice.")
            return
        sess = GameSession.restored(device, d, details)
        await m.reply_text(f"{board_text(sess)}\n\n{render_details(details)}")
        return
    sess = sessions.get((device, DAILY))
    if sess is None or sess.date_key != d or sess.round.is_over:
        puzzle = await todays_puzzle()
        if puzzle.offline:
            await m.reply_text("⚠️ Can't reach today's word right now, here's an offline practice game.")
            sess = new_session(device, puzzle)
            sessions[(device, PRACTICE)] = sess
            await m.reply_text(board_text(sess), reply_markup=keyboard(sess, PRACTICE))
            return
        sess = new_session(device, puzzle)
        sessions[(device, DAILY)] = sess
    await m.reply_text(board_text(sess), reply_markup=keyboard(sess, DAILY))


@app.on_message(filters.command("practice"))
async def practice_cmd(_, m: Message):
    device = m.from_user.id
    d = today_key(config.DATE_TZ)
    try:
        words = await word_source()
    except NetworkUnavailable as e:
        log.warning("Practice game with built-in words: %s", e)
        words = list(FALLBACK_WORDS)
    sess = new_session(device, practice_puzzle(words, d))
    sessions[(device, PRACTICE)] = sess
    await m.reply_text(board_text(sess), reply_markup=keyboard(sess, PRACTICE))


@app.on_message(filters.command("reset"))
async def reset_cmd(_, m: Message):
    sess = sessions.get((m.from_user.id, PRACTICE))
    if sess is None:
        await m.reply_text("The daily puzzle can't be reset. Use /practice for a fresh word.")
        return
    try:
        sess.reset()
    except InputRejected as e:
        await m.reply_text(f"{e.reason} Use /practice for a fresh word.")
        return
    await m.reply_text(board_text(sess), reply_markup=keyboard(sess, PRACTICE))


_background = set()


def spawn(coro):
    task = asyncio.create_task(coro)
    _background.add(task)
    task.add_done_callback(_background.discard)


async def send_summary(m: Message, sess: GameSession):
    if sess.lookup_task is None: return
    details = await sess.lookup_task
    await m.reply_text(render_details(details))


@app.on_callback_query(filters.regex(r"^k:[dp]:"))
async def key_pressed(_, cq: CallbackQuery):
    _, mode, key = cq.data.split(":", 2)
    sess = sessions.get((cq.from_user.id, mode))
    if sess is None:
        await cq.answer("No active game. Use /daily or /practice.")
        return
    try:
        await sess.press(key)
    except IllegalWord:
        await cq.answer("Not in word list")
        return
    except InputRejected as e:
        await cq.answer(e.reason)
        return
    await cq.answer()
    try:
        await cq.message.edit_text(board_text(sess), reply_markup=keyboard(sess, mode))
    except MessageNotModified:
        pass
    if key == "ENTER" and sess.round.is_over:
        spawn(send_summary(cq.message, sess))


@app.on_message(filters.text & ~filters.command(["start", "help", "rules", "daily", "practice", "reset"]))
async def plain_guess(_, m: Message):
    t = (m.text or "").strip()
    if len(t) != 5 or not t.isalpha(): return
    device = m.from_user.id
    for mode in (DAILY, PRACTICE):
        sess = sessions.get((device, mode))
        if sess is not None and not sess.round.is_over: break
    else:
        await m.reply_text("No active game. Use /daily or /practice.")
        return
    try:
        await sess.guess_word(t)
    except IllegalWord:
        await m.reply_text("❗Not in word list.")
        return
    except InputRejected as e:
        await m.reply_text(e.reason)
        return
    await m.reply_text(board_text(sess), reply_markup=keyboard(sess, mode))
    if sess.round.is_over:
        spawn(send_summary(m, sess))


async def main():
    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    try:
        await storage.init_db(config.MONGO_URI, config.MONGO_DB)
    except (RuntimeError, PyMongoError) as e:
        log.warning("Daily-word store unavailable, daily games will run offline: %s", e)
    await app.start()
    log.info("WordQuiz bot started")
    await idle()
    await app.stop()
    await storage.close_db()


if __name__ == "__main__":
    app.run(main())
