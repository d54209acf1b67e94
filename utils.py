# utils.py
import asyncio
import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence, Tuple

import aiohttp

from errors import NetworkUnavailable

log = logging.getLogger(__name__)

WORD_LENGTH = 5
BLANK = "⬜"


def parse_wordlist(text: str, length: int = WORD_LENGTH) -> List[str]:
    seen, out = set(), []
    for line in text.splitlines():
        w = line.strip().lower()
        if len(w) != length or not w.isalpha() or w in seen: continue
        seen.add(w)
        out.append(w)
    return out


def load_wordlist(path: str, length: int = WORD_LENGTH) -> List[str]:
    with open(path, "r", encoding="utf-8") as f:
        return parse_wordlist(f.read(), length)


async def fetch_wordlist(url: str, timeout: float = 10, length: int = WORD_LENGTH) -> List[str]:
    try:
        async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=timeout)) as s:
            async with s.get(url) as r:
                if r.status != 200:
                    raise NetworkUnavailable(f"word list fetch returned HTTP {r.status}")
                text = await r.text()
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise NetworkUnavailable(f"word list unreachable: {e}") from e
    words = parse_wordlist(text, length)
    if not words:
        raise NetworkUnavailable("word list is empty")
    log.info("Fetched %d words from %s", len(words), url)
    return words


def is_legal_guess(word, words) -> bool:
    if not isinstance(word, str) or len(word) != WORD_LENGTH:
        return False
    return word.lower() in words


def today_key(tz: str = "utc", now: Optional[datetime] = None) -> str:
    if now is None:
        now = datetime.now(timezone.utc) if tz == "utc" else datetime.now()
    elif tz == "utc" and now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.strftime("%Y-%m-%d")


def render_history(rows: Iterable[Tuple[str, Sequence]], composing: Optional[str] = "", total: int = 6) -> str:
    """Board text: one line per submitted guess, then the typed row, then blanks."""
    lines = [f"{''.join(m.tile for m in marks)}  {guess.upper()}" for guess, marks in rows]
    if len(lines) < total and composing is not None:
        typed = composing.upper().ljust(WORD_LENGTH, "_")
        lines.append(f"{BLANK * WORD_LENGTH}  {typed}")
    while len(lines) < total:
        lines.append(BLANK * WORD_LENGTH)
    return "\n".join(lines)
