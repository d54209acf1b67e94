import asyncio
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

import aiohttp

from errors import LookupUnavailable

log = logging.getLogger(__name__)

DICTIONARY_URL = "https://api.dictionaryapi.dev/api/v2/entries/en/{word}"
TRANSLATE_URL = "https://api.mymemory.translated.net/get"


@dataclass
class Definition:
    definition: str
    example: Optional[str] = None


@dataclass
class Meaning:
    part_of_speech: str
    definitions: List[Definition] = field(default_factory=list)
    phonetic: Optional[str] = None


@dataclass
class PostGameDetails:
    word: str
    status: str
    guesses: List[str] = field(default_factory=list)
    meanings: List[Meaning] = field(default_factory=list)
    translation: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "PostGameDetails":
        meanings = [
            Meaning(part_of_speech=m["part_of_speech"],
                    definitions=[Definition(**x) for x in m.get("definitions", [])],
                    phonetic=m.get("phonetic"))
            for m in d.get("meanings", [])
        ]
        return cls(word=d["word"], status=d["status"], guesses=list(d.get("guesses", [])),
                   meanings=meanings, translation=d.get("translation"))


def _phonetic(entry: Dict[str, Any]) -> Optional[str]:
    if entry.get("phonetic"):
        return entry["phonetic"]
    for p in entry.get("phonetics") or []:
        if isinstance(p, dict) and p.get("text"):
            return p["text"]
    return None


def parse_entries(payload: Any) -> List[Meaning]:
    if not isinstance(payload, list):
        raise LookupUnavailable("unexpected dictionary payload")
    out: List[Meaning] = []
    for entry in payload:
        if not isinstance(entry, dict): continue
        phonetic = _phonetic(entry)
        for m in entry.get("meanings") or []:
            if not isinstance(m, dict): continue
            defs = [Definition(definition=d["definition"], example=d.get("example"))
                    for d in m.get("definitions") or [] if isinstance(d, dict) and d.get("definition")]
            if defs:
                out.append(Meaning(part_of_speech=m.get("partOfSpeech", ""), definitions=defs, phonetic=phonetic))
    return out


async def fetch_meanings(http: aiohttp.ClientSession, word: str) -> List[Meaning]:
    try:
        async with http.get(DICTIONARY_URL.format(word=word.lower())) as r:
            if r.status != 200:
                raise LookupUnavailable(f"dictionary returned HTTP {r.status}")
            payload = await r.json(content_type=None)
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
        raise LookupUnavailable(f"dictionary lookup failed: {e}") from e
    return parse_entries(payload)


async def fetch_translation(http: aiohttp.ClientSession, word: str, langpair: str) -> str:
    try:
        async with http.get(TRANSLATE_URL, params={"q": word.lower(), "langpair": langpair}) as r:
            if r.status != 200:
                raise LookupUnavailable(f"translation returned HTTP {r.status}")
            payload = await r.json(content_type=None)
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
        raise LookupUnavailable(f"translation lookup failed: {e}") from e
    data = payload.get("responseData") if isinstance(payload, dict) else None
    text = data.get("translatedText") if isinstance(data, dict) else None
    if not text or not isinstance(text, str):
        raise LookupUnavailable("translation missing from response")
    return text


async def fetch_details(word: str, status: str, guesses: List[str], langpair: str = "en|es",
                        timeout: float = 5) -> PostGameDetails:
    details = PostGameDetails(word=word.upper(), status=status, guesses=list(guesses))
    async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=timeout)) as http:
        try:
            details.meanings = await fetch_meanings(http, word)
        except LookupUnavailable as e:
            log.debug("No definitions for %s: %s", word, e)
        if langpair:
            try:
                details.translation = await fetch_translation(http, word, langpair)
            except LookupUnavailable as e:
                log.debug("No translation for %s: %s", word, e)
    return details


def render_details(details: PostGameDetails, max_meanings: int = 3, max_defs: int = 2) -> str:
    lines = [f"📖 {details.word}"]
    if details.meanings and details.meanings[0].phonetic:
        lines[0] += f"  {details.meanings[0].phonetic}"
    for m in details.meanings[:max_meanings]:
        lines.append(f"_{m.part_of_speech}_" if m.part_of_speech else "")
        for i, d in enumerate(m.definitions[:max_defs], 1):
            lines.append(f"{i}. {d.definition}")
            if d.example:
                lines.append(f"   “{d.example}”")
    if details.translation:
        lines.append(f"🌐 {details.translation}")
    if len(lines) == 1:
        lines.append("Definition not available.")
    return "\n".join(l for l in lines if l)
