import logging
from datetime import datetime, timezone
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError

from errors import NetworkUnavailable

log = logging.getLogger(__name__)

_client: AsyncIOMotorClient | None = None
_db = None
_daily = None


async def init_db(uri: str, dbname: str = "wordquiz", timeout_ms: int = 10000):
    global _client, _db, _daily
    if not uri:
        raise RuntimeError("MONGO_URI not set")
    _client = AsyncIOMotorClient(uri, serverSelectionTimeoutMS=timeout_ms)
    _db = _client[dbname]
    _daily = _db["daily"]
    # one record per date; concurrent creators collide on this index
    await _daily.create_index([("date", ASCENDING)], unique=True)
    log.info("Connected to MongoDB database %s", dbname)


def _collection():
    if _daily is None:
        raise NetworkUnavailable("daily-word store is not connected")
    return _daily


async def get_daily_word(date_str: str) -> Optional[str]:
    try:
        d = await _collection().find_one({"date": date_str}, {"_id": 0, "word": 1})
    except PyMongoError as e:
        raise NetworkUnavailable(f"daily-word store unreachable: {e}") from e
    return d["word"] if d else None


async def create_daily_word(date_str: str, word: str) -> str:
    """Create the record for ``date_str`` unless one exists; return the stored word."""
    daily = _collection()
    try:
        res = await daily.update_one(
            {"date": date_str},
            {"$setOnInsert": {"word": word, "date": date_str, "timestamp": datetime.now(timezone.utc)}},
            upsert=True,
        )
        if res.upserted_id is not None:
            log.info("Created daily word record for %s", date_str)
            return word
    except DuplicateKeyError:
        log.info("Daily word for %s was created concurrently", date_str)
    except PyMongoError as e:
        raise NetworkUnavailable(f"daily-word store unreachable: {e}") from e
    stored = await get_daily_word(date_str)
    if stored is None:
        raise NetworkUnavailable(f"daily word for {date_str} vanished after create")
    return stored


async def close_db():
    global _client, _db, _daily
    if _client is not None:
        _client.close()
    _client = _db = _daily = None
