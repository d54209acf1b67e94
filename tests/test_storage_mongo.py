import asyncio
from types import SimpleNamespace

import pytest
from pymongo.errors import DuplicateKeyError, PyMongoError, ServerSelectionTimeoutError

import storage_mongo
from errors import NetworkUnavailable

DAY = "2024-05-01"


class FakeDaily:
    """Stands in for the motor ``daily`` collection."""

    def __init__(self, docs=None, update_error=None, find_error=None, winner=None):
        self.docs = dict(docs or {})
        self.update_error = update_error
        self.find_error = find_error
        self.winner = winner
        self.updates = []

    async def find_one(self, query, projection=None):
        if self.find_error:
            raise self.find_error
        word = self.docs.get(query["date"])
        return {"word": word} if word else None

    async def update_one(self, query, update, upsert=False):
        self.updates.append((query, update, upsert))
        if self.update_error:
            if self.winner:
                self.docs[query["date"]] = self.winner
            raise self.update_error
        if query["date"] in self.docs:
            return SimpleNamespace(upserted_id=None)
        self.docs[query["date"]] = update["$setOnInsert"]["word"]
        return SimpleNamespace(upserted_id="new-id")


def _use(monkeypatch, daily):
    monkeypatch.setattr(storage_mongo, "_daily", daily)
    return daily


def test_new_record_returns_our_word(monkeypatch):
    daily = _use(monkeypatch, FakeDaily())
    assert asyncio.run(storage_mongo.create_daily_word(DAY, "crane")) == "crane"
    query, update, upsert = daily.updates[0]
    assert query == {"date": DAY} and upsert
    assert set(update) == {"$setOnInsert"}
    assert update["$setOnInsert"]["date"] == DAY
    assert update["$setOnInsert"]["timestamp"] is not None


def test_existing_record_wins(monkeypatch):
    _use(monkeypatch, FakeDaily({DAY: "slate"}))
    assert asyncio.run(storage_mongo.create_daily_word(DAY, "crane")) == "slate"


def test_duplicate_key_race_reads_winner_back(monkeypatch):
    _use(monkeypatch, FakeDaily(update_error=DuplicateKeyError("E11000 duplicate key"), winner="mouth"))
    assert asyncio.run(storage_mongo.create_daily_word(DAY, "crane")) == "mouth"


def test_update_failure_is_network_unavailable(monkeypatch):
    _use(monkeypatch, FakeDaily(update_error=PyMongoError("boom")))
    with pytest.raises(NetworkUnavailable):
        asyncio.run(storage_mongo.create_daily_word(DAY, "crane"))


def test_get_daily_word(monkeypatch):
    _use(monkeypatch, FakeDaily({DAY: "slate"}))
    assert asyncio.run(storage_mongo.get_daily_word(DAY)) == "slate"
    assert asyncio.run(storage_mongo.get_daily_word("2024-05-02")) is None


def test_get_failure_is_network_unavailable(monkeypatch):
    _use(monkeypatch, FakeDaily(find_error=ServerSelectionTimeoutError("no servers")))
    with pytest.raises(NetworkUnavailable):
        asyncio.run(storage_mongo.get_daily_word(DAY))


def test_unconnected_store_is_network_unavailable(monkeypatch):
    _use(monkeypatch, None)
    with pytest.raises(NetworkUnavailable):
        asyncio.run(storage_mongo.get_daily_word(DAY))
    with pytest.raises(NetworkUnavailable):
        asyncio.run(storage_mongo.create_daily_word(DAY, "crane"))


def test_init_db_requires_uri():
    with pytest.raises(RuntimeError):
        asyncio.run(storage_mongo.init_db(""))
