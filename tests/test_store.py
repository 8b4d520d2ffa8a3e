"""Tests for the SQLite promotion store."""

import sqlite3
from unittest.mock import AsyncMock

import pytest

from core.exceptions import PersistenceError
from database import PromotionStore, VisitAttempt, WinnerRecord, init_db_pool, open_store


def _attempt(attempt_id, location_id="alpha", is_winner=False, **overrides):
    fields = {
        "id": attempt_id,
        "location_id": location_id,
        "access_time": "2025-05-01T10:00:00.000Z",
        "ip": "10.0.0.1",
        "user_agent": "pytest",
        "timestamp": f"2025-05-01T10:00:{attempt_id % 60:02d}.000Z",
        "is_winner": is_winner,
    }
    fields.update(overrides)
    return VisitAttempt(**fields)


@pytest.mark.asyncio
async def test_reads_before_any_write_are_empty(store):
    assert await store.winners.get_all() == {}
    assert await store.winners.get("alpha") is None
    assert await store.visit_logs.recent(100) == []
    assert await store.visit_logs.count() == 0
    assert await store.visit_logs.oldest_id() is None
    assert await store.max_attempt_id() == 0


@pytest.mark.asyncio
async def test_insert_if_absent_keeps_first_record(store):
    first = WinnerRecord.from_attempt(_attempt(1, is_winner=True))
    second = WinnerRecord.from_attempt(_attempt(2, is_winner=True, ip="10.0.0.2"))

    assert await store.winners.insert_if_absent(first) is True
    assert await store.winners.insert_if_absent(second) is False

    assert await store.winners.get("alpha") == first
    assert await store.winners.count() == 1


@pytest.mark.asyncio
async def test_visit_log_round_trips_nullable_fields(store):
    attempt = _attempt(7, location_id="beta", access_time=None, user_agent=None, is_winner=True)
    await store.visit_logs.append(attempt, retention=10)

    assert await store.visit_logs.recent(10) == [attempt]
    assert await store.visit_logs.contains(7)
    assert not await store.visit_logs.contains(8)


@pytest.mark.asyncio
async def test_append_evicts_oldest_beyond_retention(store):
    for attempt_id in range(1, 8):
        await store.visit_logs.append(_attempt(attempt_id), retention=5)

    remaining = await store.visit_logs.all()
    assert [entry.id for entry in remaining] == [3, 4, 5, 6, 7]
    assert [entry.id for entry in await store.visit_logs.recent(2)] == [7, 6]


@pytest.mark.asyncio
async def test_count_by_location(store):
    for attempt_id, location_id in enumerate(["alpha", "beta", "alpha"], start=1):
        await store.visit_logs.append(_attempt(attempt_id, location_id=location_id), retention=10)

    assert await store.visit_logs.count_by_location() == {"alpha": 2, "beta": 1}


@pytest.mark.asyncio
async def test_reset_clears_both_collections(store):
    await store.winners.insert_if_absent(WinnerRecord.from_attempt(_attempt(1, is_winner=True)))
    await store.visit_logs.append(_attempt(1, is_winner=True), retention=10)

    await store.reset()

    assert await store.winners.get_all() == {}
    assert await store.visit_logs.count() == 0


@pytest.mark.asyncio
async def test_state_survives_reopening(db_path):
    record = WinnerRecord.from_attempt(_attempt(42, is_winner=True))
    first = await open_store(db_path, pool_size=2)
    await first.winners.insert_if_absent(record)
    await first.visit_logs.append(record.to_attempt(), retention=10)
    await first.close()

    reopened = await open_store(db_path, pool_size=2)
    try:
        assert await reopened.winners.get("alpha") == record
        assert await reopened.visit_logs.all() == [record.to_attempt()]
        assert await reopened.max_attempt_id() == 42
    finally:
        await reopened.close()


@pytest.mark.asyncio
async def test_driver_errors_become_persistence_errors(db_path):
    # No migrations: every table is missing
    bare = PromotionStore(await init_db_pool(db_path, pool_size=1, busy_timeout_ms=100))
    try:
        with pytest.raises(PersistenceError):
            await bare.winners.get_all()
        with pytest.raises(PersistenceError):
            await bare.visit_logs.append(_attempt(1), retention=10)
    finally:
        await bare.close()


@pytest.mark.asyncio
async def test_failed_commit_rolls_back_and_frees_connection(db_path, monkeypatch):
    single = await open_store(db_path, pool_size=1)
    try:
        async with single.pool.connection() as conn:
            pass
        monkeypatch.setattr(conn, "commit", AsyncMock(side_effect=sqlite3.OperationalError("disk I/O error")))

        with pytest.raises(PersistenceError):
            await single.winners.insert_if_absent(WinnerRecord.from_attempt(_attempt(1, is_winner=True)))

        monkeypatch.undo()
        assert not conn.in_transaction
        assert await single.winners.get("alpha") is None

        await single.reset()
        assert await single.winners.insert_if_absent(WinnerRecord.from_attempt(_attempt(2, is_winner=True)))
    finally:
        await single.close()
