"""Tests for the Store handle."""

from __future__ import annotations

import pytest

from beadsdb.config import ConnectorConfig
from beadsdb.connector import open_store
from beadsdb.errors import StoreError
from beadsdb.models import ConnectionMode
from beadsdb.store import Store


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


class _FakeEngine:
    def __init__(self) -> None:
        self.dispose_calls = 0

    async def dispose(self) -> None:
        self.dispose_calls += 1


@pytest.mark.anyio
async def test_close_is_idempotent() -> None:
    engine = _FakeEngine()
    store = Store(engine, ConnectionMode.SERVER, location="10.11.0.1:13307")  # type: ignore[arg-type]

    await store.close()
    await store.close()

    assert engine.dispose_calls == 1
    assert store.closed is True
    assert "closed" in repr(store)


@pytest.mark.anyio
async def test_engine_unavailable_after_close() -> None:
    store = Store(_FakeEngine(), ConnectionMode.EMBEDDED, location="/tmp/x.db")  # type: ignore[arg-type]

    await store.close()

    with pytest.raises(StoreError, match="is closed"):
        _ = store.engine


@pytest.mark.anyio
async def test_context_manager_closes_store() -> None:
    engine = _FakeEngine()

    async with Store(engine, ConnectionMode.EMBEDDED, location="/tmp/x.db") as store:  # type: ignore[arg-type]
        assert store.closed is False

    assert store.closed is True
    assert engine.dispose_calls == 1


@pytest.mark.anyio
async def test_query_helpers_against_embedded_store(make_project) -> None:
    beads_dir = make_project("beads_bb")

    async with await open_store(beads_dir, config=ConnectorConfig()) as store:
        inserted = await store.execute(
            "INSERT INTO issues (id, title, status) VALUES (:id, :title, :status)",
            {"id": "bb-3", "title": "Third", "status": "open"},
        )
        ready = await store.fetch_all("SELECT id FROM ready_issues ORDER BY id")
        one = await store.fetch_one("SELECT title FROM issues WHERE id = :id", {"id": "bb-2"})
        missing = await store.fetch_one("SELECT title FROM issues WHERE id = :id", {"id": "nope"})

    assert inserted == 1
    assert ready == [{"id": "bb-1"}, {"id": "bb-3"}]
    assert one == {"title": "Second"}
    assert missing is None
    assert store.closed is True
