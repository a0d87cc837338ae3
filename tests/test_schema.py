"""Tests for the ready_issues schema probe."""

from __future__ import annotations

import pytest

from beadsdb.config import ConnectorConfig
from beadsdb.drivers import EmbeddedDriver
from beadsdb.errors import SchemaInvalidError
from beadsdb.metadata import Descriptor
from beadsdb.schema import SCHEMA_PROBE, verify_schema


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


def test_probe_targets_ready_issues_view() -> None:
    assert str(SCHEMA_PROBE) == "SELECT COUNT(*) FROM ready_issues LIMIT 1"


@pytest.mark.anyio
async def test_verify_schema_accepts_beads_database(make_project) -> None:
    beads_dir = make_project("beads_bb")
    engine = await EmbeddedDriver(ConnectorConfig()).open(beads_dir, Descriptor(dolt_database="beads_bb"))
    try:
        assert await verify_schema(engine) is None
    finally:
        await engine.dispose()


@pytest.mark.anyio
async def test_verify_schema_rejects_database_without_view(make_project) -> None:
    beads_dir = make_project("beads_bb", with_schema=False)
    engine = await EmbeddedDriver(ConnectorConfig()).open(beads_dir, Descriptor(dolt_database="beads_bb"))
    try:
        with pytest.raises(SchemaInvalidError) as excinfo:
            await verify_schema(engine)
    finally:
        await engine.dispose()

    message = str(excinfo.value)
    assert "schema verification failed" in message
    assert "ready_issues" in message
    assert "bd init" in message
    assert excinfo.value.__cause__ is not None


@pytest.mark.anyio
async def test_verify_schema_folds_connection_errors() -> None:
    class _BrokenEngine:
        def connect(self):  # type: ignore[no-untyped-def]
            raise PermissionError("access denied for user 'reader'")

    with pytest.raises(SchemaInvalidError, match="access denied"):
        await verify_schema(_BrokenEngine())  # type: ignore[arg-type]
