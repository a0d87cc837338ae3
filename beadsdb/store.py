"""The verified, pooled handle handed to callers."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, Mapping

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from .errors import StoreError
from .models import ConnectionMode

LOG = logging.getLogger(__name__)


class Store:
    """Pooled engine plus the connection mode that produced it.

    The engine is safe to share between tasks; each query checks a physical
    connection out of the pool and returns it afterwards.
    """

    def __init__(self, engine: AsyncEngine, mode: ConnectionMode, *, location: str) -> None:
        self._engine = engine
        self._mode = mode
        self._location = location
        self._closed = False

    @property
    def engine(self) -> AsyncEngine:
        """Underlying SQLAlchemy engine."""

        if self._closed:
            raise StoreError(f"store for {self._location} is closed")
        return self._engine

    @property
    def mode(self) -> ConnectionMode:
        return self._mode

    @property
    def location(self) -> str:
        """Database path (embedded) or host:port (server)."""

        return self._location

    @property
    def closed(self) -> bool:
        return self._closed

    async def fetch_one(self, sql: str, params: Mapping[str, Any] | None = None) -> dict[str, Any] | None:
        """Run a query and return its first row as a dict (or None)."""

        async with self.engine.connect() as conn:
            result = await conn.execute(text(sql), dict(params or {}))
            row = result.mappings().first()
        return dict(row) if row is not None else None

    async def fetch_all(self, sql: str, params: Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
        """Run a query and return all rows as a list of dicts."""

        async with self.engine.connect() as conn:
            result = await conn.execute(text(sql), dict(params or {}))
            rows = result.mappings().all()
        return [dict(row) for row in rows]

    async def execute(self, sql: str, params: Mapping[str, Any] | None = None) -> int:
        """Run a statement in its own transaction and return the affected row count."""

        async with self.engine.begin() as conn:
            result = await conn.execute(text(sql), dict(params or {}))
            return result.rowcount

    async def close(self) -> None:
        """Dispose the pool. Calling it again is a no-op."""

        if self._closed:
            return
        self._closed = True
        await self._engine.dispose()
        LOG.info("Closed %s store at %s", self._mode.value, self._location)

    async def __aenter__(self) -> Store:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<Store mode={self._mode.value} location={self._location!r} {state}>"


__all__ = ["Store"]
