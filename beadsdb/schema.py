"""Schema verification for freshly opened engines."""

from __future__ import annotations

from typing import Awaitable, Callable

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from .errors import SchemaInvalidError

SchemaVerifier = Callable[[AsyncEngine], Awaitable[None]]

# ready_issues only exists once the beads schema has been installed.
SCHEMA_PROBE = text("SELECT COUNT(*) FROM ready_issues LIMIT 1")


async def verify_schema(engine: AsyncEngine) -> None:
    """Raise SchemaInvalidError unless the ready_issues view can be queried.

    Missing views, permission problems and corrupted schemas all surface the
    same way because ``bd init`` is the fix for each of them.
    """

    try:
        async with engine.connect() as conn:
            result = await conn.execute(SCHEMA_PROBE)
            result.scalar_one()
    except Exception as exc:
        raise SchemaInvalidError(exc) from exc


__all__ = ["SCHEMA_PROBE", "SchemaVerifier", "verify_schema"]
