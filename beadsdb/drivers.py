"""Connection drivers for the two Dolt connection modes."""

from __future__ import annotations

import asyncio
import logging
import math
from pathlib import Path
from typing import Mapping, Protocol, runtime_checkable
from urllib.parse import quote

from sqlalchemy import text
from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from .config import ConnectorConfig
from .dsn import CredentialProvider, build_server_url, env_credentials, render_dsn, server_address
from .errors import EmbeddedOpenFailedError, ServerUnreachableError
from .metadata import Descriptor, dolt_dir
from .models import ConnectionMode

LOG = logging.getLogger(__name__)

_PROBE_QUERY = text("SELECT 1")


@runtime_checkable
class StoreDriver(Protocol):
    """Opens a pooled engine for one connection mode."""

    mode: ConnectionMode

    def location(self, beads_dir: Path, descriptor: Descriptor) -> str:
        """Human readable target (path or host:port) used in diagnostics."""

    async def open(self, beads_dir: Path, descriptor: Descriptor) -> AsyncEngine:
        """Open and probe an engine; raise a typed StoreError on failure."""


class ServerDriver:
    """Connects to a running ``dolt sql-server`` over the MySQL protocol."""

    mode = ConnectionMode.SERVER

    def __init__(
        self,
        config: ConnectorConfig | None = None,
        *,
        credentials: CredentialProvider | None = None,
    ) -> None:
        self._config = config or ConnectorConfig()
        self._credentials = credentials or env_credentials(self._config.password_env)

    def location(self, beads_dir: Path, descriptor: Descriptor) -> str:
        return server_address(descriptor).netloc

    async def open(self, beads_dir: Path, descriptor: Descriptor) -> AsyncEngine:
        address = server_address(descriptor)
        url = build_server_url(descriptor, self._credentials)
        LOG.debug(
            "Opening Dolt server pool %s (max_open=%d, max_idle=%d, lifetime=%ss)",
            render_dsn(url),
            self._config.max_open_conns,
            self._config.max_idle_conns,
            self._config.conn_max_lifetime,
        )
        try:
            engine = create_async_engine(
                url,
                pool_size=self._config.max_idle_conns,
                max_overflow=self._config.max_overflow,
                pool_recycle=math.ceil(self._config.conn_max_lifetime),
                pool_pre_ping=True,
                connect_args={"connect_timeout": math.ceil(self._config.ping_timeout)},
            )
        except Exception as exc:
            raise ServerUnreachableError(
                address.host, address.port, f"failed to create connection pool: {exc}"
            ) from exc

        try:
            await asyncio.wait_for(_probe(engine), timeout=self._config.ping_timeout)
        except asyncio.CancelledError:
            await dispose_quietly(engine)
            raise
        except Exception as exc:
            await dispose_quietly(engine)
            reason: object = exc
            if isinstance(exc, TimeoutError):
                reason = f"no response within {self._config.ping_timeout:g}s"
            raise ServerUnreachableError(address.host, address.port, reason) from exc
        return engine


class EmbeddedDriver:
    """Opens the on-disk database under ``<beads_dir>/dolt``."""

    mode = ConnectionMode.EMBEDDED

    def __init__(self, config: ConnectorConfig | None = None) -> None:
        self._config = config or ConnectorConfig()

    def database_path(self, beads_dir: Path, descriptor: Descriptor) -> Path:
        return dolt_dir(beads_dir) / f"{descriptor.dolt_database}{self._config.embedded_suffix}"

    def location(self, beads_dir: Path, descriptor: Descriptor) -> str:
        return str(self.database_path(beads_dir, descriptor))

    def url(self, beads_dir: Path, descriptor: Descriptor) -> URL:
        """Read-write URI for the database file; opening never creates it."""

        path = self.database_path(beads_dir, descriptor).resolve()
        return URL.create(
            self._config.embedded_driver,
            database=f"file:{quote(path.as_posix())}",
            query={"mode": "rw", "uri": "true"},
        )

    async def open(self, beads_dir: Path, descriptor: Descriptor) -> AsyncEngine:
        path = self.database_path(beads_dir, descriptor)
        LOG.debug("Opening embedded Dolt database at %s", path)
        try:
            engine = create_async_engine(self.url(beads_dir, descriptor), poolclass=NullPool)
        except Exception as exc:
            raise EmbeddedOpenFailedError(path, exc) from exc

        try:
            await _probe(engine)
        except asyncio.CancelledError:
            await dispose_quietly(engine)
            raise
        except Exception as exc:
            await dispose_quietly(engine)
            raise EmbeddedOpenFailedError(path, exc) from exc
        return engine


def default_drivers(
    config: ConnectorConfig | None = None,
    *,
    credentials: CredentialProvider | None = None,
) -> Mapping[ConnectionMode, StoreDriver]:
    """One driver per connection mode, sharing the same settings."""

    config = config or ConnectorConfig()
    return {
        ConnectionMode.EMBEDDED: EmbeddedDriver(config),
        ConnectionMode.SERVER: ServerDriver(config, credentials=credentials),
    }


async def _probe(engine: AsyncEngine) -> None:
    async with engine.connect() as conn:
        await conn.execute(_PROBE_QUERY)


async def dispose_quietly(engine: AsyncEngine) -> None:
    """Dispose *engine*, logging instead of raising; used on failure paths."""

    try:
        await engine.dispose()
    except Exception:  # pragma: no cover - best effort while propagating
        LOG.debug("Ignoring error while disposing engine", exc_info=True)


__all__ = [
    "EmbeddedDriver",
    "ServerDriver",
    "StoreDriver",
    "default_drivers",
    "dispose_quietly",
]
