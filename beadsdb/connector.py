"""Load -> resolve -> connect -> verify pipeline producing a Store."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Protocol, runtime_checkable

from sqlalchemy.ext.asyncio import AsyncEngine

from .config import ConnectorConfig, load_config
from .dsn import CredentialProvider
from .drivers import StoreDriver, default_drivers, dispose_quietly
from .metadata import Descriptor, load_metadata
from .models import ConnectionMode
from .schema import SchemaVerifier, verify_schema
from .store import Store

LOG = logging.getLogger(__name__)


@runtime_checkable
class StoreFactory(Protocol):
    """Something that can turn a beads directory into a verified Store."""

    def load(self, beads_dir: Path) -> Descriptor: ...

    def resolve(self, descriptor: Descriptor) -> ConnectionMode: ...

    async def connect(self, beads_dir: Path, descriptor: Descriptor, mode: ConnectionMode) -> AsyncEngine: ...

    async def verify(self, engine: AsyncEngine) -> None: ...


class Connector:
    """Default StoreFactory wiring the metadata loader, drivers and verifier."""

    def __init__(
        self,
        config: ConnectorConfig | None = None,
        *,
        credentials: CredentialProvider | None = None,
        drivers: Mapping[ConnectionMode, StoreDriver] | None = None,
        verifier: SchemaVerifier | None = None,
    ) -> None:
        self._config = config or load_config()
        self._drivers = dict(drivers or default_drivers(self._config, credentials=credentials))
        self._verifier = verifier or verify_schema

    @property
    def config(self) -> ConnectorConfig:
        return self._config

    def driver_for(self, mode: ConnectionMode) -> StoreDriver:
        try:
            return self._drivers[mode]
        except KeyError:
            raise ValueError(f"No driver registered for {mode.value} mode.") from None

    def load(self, beads_dir: Path) -> Descriptor:
        return load_metadata(beads_dir)

    def resolve(self, descriptor: Descriptor) -> ConnectionMode:
        return descriptor.connection_mode()

    async def connect(self, beads_dir: Path, descriptor: Descriptor, mode: ConnectionMode) -> AsyncEngine:
        return await self.driver_for(mode).open(beads_dir, descriptor)

    async def verify(self, engine: AsyncEngine) -> None:
        await self._verifier(engine)

    async def open(self, beads_dir: Path | str) -> Store:
        """Run every stage in order and return a verified Store.

        Stages short-circuit on the first typed error. The engine is disposed
        if verification fails or the caller cancels while it runs.
        """

        beads_dir = Path(beads_dir)
        descriptor = self.load(beads_dir)
        mode = self.resolve(descriptor)
        driver = self.driver_for(mode)
        location = driver.location(beads_dir, descriptor)
        LOG.info("Opening %s store for database %r at %s", mode.value, descriptor.dolt_database, location)

        engine = await self.connect(beads_dir, descriptor, mode)
        try:
            await self.verify(engine)
        except BaseException:
            await dispose_quietly(engine)
            raise

        LOG.info("Opened %s store at %s", mode.value, location)
        return Store(engine, mode, location=location)


async def open_store(
    beads_dir: Path | str,
    *,
    config: ConnectorConfig | None = None,
    credentials: CredentialProvider | None = None,
) -> Store:
    """Obtain a verified Store for *beads_dir* using the default drivers."""

    return await Connector(config, credentials=credentials).open(beads_dir)


__all__ = ["Connector", "StoreFactory", "open_store"]
