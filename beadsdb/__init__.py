"""Embedded/server connector for beads Dolt databases."""

from __future__ import annotations

from .config import ConnectorConfig, load_config
from .connector import Connector, StoreFactory, open_store
from .dsn import build_server_url, env_credentials, render_dsn, server_address, static_credentials
from .errors import (
    CorruptMetadataError,
    EmbeddedOpenFailedError,
    IncompleteMetadataError,
    MetadataReadError,
    NotInitializedError,
    SchemaInvalidError,
    ServerUnreachableError,
    StoreError,
)
from .metadata import Descriptor, dolt_dir, load_metadata, save_metadata
from .models import ConnectionMode, ServerAddress
from .store import Store

__version__ = "0.1.0"

__all__ = [
    "ConnectionMode",
    "Connector",
    "ConnectorConfig",
    "CorruptMetadataError",
    "Descriptor",
    "EmbeddedOpenFailedError",
    "IncompleteMetadataError",
    "MetadataReadError",
    "NotInitializedError",
    "SchemaInvalidError",
    "ServerAddress",
    "ServerUnreachableError",
    "Store",
    "StoreError",
    "StoreFactory",
    "__version__",
    "build_server_url",
    "dolt_dir",
    "env_credentials",
    "load_config",
    "load_metadata",
    "open_store",
    "render_dsn",
    "save_metadata",
    "server_address",
    "static_credentials",
]
