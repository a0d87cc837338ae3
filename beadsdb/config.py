"""Connector settings loading helpers."""

from __future__ import annotations

import logging
from pathlib import Path

import tomllib

from pydantic import BaseModel, Field, ValidationError, model_validator

LOG = logging.getLogger(__name__)

CONFIG_FILE = Path.home() / ".config" / "beads" / "connector.toml"


class ConnectorConfig(BaseModel):
    """Pool sizing, timeouts and driver choices for opening a store."""

    max_open_conns: int = Field(default=10, ge=1)
    # QueuePool reads pool_size=0 as "no idle limit", so at least one is kept.
    max_idle_conns: int = Field(default=5, ge=1)
    conn_max_lifetime: float = Field(default=300.0, gt=0)
    ping_timeout: float = Field(default=10.0, gt=0)
    password_env: str = "BEADS_DOLT_PASSWORD"
    embedded_driver: str = "sqlite+aiosqlite"
    embedded_suffix: str = ".db"

    @model_validator(mode="after")
    def _check_pool_bounds(self) -> ConnectorConfig:
        if self.max_idle_conns > self.max_open_conns:
            raise ValueError("max_idle_conns cannot exceed max_open_conns")
        return self

    @property
    def max_overflow(self) -> int:
        """Connections allowed above the idle pool before checkouts block."""

        return self.max_open_conns - self.max_idle_conns

    def with_overrides(self, **updates: object) -> ConnectorConfig:
        """Return a validated copy with the given settings changed."""

        return ConnectorConfig.model_validate({**self.model_dump(), **updates})


def load_config() -> ConnectorConfig:
    """Load settings from disk; fall back to defaults if missing."""

    try:
        data = _read_config_file()
    except FileNotFoundError:
        return ConnectorConfig()
    except (tomllib.TOMLDecodeError, OSError) as exc:
        LOG.warning("Ignoring unreadable connector config %s: %s", CONFIG_FILE, exc)
        return ConnectorConfig()

    try:
        return ConnectorConfig(**data)
    except ValidationError as exc:
        LOG.warning("Ignoring invalid connector config %s: %s", CONFIG_FILE, exc)
        return ConnectorConfig()


def save_config(config: ConnectorConfig) -> None:
    """Persist settings to disk."""

    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    lines: list[str] = [
        f"max_open_conns = {config.max_open_conns}",
        f"max_idle_conns = {config.max_idle_conns}",
        f"conn_max_lifetime = {config.conn_max_lifetime}",
        f"ping_timeout = {config.ping_timeout}",
        f'password_env = "{config.password_env}"',
        f'embedded_driver = "{config.embedded_driver}"',
        f'embedded_suffix = "{config.embedded_suffix}"',
    ]
    CONFIG_FILE.write_text("\n".join(lines) + "\n")


def _read_config_file() -> dict[str, object]:
    with CONFIG_FILE.open("rb") as handle:
        raw = tomllib.load(handle)
    data: dict[str, object] = {}
    if not isinstance(raw, dict):
        return data
    for key in ("max_open_conns", "max_idle_conns"):
        value = raw.get(key)
        if isinstance(value, int) and not isinstance(value, bool):
            data[key] = value
    for key in ("conn_max_lifetime", "ping_timeout"):
        value = raw.get(key)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            data[key] = float(value)
    for key in ("password_env", "embedded_driver", "embedded_suffix"):
        value = raw.get(key)
        if isinstance(value, str) and value:
            data[key] = value
    return data


__all__ = ["CONFIG_FILE", "ConnectorConfig", "load_config", "save_config"]
