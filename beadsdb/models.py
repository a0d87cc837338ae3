"""Shared types used across the metadata, DSN and driver modules."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ConnectionMode(str, Enum):
    """How a beads database is reached."""

    EMBEDDED = "embedded"
    SERVER = "server"


@dataclass(frozen=True, slots=True)
class ServerAddress:
    """Server connection parameters with defaults applied."""

    host: str
    port: int
    user: str

    @property
    def netloc(self) -> str:
        return f"{self.host}:{self.port}"


__all__ = ["ConnectionMode", "ServerAddress"]
