"""Failure taxonomy raised while opening a beads store."""

from __future__ import annotations

from pathlib import Path


class StoreError(RuntimeError):
    """Base error for every stage of the store pipeline."""


class NotInitializedError(StoreError):
    """Raised when the beads directory has no metadata.json."""

    def __init__(self, beads_dir: Path) -> None:
        self.path = Path(beads_dir)
        super().__init__(
            f"no beads database found at '{self.path}': metadata.json is missing\n"
            "Is this a beads project? Run 'bd init' to initialize beads in this repository"
        )


class MetadataReadError(StoreError):
    """Raised when metadata.json exists but cannot be read."""

    def __init__(self, path: Path, reason: object) -> None:
        self.path = Path(path)
        super().__init__(f"failed to read {self.path}: {reason}")


class CorruptMetadataError(StoreError):
    """Raised when metadata.json is not a valid descriptor document."""

    def __init__(self, path: Path, reason: object) -> None:
        self.path = Path(path)
        super().__init__(
            f"metadata.json is corrupted or has invalid JSON: {reason}\n"
            f"Try removing {self.path} and running 'bd init' to recreate it"
        )


class IncompleteMetadataError(StoreError):
    """Raised when metadata.json lacks a required field."""

    def __init__(self, path: Path, field: str) -> None:
        self.path = Path(path)
        self.field = field
        super().__init__(
            f"metadata.json is missing required field '{field}'\n"
            f"File location: {self.path}\n"
            "Try running 'bd init' to regenerate the metadata file"
        )


class ServerUnreachableError(StoreError):
    """Raised when the Dolt sql-server cannot be opened or pinged."""

    def __init__(self, host: str, port: int, reason: object) -> None:
        self.host = host
        self.port = port
        super().__init__(
            f"cannot connect to Dolt server at {host}:{port}: {reason}; "
            "check that the server is running and accessible"
        )


class EmbeddedOpenFailedError(StoreError):
    """Raised when the local embedded database cannot be opened."""

    def __init__(self, path: Path, reason: object) -> None:
        self.path = Path(path)
        super().__init__(
            f"cannot open embedded Dolt database at '{self.path}': {reason}; "
            "check that the directory exists and is readable, or run 'bd init' to create it"
        )


class SchemaInvalidError(StoreError):
    """Raised when the connected database does not expose the beads schema."""

    def __init__(self, reason: object) -> None:
        super().__init__(
            f"schema verification failed: unable to query ready_issues view: {reason}; "
            "the database may be missing the beads schema or may be corrupted; "
            "try running 'bd init' to initialize or repair the database schema"
        )


__all__ = [
    "CorruptMetadataError",
    "EmbeddedOpenFailedError",
    "IncompleteMetadataError",
    "MetadataReadError",
    "NotInitializedError",
    "SchemaInvalidError",
    "ServerUnreachableError",
    "StoreError",
]
