"""Loading and saving of the per-project ``metadata.json`` descriptor."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import CorruptMetadataError, IncompleteMetadataError, MetadataReadError, NotInitializedError
from .models import ConnectionMode

METADATA_FILE = "metadata.json"
DOLT_DIR = "dolt"


class Descriptor(BaseModel):
    """Parsed ``.beads/metadata.json``.

    Field names match the JSON keys so that tooling regenerating the file
    round-trips them unchanged. Keys this model does not know about are kept
    as extras for the same reason.
    """

    model_config = ConfigDict(extra="allow", frozen=True, strict=True)

    backend: str | None = None
    dolt_database: str = ""
    dolt_mode: str | None = None
    dolt_server_host: str | None = None
    dolt_server_port: int | None = None
    dolt_server_user: str | None = None

    def connection_mode(self) -> ConnectionMode:
        """Resolve embedded vs. server mode.

        An explicit ``dolt_mode == "server"`` wins; otherwise a non-empty host
        together with a positive port also selects server mode, since
        operators often fill in the server fields without setting the hint.
        """

        if self.dolt_mode == ConnectionMode.SERVER.value:
            return ConnectionMode.SERVER
        if self.dolt_server_host and (self.dolt_server_port or 0) > 0:
            return ConnectionMode.SERVER
        return ConnectionMode.EMBEDDED

    def is_valid(self) -> bool:
        """True when the minimum required fields are present."""

        return self.dolt_database != ""


def metadata_path(beads_dir: Path | str) -> Path:
    return Path(beads_dir) / METADATA_FILE


def dolt_dir(beads_dir: Path | str) -> Path:
    """Directory holding the embedded database, always ``<beads_dir>/dolt``."""

    return Path(beads_dir) / DOLT_DIR


def load_metadata(beads_dir: Path | str) -> Descriptor:
    """Read and validate the descriptor stored in *beads_dir*."""

    path = metadata_path(beads_dir)
    try:
        data = path.read_bytes()
    except FileNotFoundError as exc:
        raise NotInitializedError(Path(beads_dir)) from exc
    except OSError as exc:
        raise MetadataReadError(path, exc) from exc

    try:
        descriptor = Descriptor.model_validate_json(data)
    except ValidationError as exc:
        raise CorruptMetadataError(path, _summarize(exc)) from exc

    if not descriptor.is_valid():
        raise IncompleteMetadataError(path, "dolt_database")
    return descriptor


def save_metadata(beads_dir: Path | str, descriptor: Descriptor) -> Path:
    """Write *descriptor* to ``<beads_dir>/metadata.json`` and return the path."""

    path = metadata_path(beads_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(descriptor.model_dump_json(indent=2, exclude_unset=True) + "\n")
    return path


def _summarize(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()))
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or str(exc)


__all__ = [
    "DOLT_DIR",
    "Descriptor",
    "METADATA_FILE",
    "dolt_dir",
    "load_metadata",
    "metadata_path",
    "save_metadata",
]
