"""Server connection URL construction.

The URL is assembled with :meth:`sqlalchemy.engine.URL.create` so the user,
password and database stay separate components; they are percent-encoded
only when the URL is rendered to a string and are never re-parsed from one.
"""

from __future__ import annotations

import os
from typing import Callable

from sqlalchemy.engine import URL

from .metadata import Descriptor
from .models import ServerAddress

DEFAULT_SERVER_HOST = "127.0.0.1"
DEFAULT_SERVER_PORT = 3307  # dolt sql-server, not the MySQL 3306 default
DEFAULT_SERVER_USER = "root"
PASSWORD_ENV_VAR = "BEADS_DOLT_PASSWORD"
SERVER_DRIVER = "mysql+aiomysql"

# Session time zone is pinned to UTC; aiomysql decodes DATETIME columns into
# ``datetime`` objects on its own.
SERVER_QUERY: dict[str, str] = {
    "charset": "utf8mb4",
    "init_command": "SET time_zone = '+00:00'",
}

CredentialProvider = Callable[[], str]


def env_credentials(var: str = PASSWORD_ENV_VAR) -> CredentialProvider:
    """Return a provider that reads the password from *var* when called."""

    def _provider() -> str:
        return os.environ.get(var, "")

    return _provider


def static_credentials(password: str = "") -> CredentialProvider:
    """Return a provider that always yields *password*."""

    def _provider() -> str:
        return password

    return _provider


def server_address(descriptor: Descriptor) -> ServerAddress:
    """Server host, port and user with defaults filled in."""

    port = descriptor.dolt_server_port or 0
    return ServerAddress(
        host=descriptor.dolt_server_host or DEFAULT_SERVER_HOST,
        port=port if port > 0 else DEFAULT_SERVER_PORT,
        user=descriptor.dolt_server_user or DEFAULT_SERVER_USER,
    )


def build_server_url(
    descriptor: Descriptor,
    credentials: CredentialProvider | None = None,
) -> URL:
    """Build the connection URL for a Dolt sql-server.

    The password comes from *credentials* (the ``BEADS_DOLT_PASSWORD``
    environment variable by default) and is left out entirely when empty.
    """

    provider = credentials or env_credentials()
    address = server_address(descriptor)
    password = provider()
    return URL.create(
        SERVER_DRIVER,
        username=address.user,
        password=password or None,
        host=address.host,
        port=address.port,
        database=descriptor.dolt_database,
        query=SERVER_QUERY,
    )


def render_dsn(url: URL, *, hide_password: bool = True) -> str:
    """Render *url* as a string; the password is masked unless asked otherwise."""

    return url.render_as_string(hide_password=hide_password)


__all__ = [
    "CredentialProvider",
    "DEFAULT_SERVER_HOST",
    "DEFAULT_SERVER_PORT",
    "DEFAULT_SERVER_USER",
    "PASSWORD_ENV_VAR",
    "SERVER_DRIVER",
    "build_server_url",
    "env_credentials",
    "render_dsn",
    "server_address",
    "static_credentials",
]
