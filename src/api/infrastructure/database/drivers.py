"""Driver adapters for establishing database connections.

The connection cache only knows the ``DatabaseDriver`` protocol. Concrete
adapters wrap a third-party driver and translate its failures into
``DatabaseConnectionError``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol
from urllib.parse import urlsplit, urlunsplit

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from infrastructure.database.exceptions import (
    DatabaseConfigurationError,
    DatabaseConnectionError,
)

__all__ = [
    "ConnectOptions",
    "DatabaseDriver",
    "MotorDriver",
    "SQLAlchemyDriver",
    "driver_for_target",
    "redact_target",
]

MONGO_SCHEMES = frozenset({"mongodb", "mongodb+srv"})


@dataclass(frozen=True)
class ConnectOptions:
    """Options handed to ``DatabaseDriver.connect``.

    Attributes:
        buffer_commands: When False the driver must not return the handle
            until the server has answered, so no operation is ever queued
            against a connection that is not ready yet.
        server_selection_timeout_ms: How long the driver may look for a server.
        connect_timeout_ms: Socket connect timeout.
    """

    buffer_commands: bool = False
    server_selection_timeout_ms: int = 30000
    connect_timeout_ms: int = 20000


class DatabaseDriver(Protocol):
    """Connection provider wrapped by the connection cache."""

    async def connect(self, target: str, options: ConnectOptions) -> Any:
        """Open a connection to ``target`` and return its handle."""
        ...


class MotorDriver:
    """MongoDB driver adapter built on Motor.

    The returned handle is the ``AsyncIOMotorClient``; Motor/PyMongo owns the
    pool behind it.
    """

    async def connect(self, target: str, options: ConnectOptions) -> AsyncIOMotorClient:
        """Create a client and, unless buffering is allowed, ping the server.

        Raises:
            DatabaseConnectionError: If the target is malformed or the server
                cannot be reached.
        """
        client: AsyncIOMotorClient | None = None
        try:
            # Malformed URIs and failed SRV lookups raise here
            client = AsyncIOMotorClient(
                target,
                serverSelectionTimeoutMS=options.server_selection_timeout_ms,
                connectTimeoutMS=options.connect_timeout_ms,
            )
            if not options.buffer_commands:
                await client.admin.command("ping")
        except (PyMongoError, ValueError) as e:
            if client is not None:
                client.close()
            raise DatabaseConnectionError(
                f"Failed to connect to MongoDB: {e}",
                target=redact_target(target),
            ) from e
        return client


class SQLAlchemyDriver:
    """SQL driver adapter built on SQLAlchemy's asyncio engine.

    The returned handle is the ``AsyncEngine``; its pool is managed by
    SQLAlchemy.
    """

    async def connect(self, target: str, options: ConnectOptions) -> AsyncEngine:
        """Create an engine and, unless buffering is allowed, run ``SELECT 1``.

        Raises:
            DatabaseConnectionError: If the target is malformed or the server
                cannot be reached.
        """
        engine: AsyncEngine | None = None
        try:
            engine = create_async_engine(
                target,
                pool_pre_ping=True,  # Verify connections before using
                echo=False,
            )
            if not options.buffer_commands:
                async with engine.connect() as conn:
                    await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError, ValueError) as e:
            if engine is not None:
                await engine.dispose()
            raise DatabaseConnectionError(
                f"Failed to connect to database: {e}",
                target=redact_target(target),
            ) from e
        return engine


def driver_for_target(target: str) -> DatabaseDriver:
    """Pick the driver adapter matching the target's URL scheme.

    Raises:
        DatabaseConfigurationError: If no adapter handles the scheme.
    """
    scheme = urlsplit(target).scheme.lower()
    if scheme in MONGO_SCHEMES:
        return MotorDriver()
    if scheme.startswith("postgresql"):
        return SQLAlchemyDriver()
    raise DatabaseConfigurationError(
        f"Unsupported connection target scheme: {scheme or '<none>'!r}"
    )


def redact_target(target: str) -> str:
    """Return the target with any password replaced by ``***``."""
    parts = urlsplit(target)
    userinfo, sep, hostinfo = parts.netloc.rpartition("@")
    if not sep or ":" not in userinfo:
        return target
    username = userinfo.split(":", 1)[0]
    return urlunsplit(parts._replace(netloc=f"{username}:***@{hostinfo}"))
