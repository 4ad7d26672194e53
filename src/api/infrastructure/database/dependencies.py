"""Connection cache wiring and FastAPI dependency injection.

Provides the one-time initializer for the process-wide cache, the
``connect_db`` entry point for application code and a request dependency
that serves the cache stored in the application container.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Any

from fastapi import Depends, Request
from pydantic import ValidationError

from infrastructure.database.connection_cache import ConnectionCache
from infrastructure.database.drivers import ConnectOptions, driver_for_target
from infrastructure.database.exceptions import DatabaseConfigurationError
from infrastructure.observability import DefaultConnectionCacheProbe
from infrastructure.settings import get_database_settings

# Attribute name of the cache slot on ``app.state``
CONNECTION_CACHE_STATE_KEY = "connection_cache"


@lru_cache
def get_connection_cache() -> ConnectionCache:
    """Get the process-wide connection cache (singleton).

    Creates the cache on first call and returns the same instance on every
    later call, including when the application lifespan is re-entered on
    reload. No connection is opened here.

    Returns:
        The shared ConnectionCache

    Raises:
        DatabaseConfigurationError: If the connection target is missing or
            uses an unsupported scheme.
    """
    try:
        settings = get_database_settings()
    except ValidationError as e:
        raise DatabaseConfigurationError(
            "Please define the MONGODB_URI environment variable inside .env"
        ) from e

    options = ConnectOptions(
        buffer_commands=False,
        server_selection_timeout_ms=settings.server_selection_timeout_ms,
        connect_timeout_ms=settings.connect_timeout_ms,
    )
    return ConnectionCache(
        settings.uri,
        driver=driver_for_target(settings.uri),
        options=options,
        probe=DefaultConnectionCacheProbe(),
    )


async def connect_db() -> Any:
    """Return the established database connection, connecting on first use.

    Usage:
        client = await connect_db()
        await client["app"]["users"].find_one({"email": email})
    """
    return await get_connection_cache().connect()


def get_request_connection_cache(request: Request) -> ConnectionCache:
    """Provide the cache held in the application container (FastAPI dependency).

    The lifespan populates ``app.state``; handlers never reach for module
    state directly.
    """
    return getattr(request.app.state, CONNECTION_CACHE_STATE_KEY)


async def get_database_connection(
    cache: Annotated[ConnectionCache, Depends(get_request_connection_cache)],
) -> Any:
    """Provide the cached database connection (FastAPI dependency).

    Usage:
        @router.get("/users/{id}")
        async def get_user(
            client: Annotated[AsyncIOMotorClient, Depends(get_database_connection)]
        ):
            return await client["app"]["users"].find_one({"_id": id})
    """
    return await cache.connect()
