"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI

from infrastructure.database.connection_cache import ConnectionCache
from infrastructure.database.dependencies import (
    CONNECTION_CACHE_STATE_KEY,
    get_connection_cache,
    get_request_connection_cache,
)
from infrastructure.logging import configure_logging
from infrastructure.version import __version__


@asynccontextmanager
async def dbcache_lifespan(app: FastAPI):
    """Application lifespan context.

    Validates configuration at startup and places the process-wide
    connection cache in ``app.state``. The connection itself is opened on
    first use. Nothing is torn down on shutdown: the cache lives as long as
    the process.
    """
    configure_logging()
    setattr(app.state, CONNECTION_CACHE_STATE_KEY, get_connection_cache())
    yield


app = FastAPI(
    title="DB Connection Cache API",
    description="Shared, lazily established database connection",
    version=__version__,
    lifespan=dbcache_lifespan,
)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}


@app.get("/health/db")
async def health_db(
    cache: Annotated[ConnectionCache, Depends(get_request_connection_cache)],
) -> dict:
    """Check database connection health.

    Connects on first call; later calls reuse the cached connection.
    """
    try:
        await cache.connect()
        return {
            "status": "ok",
            "connected": cache.is_connected,
            "target": cache.target,
        }
    except Exception as e:
        return {
            "status": "error",
            "connected": False,
            "error": str(e),
        }
