"""Database infrastructure - shared connection primitives."""

from infrastructure.database.connection_cache import ConnectionCache
from infrastructure.database.drivers import (
    ConnectOptions,
    DatabaseDriver,
    MotorDriver,
    SQLAlchemyDriver,
    driver_for_target,
)
from infrastructure.database.exceptions import (
    DatabaseConfigurationError,
    DatabaseConnectionError,
    DatabaseError,
)

__all__ = [
    "ConnectOptions",
    "ConnectionCache",
    "DatabaseConfigurationError",
    "DatabaseConnectionError",
    "DatabaseDriver",
    "DatabaseError",
    "MotorDriver",
    "SQLAlchemyDriver",
    "driver_for_target",
]
