"""Database-specific exceptions for connection management."""


class DatabaseError(Exception):
    """Base exception for database operations."""

    pass


class DatabaseConfigurationError(DatabaseError):
    """Raised when the connection target is missing or unsupported."""

    pass


class DatabaseConnectionError(DatabaseError):
    """Raised when a driver fails to establish a connection."""

    def __init__(self, message: str, target: str | None = None):
        super().__init__(message)
        self.target = target
