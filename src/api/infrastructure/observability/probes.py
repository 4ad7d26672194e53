"""Domain probes for infrastructure observability.

Domain probes provide a high-level instrumentation API oriented around
domain semantics, keeping infrastructure code clean and testable.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class ConnectionCacheProbe(Protocol):
    """Domain probe for the process-wide connection cache.

    This probe captures domain-significant events of the cache lifecycle
    without exposing logging implementation details.
    """

    def connection_attempt_started(self, target: str) -> None:
        """Record that a new connection attempt was started."""
        ...

    def connection_attempt_joined(self, target: str) -> None:
        """Record that a caller is waiting on an attempt already in flight."""
        ...

    def connection_established(self, target: str) -> None:
        """Record that the cached connection was established."""
        ...

    def connection_failed(self, target: str, error: Exception) -> None:
        """Record that the in-flight attempt failed and was cleared."""
        ...

    def with_context(self, context: ObservationContext) -> ConnectionCacheProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultConnectionCacheProbe:
    """Default implementation of ConnectionCacheProbe using structlog.

    Supports observation context for including request-scoped metadata
    with all log events.
    """

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultConnectionCacheProbe:
        """Create a new probe with observation context bound."""
        return DefaultConnectionCacheProbe(logger=self._logger, context=context)

    def connection_attempt_started(self, target: str) -> None:
        """Record that a new connection attempt was started."""
        self._logger.debug(
            "database_connection_attempt_started",
            target=target,
            **self._get_context_kwargs(),
        )

    def connection_attempt_joined(self, target: str) -> None:
        """Record that a caller is waiting on an attempt already in flight."""
        self._logger.debug(
            "database_connection_attempt_joined",
            target=target,
            **self._get_context_kwargs(),
        )

    def connection_established(self, target: str) -> None:
        """Record that the cached connection was established."""
        self._logger.info(
            "database_connected",
            target=target,
            **self._get_context_kwargs(),
        )

    def connection_failed(self, target: str, error: Exception) -> None:
        """Record that the in-flight attempt failed and was cleared."""
        self._logger.error(
            "database_connection_failed",
            target=target,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )
