"""Process-wide connection cache.

Holds one connection handle for the life of the process. Concurrent callers
that arrive before the first connection is ready share a single in-flight
attempt instead of each opening their own.
"""

from __future__ import annotations

import asyncio
from typing import Any

from infrastructure.database.drivers import ConnectOptions, DatabaseDriver, redact_target
from infrastructure.observability.probes import (
    ConnectionCacheProbe,
    DefaultConnectionCacheProbe,
)


class ConnectionCache:
    """Lazily connects once and serves the cached handle thereafter.

    Intended to be constructed once per process (see
    ``infrastructure.database.dependencies.get_connection_cache``) and used
    from a single event loop. There is no close operation; the handle lives
    until the process exits.

    State:
        ``_conn`` is the cached handle, ``None`` until the first success.
        ``_attempt`` is the in-flight connection task, ``None`` when idle.
        Once ``_conn`` is set no further attempt is started.
    """

    def __init__(
        self,
        target: str,
        driver: DatabaseDriver,
        options: ConnectOptions | None = None,
        probe: ConnectionCacheProbe | None = None,
    ):
        """Initialize the cache without connecting.

        Args:
            target: Connection target handed to the driver
            driver: Connection provider
            options: Driver options (defaults to buffering disabled)
            probe: Optional observability probe
        """
        self._target = target
        self._driver = driver
        self._options = options or ConnectOptions(buffer_commands=False)
        self._probe = probe or DefaultConnectionCacheProbe()
        self._conn: Any | None = None
        self._attempt: asyncio.Task[Any] | None = None

    @property
    def target(self) -> str:
        """Connection target with credentials redacted."""
        return redact_target(self._target)

    @property
    def is_connected(self) -> bool:
        return self._conn is not None

    @property
    def is_connecting(self) -> bool:
        return self._attempt is not None

    async def connect(self) -> Any:
        """Return the cached connection, connecting first if needed.

        Callers arriving while an attempt is in flight await that same
        attempt. A caller being cancelled does not cancel the shared attempt.

        Returns:
            The driver's connection handle.

        Raises:
            Exception: Whatever the driver raised for the failed attempt. The
                attempt is cleared first, so the next call starts a new one.
        """
        if self._conn is not None:
            return self._conn

        if self._attempt is None:
            self._probe.connection_attempt_started(target=self.target)
            self._attempt = asyncio.create_task(
                self._driver.connect(self._target, self._options)
            )
            self._attempt.add_done_callback(self._settle)
        else:
            self._probe.connection_attempt_joined(target=self.target)

        return await asyncio.shield(self._attempt)

    def _settle(self, attempt: asyncio.Task[Any]) -> None:
        """Record the outcome of an attempt before any waiter resumes."""
        if self._attempt is attempt:
            self._attempt = None

        if attempt.cancelled():
            return

        error = attempt.exception()
        if error is not None:
            self._probe.connection_failed(target=self.target, error=error)
            return

        self._conn = attempt.result()
        self._probe.connection_established(target=self.target)
