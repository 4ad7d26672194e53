"""Observation context for domain-oriented observability.

Observation contexts carry request-scoped metadata that probes attach to
every event they record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Attributes:
        request_id: Unique identifier for the current request/operation.
        caller: Name of the component asking for a connection (if known).
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(request_id="req-123", caller="health_db")
        probe = DefaultConnectionCacheProbe().with_context(context)
    """

    request_id: str | None = None
    caller: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.caller is not None:
            result["caller"] = self.caller
        result.update(self.extra)
        return result

    def with_extra(self, **kwargs: Any) -> ObservationContext:
        """Create a new context with additional metadata."""
        return ObservationContext(
            request_id=self.request_id,
            caller=self.caller,
            extra={**self.extra, **kwargs},
        )
