"""Metrics hook protocol and no-op default implementation.

blockmark emits counters and timings around every decode, encode and
vault save.  By default a :class:`NoopMetricsHook` discards them; supply
any object satisfying :class:`MetricsHook` via ``BlockmarkConfig.metrics``
to route them to a real backend.

Emitted metric names:

* ``blockmark.blocks_decoded_total``        -- counter
* ``blockmark.blocks_encoded_total``        -- counter
* ``blockmark.decode_duration_ms``          -- timing
* ``blockmark.encode_duration_ms``          -- timing
* ``blockmark.conversion_warnings_total``   -- counter
* ``blockmark.documents_saved_total``       -- counter
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    All methods accept optional string *tags*; implementations translate
    them into whatever their backend supports.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Set a gauge metric to an absolute value."""
        ...


class NoopMetricsHook:
    """Default metrics implementation that silently discards all data points."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass


def resolve_metrics(metrics: Any | None) -> MetricsHook:
    """Return *metrics*, or a :class:`NoopMetricsHook` when it is ``None``."""
    return metrics if metrics is not None else NoopMetricsHook()
