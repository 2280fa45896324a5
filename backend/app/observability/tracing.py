"""Span helpers used around request handling."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any, Dict, Iterator, Optional

from app.observability import client as opik_client

logger = logging.getLogger(__name__)


@dataclass
class Span:
    name: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    attributes: Dict[str, Any] = field(default_factory=dict)
    duration_ms: Optional[float] = None
    error: Optional[str] = None
    remote: Any = None

    def update(self, metadata: Optional[Dict[str, Any]] = None, **attributes: Any) -> None:
        if metadata:
            self.metadata.update(metadata)
        self.attributes.update(attributes)
        if self.remote is not None:
            try:
                self.remote.update(metadata=self.metadata)
            except Exception:  # pragma: no cover - tracing must not break requests
                logger.warning("Failed to update Opik trace %s", self.name, exc_info=True)


@contextmanager
def trace(name: str, metadata: Optional[Dict[str, Any]] = None, **attributes: Any) -> Iterator[Span]:
    """Time the wrapped block as a span.

    The span goes to Opik when a client is configured and is always logged.
    Exceptions are recorded on the span and re-raised unchanged.
    """
    span = Span(name=name, metadata=dict(metadata or {}), attributes=attributes)
    span.remote = _start_remote(span)
    start = perf_counter()
    try:
        yield span
    except Exception as exc:
        span.error = exc.__class__.__name__
        raise
    finally:
        span.duration_ms = (perf_counter() - start) * 1000
        _end_remote(span)
        if span.error:
            logger.warning(
                "span %s failed error=%s duration_ms=%0.2f metadata=%s",
                name,
                span.error,
                span.duration_ms,
                span.metadata,
            )
        else:
            logger.debug(
                "span %s ok duration_ms=%0.2f metadata=%s attributes=%s",
                name,
                span.duration_ms,
                span.metadata,
                span.attributes,
            )


def _start_remote(span: Span) -> Any:
    client = opik_client.get_opik_client()
    if client is None:
        return None
    try:
        return client.trace(
            name=span.name,
            input={key: _stringify(value) for key, value in span.attributes.items()},
            metadata=span.metadata,
        )
    except Exception:  # pragma: no cover - tracing must not break requests
        logger.warning("Failed to start Opik trace %s", span.name, exc_info=True)
        return None


def _end_remote(span: Span) -> None:
    if span.remote is None:
        return
    metadata = {**span.metadata, "duration_ms": span.duration_ms}
    if span.error:
        metadata["error"] = span.error
    try:
        span.remote.end(metadata=metadata)
    except Exception:  # pragma: no cover - tracing must not break requests
        logger.warning("Failed to end Opik trace %s", span.name, exc_info=True)


def _stringify(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)
