"""Optional tracing collaborator for template instrumentation regions.

Compiled page logic brackets literal and evaluated regions with
``begin_context``/``end_context``. The orchestrator turns those calls into
:class:`TraceEvent` values and hands them to a :class:`Tracer` only when the
tracer reports the event as enabled, so a disabled tracer costs one method
call per region.

Example
-------
>>> tracer = RecordingTracer()
>>> tracer.emit(TraceEvent(name="demo", path="index.html"))
>>> [event.path for event in tracer.events]
['index.html']
"""

from __future__ import annotations

import logging
import typing as typ

import msgspec
import msgspec.json as msgspec_json

if typ.TYPE_CHECKING:
    from .config import TracingConfig

log = logging.getLogger(__name__)


class TraceEvent(msgspec.Struct, frozen=True, omit_defaults=True):
    """Begin/end region event published by a page execution."""

    name: str
    path: str
    position: int | None = None
    length: int | None = None
    is_literal: bool | None = None


class Tracer(typ.Protocol):
    """Receiver of instrumentation events."""

    def is_enabled(self, event: str) -> bool: ...

    def emit(self, event: TraceEvent) -> None: ...


class NullTracer:
    """Tracer used when tracing is disabled."""

    def is_enabled(self, event: str) -> bool:  # noqa: ARG002
        return False

    def emit(self, event: TraceEvent) -> None:
        pass


class LoggingTracer:
    """Write every event to the ``pagecompose.tracing`` logger at DEBUG level."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._log = logger or log

    def is_enabled(self, event: str) -> bool:  # noqa: ARG002
        return self._log.isEnabledFor(logging.DEBUG)

    def emit(self, event: TraceEvent) -> None:
        self._log.debug(
            "%s path=%s position=%s length=%s literal=%s",
            event.name,
            event.path,
            event.position,
            event.length,
            event.is_literal,
        )


class RecordingTracer:
    """Keep events in memory, optionally filtered to a set of event names."""

    def __init__(self, events: typ.Iterable[str] | None = None) -> None:
        self._filter = frozenset(events) if events is not None else None
        self.events: list[TraceEvent] = []

    def is_enabled(self, event: str) -> bool:
        return self._filter is None or event in self._filter

    def emit(self, event: TraceEvent) -> None:
        self.events.append(event)

    def to_json(self) -> bytes:
        """Return the recorded events encoded as a JSON array."""
        return msgspec_json.encode(self.events)


def build_tracer(config: TracingConfig) -> Tracer:
    """Return the tracer described by ``config``."""
    if not config.enabled:
        return NullTracer()
    match config.backend:
        case "record":
            return RecordingTracer(config.events or None)
        case _:
            return LoggingTracer()


__all__ = [
    "LoggingTracer",
    "NullTracer",
    "RecordingTracer",
    "TraceEvent",
    "Tracer",
    "build_tracer",
]
