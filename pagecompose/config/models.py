"""Typed dataclasses describing pagecompose configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

TRACING_BACKENDS = ("log", "record")


@dc.dataclass(slots=True)
class TracingConfig:
    """Whether and where instrumentation events are published."""

    enabled: bool = False
    backend: str = "log"
    events: list[str] = dc.field(default_factory=list)


@dc.dataclass(slots=True)
class CompositionConfig:
    """Settings for the Jinja environment and the render pass collaborators."""

    templates_dir: Path = Path("templates")
    autoescape: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True
    tracing: TracingConfig = dc.field(default_factory=TracingConfig)


__all__ = ["TRACING_BACKENDS", "CompositionConfig", "TracingConfig"]
