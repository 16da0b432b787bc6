"""Load composition configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from ..errors import CompositionConfigError
from .models import TRACING_BACKENDS, CompositionConfig, TracingConfig


def load_composition_config(path: Path) -> CompositionConfig:
    """Load the YAML configuration describing the render environment.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``compose.yaml``).

    Returns
    -------
    CompositionConfig
        Parsed configuration with defaults applied and ``templates_dir``
        resolved relative to the configuration file.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    CompositionConfigError
        If a field has the wrong type or an unknown tracing backend is named.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> config = load_composition_config(Path("compose.yaml"))  # doctest: +SKIP
    >>> config.templates_dir.name  # doctest: +SKIP
    'templates'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    defaults = CompositionConfig()
    templates_dir = Path(raw.get("templates_dir", defaults.templates_dir))
    if not templates_dir.is_absolute():
        templates_dir = path.parent / templates_dir

    return CompositionConfig(
        templates_dir=templates_dir,
        autoescape=_as_bool(raw, "autoescape", default=defaults.autoescape),
        trim_blocks=_as_bool(raw, "trim_blocks", default=defaults.trim_blocks),
        lstrip_blocks=_as_bool(raw, "lstrip_blocks", default=defaults.lstrip_blocks),
        tracing=_build_tracing_config(raw.get("tracing")),
    )


def _build_tracing_config(payload: object) -> TracingConfig:
    """Build a TracingConfig from the optional ``tracing`` mapping."""
    match payload:
        case None:
            return TracingConfig()
        case dict():
            pass
        case _:
            msg = "'tracing' must be a mapping."
            raise CompositionConfigError(msg)

    backend = payload.get("backend", "log")
    if backend not in TRACING_BACKENDS:
        known = ", ".join(TRACING_BACKENDS)
        msg = f"Unknown tracing backend '{backend}'. Known backends: {known}"
        raise CompositionConfigError(msg)

    events = payload.get("events") or []
    if not isinstance(events, list) or not all(isinstance(e, str) for e in events):
        msg = "'tracing.events' must be a list of event names."
        raise CompositionConfigError(msg)

    return TracingConfig(
        enabled=_as_bool(payload, "enabled", default=False),
        backend=backend,
        events=list(events),
    )


def _as_bool(raw: typ.Mapping[str, typ.Any], key: str, *, default: bool) -> bool:
    value = raw.get(key, default)
    if not isinstance(value, bool):
        msg = f"'{key}' must be true or false, got {value!r}."
        raise CompositionConfigError(msg)
    return value


__all__ = ["load_composition_config"]
