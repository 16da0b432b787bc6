"""Load and validate pagecompose configuration YAML.

The primary entry point is :func:`load_composition_config`, which reads a
YAML file, applies defaults, resolves the templates directory relative to the
file, and returns a :class:`CompositionConfig` ready for
:class:`~pagecompose.engine.LayoutView`.

Examples
--------
>>> from pathlib import Path
>>> from pagecompose.config import load_composition_config
>>> config = load_composition_config(Path("config/compose.yaml"))  # doctest: +SKIP
>>> config.tracing.enabled  # doctest: +SKIP
False
"""

from ..errors import CompositionConfigError
from .loader import load_composition_config
from .models import TRACING_BACKENDS, CompositionConfig, TracingConfig

__all__ = [
    "TRACING_BACKENDS",
    "CompositionConfig",
    "CompositionConfigError",
    "TracingConfig",
    "load_composition_config",
]
