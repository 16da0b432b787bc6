"""Cyclopts CLI entrypoint for rendering a view through its layouts.

The ``pagecompose`` console script loads an optional composition config,
reads template variables from a YAML file, renders the requested view, and
writes the result to a file or stdout. Options can also be supplied through
``PAGECOMPOSE_*`` environment variables, which makes the command convenient
to drive from CI.

Examples
--------
Render a page with the defaults from ``config/compose.yaml``:

>>> from pagecompose.cli import app
>>> app(["render", "index.html", "--output", "public/index.html"])  # doctest: +SKIP

Capture instrumentation events alongside the HTML:

>>> app(
...     ["render", "index.html", "--trace-output", "trace.json"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import dataclasses as dc
import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter
from ruamel.yaml import YAML

from ._constants import DEFAULT_CONFIG_ENV
from .config import CompositionConfig, load_composition_config
from .engine import LayoutView
from .tracing import RecordingTracer

DEFAULT_CONFIG = Path("config/compose.yaml")

app = App(name="pagecompose", config=cyclopts.config.Env(DEFAULT_CONFIG_ENV, command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _load_context(path: Path | None) -> dict[str, typ.Any]:
    """Read template variables from a YAML mapping, or return an empty dict."""
    if path is None:
        return {}
    if not path.exists():
        msg = f"Context file '{path}' not found."
        raise FileNotFoundError(msg)
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Context YAML must be a mapping of template variables."
        raise TypeError(msg)
    return dict(loaded)


def _resolve_config(config: Path, templates_dir: Path | None) -> CompositionConfig:
    """Load ``config`` when it exists and apply the templates override."""
    resolved = load_composition_config(config) if config.exists() else CompositionConfig()
    if templates_dir is not None:
        resolved = dc.replace(resolved, templates_dir=templates_dir)
    return resolved


@app.command(help="Render a view through its chain of layouts.")
def render(
    view: str,
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to composition config")
    ] = DEFAULT_CONFIG,
    templates_dir: typ.Annotated[
        Path | None, Parameter(help="Override the templates directory")
    ] = None,
    context: typ.Annotated[
        Path | None, Parameter(help="YAML file with template variables")
    ] = None,
    output: typ.Annotated[
        Path | None, Parameter(help="Where to write the HTML (stdout if omitted)")
    ] = None,
    trace_output: typ.Annotated[
        Path | None, Parameter(help="Write recorded trace events as JSON")
    ] = None,
    log_level: typ.Annotated[
        str, Parameter(help="Logging level for composition diagnostics")
    ] = "WARNING",
) -> None:
    """Render ``view`` and write the composed HTML.

    Parameters
    ----------
    view : str
        Template name of the content page, relative to the templates
        directory.
    config : Path, optional
        Composition config file; defaults are used when it does not exist.
    templates_dir : Path or None, optional
        Templates directory overriding the config value.
    context : Path or None, optional
        YAML mapping passed to every template in the pass.
    output : Path or None, optional
        Output file; the HTML goes to stdout when omitted.
    trace_output : Path or None, optional
        When set, instrumentation events are recorded and written here as
        JSON, regardless of the configured tracing backend.
    log_level : str, optional
        Name of the logging level applied to the root logger.

    Raises
    ------
    FileNotFoundError
        If the context file does not exist.
    CompositionError
        Propagated from the render pass for invalid pulls or layout cycles.
    """
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    composition_config = _resolve_config(config, templates_dir)
    tracer = RecordingTracer() if trace_output else None
    view_renderer = LayoutView(composition_config, tracer=tracer)

    html = view_renderer.render(view, _load_context(context))
    if not html.endswith("\n"):
        html += "\n"

    if output is None:
        sys.stdout.write(html)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(html, encoding="utf-8")
        print(f"wrote {_format_path(output)}")

    if trace_output and tracer is not None:
        trace_output.parent.mkdir(parents=True, exist_ok=True)
        trace_output.write_bytes(tracer.to_json())
        print(f"wrote {_format_path(trace_output)}")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``pagecompose`` command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
