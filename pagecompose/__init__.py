"""Layout and section composition for server-rendered Jinja templates.

A content page renders a body and defines named sections; the layout it
selects pulls them in with ``render_body`` and ``render_section``. Each layout
execution gets its own :class:`CompositionOrchestrator`, which rejects
invalid pulls and logs sections or bodies that were never consumed.

Exports
-------
- ``LayoutView``: render a view through its chain of layouts.
- ``CompositionOrchestrator``: body/section pulls for one layout execution.
- ``SectionRegistry``: case-insensitive map of section renderers.

Examples
--------
>>> from jinja2 import DictLoader
>>> from pagecompose import LayoutView
>>> view = LayoutView(
...     loader=DictLoader(
...         {
...             "layout.html": "<title>{{ render_section('Title') }}</title>",
...             "page.html": (
...                 "{{ set_layout('layout.html') }}"
...                 "{% call define_section('Title') %}Home{% endcall %}"
...             ),
...         }
...     )
... )
>>> view.render("page.html")
'<title>Home</title>'
"""

from __future__ import annotations

from .config import CompositionConfig, TracingConfig, load_composition_config
from .content import EMPTY, BufferSink, ContentSink, StreamSink
from .engine import LayoutView
from .errors import (
    ArgumentError,
    CompositionConfigError,
    CompositionError,
    ConflictError,
    InvalidStateError,
    LayoutCycleError,
    SectionNotDefinedError,
)
from .orchestrator import CompositionOrchestrator, RenderState
from .sections import SectionRegistry, SectionRenderer

__all__ = [
    "EMPTY",
    "ArgumentError",
    "BufferSink",
    "CompositionConfig",
    "CompositionConfigError",
    "CompositionError",
    "CompositionOrchestrator",
    "ConflictError",
    "ContentSink",
    "InvalidStateError",
    "LayoutCycleError",
    "LayoutView",
    "RenderState",
    "SectionNotDefinedError",
    "SectionRegistry",
    "SectionRenderer",
    "StreamSink",
    "TracingConfig",
    "load_composition_config",
]
