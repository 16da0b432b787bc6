"""Render a view through its chain of layouts with Jinja2.

:class:`LayoutView` owns an async Jinja ``Environment`` configured from a
:class:`~pagecompose.config.CompositionConfig`. A render pass executes the
requested view into a buffer, then repeatedly hands the last page's sections
and body to the layout it selected, until a page selects no layout. The
final page's output is written to the caller's sink.

Example
-------
>>> from jinja2 import DictLoader
>>> from pagecompose.config import CompositionConfig
>>> view = LayoutView(
...     CompositionConfig(),
...     loader=DictLoader(
...         {
...             "layout.html": "<main>{{ render_body() }}</main>",
...             "index.html": "{{ set_layout('layout.html') }}Hello",
...         }
...     ),
... )
>>> view.render("index.html")
'<main>Hello</main>'
"""

from __future__ import annotations

import asyncio
import logging
import typing as typ

from jinja2 import BaseLoader, Environment, FileSystemLoader, select_autoescape

from pagecompose.config import CompositionConfig
from pagecompose.content import BufferSink
from pagecompose.errors import LayoutCycleError
from pagecompose.tracing import build_tracer

from .page import PageExecution, ViewContext, check_section_placement

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from markupsafe import Markup

    from pagecompose.content import ContentSink
    from pagecompose.tracing import Tracer

log = logging.getLogger(__name__)


def _finalize(value: object) -> object:
    """Print ``None`` (an optional section that was not defined) as nothing."""
    return "" if value is None else value


class LayoutView:
    """Compose content pages with their layouts for one template directory."""

    def __init__(
        self,
        config: CompositionConfig | None = None,
        *,
        loader: BaseLoader | None = None,
        tracer: Tracer | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Configure the Jinja environment and the pass collaborators.

        Parameters
        ----------
        config : CompositionConfig, optional
            Environment and tracing settings; defaults apply when omitted.
        loader : BaseLoader, optional
            Template loader; defaults to a ``FileSystemLoader`` rooted at
            ``config.templates_dir``.
        tracer : Tracer, optional
            Overrides the tracer built from ``config.tracing``.
        logger : logging.Logger, optional
            Receives composition diagnostics for every page in the pass.
        """
        self.config = config or CompositionConfig()
        self.tracer = tracer or build_tracer(self.config.tracing)
        self._logger = logger
        self.env = Environment(
            loader=loader or FileSystemLoader(str(self.config.templates_dir)),
            autoescape=(
                select_autoescape(["html", "xml"]) if self.config.autoescape else False
            ),
            trim_blocks=self.config.trim_blocks,
            lstrip_blocks=self.config.lstrip_blocks,
            finalize=_finalize,
            enable_async=True,
        )
        self._checked: set[str] = set()

    def render(self, view_path: str, context: cabc.Mapping[str, typ.Any] | None = None) -> str:
        """Render ``view_path`` and return the composed output as a string."""
        return str(asyncio.run(self.render_async(view_path, context)))

    async def render_async(
        self,
        view_path: str,
        context: cabc.Mapping[str, typ.Any] | None = None,
        *,
        sink: ContentSink | None = None,
    ) -> Markup:
        """Run one render pass for ``view_path``.

        Parameters
        ----------
        view_path : str
            Loader name of the content page to render.
        context : Mapping, optional
            Template variables shared by the page and all of its layouts.
        sink : ContentSink, optional
            Destination for the final output, for example a ``StreamSink``
            bound to a response. Every page is buffered and the composed
            output is written in a single call once the layout chain and its
            completeness checks finish: whether a page is the outermost one
            is only known after it has run, since it may still call
            ``set_layout``.

        Returns
        -------
        Markup
            The composed output, also written to ``sink`` when given.

        Raises
        ------
        LayoutCycleError
            If a layout is selected twice in the same pass.
        ArgumentError
            If a template nests ``define_section`` in a loop, macro, or call
            block.
        jinja2.TemplateNotFound
            If the view or a selected layout does not exist.
        """
        variables = dict(context or {})
        buffer = BufferSink()
        view_context = ViewContext(view_path=view_path, output=buffer)
        page = PageExecution(
            view_path, view_context, tracer=self.tracer, logger=self._logger
        )
        await self._execute(page, buffer, variables)

        layouts: list[PageExecution] = []
        seen: set[str] = set()
        while page.layout is not None:
            layout_path = self.env.join_path(page.layout, page.path)
            if layout_path in seen:
                raise LayoutCycleError(layout_path, view_path)
            seen.add(layout_path)
            log.debug("rendering layout %s for %s", layout_path, page.path)

            body = buffer.content if buffer.has_content() else None
            buffer = BufferSink()
            view_context.output = buffer
            page = PageExecution(
                layout_path,
                view_context,
                previous_sections=page.sections,
                body=body,
                tracer=self.tracer,
                logger=self._logger,
            )
            await self._execute(page, buffer, variables)
            layouts.append(page)

        if page.sections:
            log.debug(
                "%s defined sections %s without a layout",
                page.path,
                page.sections.names(),
            )

        for layout in layouts:
            layout.orchestrator.ensure_rendered_body_or_sections()

        output = buffer.content
        if sink is not None:
            await sink.write(output)
        return output

    async def _execute(
        self,
        page: PageExecution,
        output: ContentSink,
        variables: dict[str, typ.Any],
    ) -> None:
        """Stream one template into ``output`` chunk by chunk."""
        template = self.env.get_template(page.path)
        if page.path not in self._checked:
            check_section_placement(self.env, page.path)
            self._checked.add(page.path)
        render_context = {**variables, **page.helpers()}
        async for chunk in template.generate_async(render_context):
            await output.write(chunk)


__all__ = ["LayoutView"]
