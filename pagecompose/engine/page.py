"""Per-template execution state and the helpers exposed to Jinja templates."""

from __future__ import annotations

import dataclasses as dc
import inspect
import typing as typ

from jinja2 import nodes

from pagecompose.content import EMPTY
from pagecompose.errors import ArgumentError, require_name
from pagecompose.orchestrator import CompositionOrchestrator
from pagecompose.sections import SectionRegistry

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import logging

    from jinja2 import Environment
    from markupsafe import Markup

    from pagecompose.content import ContentSink
    from pagecompose.tracing import Tracer


@dc.dataclass(slots=True)
class ViewContext:
    """State shared by every page executed in one render pass.

    Attributes
    ----------
    view_path : str
        Template originally requested by the caller.
    output : ContentSink
        Sink of the page currently executing. Section renderers resolve it
        when invoked, so they write into the layout that pulls them.
    """

    view_path: str
    output: ContentSink


# Statements whose body runs once, in the page's own frame, while the page renders.
_SECTION_SCOPES = (nodes.Template, nodes.If, nodes.Block)


def _nested_section_calls(
    node: nodes.Node, *, nested: bool = False
) -> cabc.Iterator[nodes.CallBlock]:
    if (
        nested
        and isinstance(node, nodes.CallBlock)
        and isinstance(node.call.node, nodes.Name)
        and node.call.node.name == "define_section"
    ):
        yield node
    nested = nested or not isinstance(node, _SECTION_SCOPES)
    for child in node.iter_child_nodes():
        yield from _nested_section_calls(child, nested=nested)


def check_section_placement(env: Environment, path: str) -> None:
    """Reject ``define_section`` blocks nested in loops, macros, or call blocks.

    A section body runs when the layout pulls it, after the defining page has
    finished. Loop variables and macro arguments are gone by then, so only
    blocks at template top level, inside ``{% if %}``, or inside
    ``{% block %}`` are accepted.

    Raises
    ------
    ArgumentError
        If ``path`` contains a nested ``define_section`` call block.
    """
    if env.loader is None:
        return
    source, filename, _ = env.loader.get_source(env, path)
    for call in _nested_section_calls(env.parse(source, path, filename)):
        args = call.call.args
        name = args[0].value if args and isinstance(args[0], nodes.Const) else "?"
        msg = (
            f"define_section('{name}') in '{path}' line {call.lineno} must be "
            "used at template top level, not inside a loop, macro, or call block."
        )
        raise ArgumentError(msg)


class PageExecution:
    """One template's run within a render pass.

    A page owns the sections it defines (consumed by its layout, if it picks
    one) and an orchestrator bound to the previous page's sections and body
    when it runs as a layout.
    """

    def __init__(
        self,
        path: str,
        view_context: ViewContext,
        *,
        previous_sections: SectionRegistry | None = None,
        body: Markup | None = None,
        tracer: Tracer | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.path = path
        self.view_context = view_context
        self.sections = SectionRegistry()
        self.layout: str | None = None
        self.orchestrator = CompositionOrchestrator(
            path,
            view_context.view_path,
            sections=previous_sections,
            body=body,
            tracer=tracer,
            logger=logger,
        )

    def define_section(
        self,
        name: str,
        caller: cabc.Callable[[], typ.Any] | None = None,
    ) -> Markup:
        """Define a section from the body of a ``{% call %}`` block.

        The block is not rendered here. Its macro is invoked when the layout
        pulls the section, and the result is written to the sink active at
        that moment.
        """
        if caller is None:
            msg = (
                f"define_section('{name}') in '{self.path}' must be used as "
                "{% call define_section(name) %}...{% endcall %}."
            )
            raise ArgumentError(msg)
        view_context = self.view_context

        async def render() -> None:
            content = caller()
            if inspect.isawaitable(content):
                content = await content
            await view_context.output.write(content)

        self.sections.define(name, render)
        return EMPTY

    def set_layout(self, path: str) -> Markup:
        """Select the layout that will consume this page's body and sections."""
        self.layout = require_name(path, "path")
        return EMPTY

    async def render_section(
        self,
        name: str,
        required: bool = False,  # noqa: FBT001, FBT002
    ) -> Markup | None:
        return await self.orchestrator.render_section_async(name, required)

    def helpers(self) -> dict[str, typ.Any]:
        """Return the callables injected into the template's render context."""
        orchestrator = self.orchestrator
        return {
            "define_section": self.define_section,
            "set_layout": self.set_layout,
            "render_body": orchestrator.render_body,
            "ignore_body": orchestrator.ignore_body,
            "is_section_defined": orchestrator.is_section_defined,
            "render_section": self.render_section,
            "ignore_section": orchestrator.ignore_section,
            "begin_context": orchestrator.begin_context,
            "end_context": orchestrator.end_context,
        }


__all__ = ["PageExecution", "ViewContext", "check_section_placement"]
