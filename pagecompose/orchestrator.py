"""Gate and record a layout's consumption of its content page.

A :class:`CompositionOrchestrator` is created for exactly one layout
execution. It is bound to the content page's :class:`SectionRegistry` and
captured body, exposes the pull operations the layout template calls, and
finally checks that everything the content page produced was either rendered
or explicitly ignored.

Authoring mistakes split into two groups:

* Fatal errors raised to the calling template: pulling outside a layout,
  requiring or ignoring an undefined section, empty names.
* Diagnostics logged as warnings: rendering a section twice, and sections or
  a body left unconsumed at the end of the layout. The render output is still
  returned in those cases.

Examples
--------
>>> import asyncio
>>> from pagecompose.sections import SectionRegistry
>>> registry = SectionRegistry()
>>> registry.define("Title", lambda: None)
>>> orchestrator = CompositionOrchestrator(
...     "layout.html", "index.html", sections=registry
... )
>>> asyncio.run(orchestrator.render_section_async("title"))
SectionToken('')
>>> orchestrator.state.rendered_sections
{'title'}
"""

from __future__ import annotations

import asyncio
import dataclasses as dc
import inspect
import logging
import typing as typ

from ._constants import (
    BEGIN_CONTEXT_EVENT,
    BODY_NOT_RENDERED,
    END_CONTEXT_EVENT,
    SECTION_ALREADY_RENDERED,
    SECTIONS_NOT_RENDERED,
)
from .content import EMPTY
from .errors import InvalidStateError, SectionNotDefinedError, require_name
from .sections import section_key
from .tracing import NullTracer, TraceEvent

if typ.TYPE_CHECKING:
    from markupsafe import Markup

    from .sections import SectionRegistry
    from .tracing import Tracer

log = logging.getLogger(__name__)


@dc.dataclass(slots=True)
class RenderState:
    """Consumption bookkeeping for one layout execution.

    Attributes
    ----------
    rendered_sections : set[str]
        Casefolded names pulled through ``render_section``.
    ignored_sections : set[str] or None
        Casefolded names suppressed through ``ignore_section``; allocated on
        first use.
    body_rendered : bool
        Set by the first successful ``render_body`` call.
    body_ignored : bool
        Set by ``ignore_body``.
    """

    rendered_sections: set[str] = dc.field(default_factory=set)
    ignored_sections: set[str] | None = None
    body_rendered: bool = False
    body_ignored: bool = False

    def ignore(self, key: str) -> None:
        if self.ignored_sections is None:
            self.ignored_sections = set()
        self.ignored_sections.add(key)

    def is_ignored(self, key: str) -> bool:
        return self.ignored_sections is not None and key in self.ignored_sections


class CompositionOrchestrator:
    """Expose body and section pulls to a layout and validate completeness."""

    def __init__(
        self,
        path: str,
        view_path: str,
        *,
        sections: SectionRegistry | None = None,
        body: Markup | None = None,
        tracer: Tracer | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Bind the orchestrator to a content page's output.

        Parameters
        ----------
        path : str
            Template currently executing (the layout).
        view_path : str
            Template originally requested for the render pass.
        sections : SectionRegistry, optional
            Sections defined by the previous page. ``None`` means the current
            page is not running as a layout and every pull fails.
        body : Markup, optional
            Captured body of the previous page, if it produced one.
        tracer : Tracer, optional
            Receiver for ``begin_context``/``end_context`` events.
        logger : logging.Logger, optional
            Destination for diagnostics; defaults to this module's logger.
        """
        self.path = path
        self.view_path = view_path
        self.sections = sections
        self.body = body
        self.state = RenderState()
        self._tracer = tracer or NullTracer()
        self._log = logger or log

    @property
    def is_layout(self) -> bool:
        """Return ``True`` when a content page's sections are bound."""
        return self.sections is not None

    def render_body(self) -> Markup:
        """Return the content page's body and mark it as rendered.

        Raises
        ------
        InvalidStateError
            If no body was captured for this pass, or ``ignore_body`` was
            already called.
        """
        if self.body is None:
            raise InvalidStateError(self._cannot_be_called("render_body"))
        if self.state.body_ignored:
            msg = f"render_body cannot be called in '{self.path}' after ignore_body."
            raise InvalidStateError(msg)
        self.state.body_rendered = True
        return self.body

    def ignore_body(self) -> None:
        """Suppress the body-not-rendered diagnostic for this layout.

        Raises
        ------
        InvalidStateError
            If the body was already rendered by this layout.
        """
        if self.state.body_rendered:
            msg = f"ignore_body cannot be called in '{self.path}' after render_body."
            raise InvalidStateError(msg)
        self.state.body_ignored = True

    def is_section_defined(self, name: str) -> bool:
        require_name(name)
        sections = self._ensure_method_can_be_invoked("is_section_defined")
        return sections.has(name)

    def render_section(self, name: str, required: bool = False) -> Markup | None:  # noqa: FBT001, FBT002
        """Render ``name`` synchronously and return the ``EMPTY`` token.

        This drives :meth:`render_section_async` to completion on a private
        event loop, so it cannot be used while a loop is already running in
        this thread.
        """
        require_name(name)
        self._ensure_method_can_be_invoked("render_section")
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(self._render_section_core(name, required))
        msg = (
            f"render_section cannot block inside a running event loop in "
            f"'{self.path}'; await render_section_async instead."
        )
        raise InvalidStateError(msg)

    async def render_section_async(
        self,
        name: str,
        required: bool = True,  # noqa: FBT001, FBT002
    ) -> Markup | None:
        """Render ``name`` into the active sink.

        Returns
        -------
        Markup or None
            ``EMPTY`` when the section was rendered; its markup has already
            been written. ``None`` when an optional section is missing.

        Raises
        ------
        InvalidStateError
            If no content page sections are bound.
        SectionNotDefinedError
            If ``required`` is true and the section does not exist.
        """
        require_name(name)
        self._ensure_method_can_be_invoked("render_section_async")
        return await self._render_section_core(name, required)

    async def _render_section_core(self, name: str, required: bool) -> Markup | None:  # noqa: FBT001
        sections = self._ensure_method_can_be_invoked("render_section_async")
        key = section_key(name)
        if key in self.state.rendered_sections:
            self._log.warning(
                SECTION_ALREADY_RENDERED,
                name,
                extra={"section": name, "path": self.path},
            )

        renderer = sections.get(name)
        if renderer is not None:
            self.state.rendered_sections.add(key)
            result = renderer()
            if inspect.isawaitable(result):
                await result
            return EMPTY

        if required:
            raise SectionNotDefinedError(name, self.path, self.view_path)
        return None

    def ignore_section(self, name: str) -> None:
        """Mark ``name`` as deliberately not rendered.

        Raises
        ------
        SectionNotDefinedError
            If the content page never defined ``name``.
        """
        require_name(name)
        sections = self._ensure_method_can_be_invoked("ignore_section")
        if not sections.has(name):
            raise SectionNotDefinedError(name, self.path, self.view_path)
        self.state.ignore(section_key(name))

    def ensure_rendered_body_or_sections(self) -> None:
        """Log a warning for any section or body the layout left unconsumed.

        When the content page defined sections, every one of them must have
        been rendered or ignored. Otherwise a captured body must have been
        rendered or ignored. This check never raises.
        """
        if self.sections:
            missing = [
                name
                for name in self.sections.names()
                if section_key(name) not in self.state.rendered_sections
                and not self.state.is_ignored(section_key(name))
            ]
            if missing:
                self._log.warning(
                    SECTIONS_NOT_RENDERED,
                    ", ".join(missing),
                    extra={"sections": missing, "path": self.path},
                )
        elif (
            self.body is not None
            and not self.state.body_rendered
            and not self.state.body_ignored
        ):
            self._log.warning(BODY_NOT_RENDERED, extra={"path": self.path})

    def begin_context(self, position: int, length: int, is_literal: bool) -> None:  # noqa: FBT001
        """Publish the start of a literal or evaluated template region."""
        if self._tracer.is_enabled(BEGIN_CONTEXT_EVENT):
            self._tracer.emit(
                TraceEvent(
                    name=BEGIN_CONTEXT_EVENT,
                    path=self.path,
                    position=position,
                    length=length,
                    is_literal=is_literal,
                )
            )

    def end_context(self) -> None:
        if self._tracer.is_enabled(END_CONTEXT_EVENT):
            self._tracer.emit(TraceEvent(name=END_CONTEXT_EVENT, path=self.path))

    def _ensure_method_can_be_invoked(self, method: str) -> SectionRegistry:
        if self.sections is None:
            raise InvalidStateError(self._cannot_be_called(method))
        return self.sections

    def _cannot_be_called(self, method: str) -> str:
        return (
            f"{method} invocation in '{self.path}' is invalid. {method} cannot be "
            "called outside a content page's layout context."
        )


__all__ = ["CompositionOrchestrator", "RenderState"]
