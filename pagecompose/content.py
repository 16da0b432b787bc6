"""Output sinks and content values shared by pages, layouts, and sections.

Templates write rendered markup into a single append-only sink per page
execution. Section renderers write into whichever sink is active when they
are invoked, so a section defined by a content page lands in the layout's
output at the point where the layout pulls it.

Examples
--------
>>> import asyncio
>>> sink = BufferSink()
>>> asyncio.run(sink.write("<p>hi</p>"))
>>> sink.content
Markup('<p>hi</p>')
"""

from __future__ import annotations

import typing as typ

from markupsafe import Markup

if typ.TYPE_CHECKING:
    import collections.abc as cabc


class SectionToken(Markup):
    """Empty markup returned by section pulls.

    The section's markup was already written to the active sink, so the token
    carries no payload. It is truthy, unlike the ``None`` returned for a missing
    optional section, so ``{{ render_section("Title") or "Default" }}`` only falls
    back when nothing was rendered.
    """

    __slots__ = ()

    def __bool__(self) -> bool:
        return True


EMPTY = SectionToken()


def _is_blank(content: str | None) -> bool:
    return content is None or content == ""


@typ.runtime_checkable
class ContentSink(typ.Protocol):
    """Append-only destination for rendered content."""

    async def write(self, content: str | None) -> None:
        """Append ``content``; ``None`` and empty strings are ignored."""
        ...


class BufferSink:
    """Collect writes in memory and expose them as a single markup value."""

    def __init__(self) -> None:
        self._parts: list[str] = []

    async def write(self, content: str | None) -> None:
        if not _is_blank(content):
            self._parts.append(str(content))

    @property
    def content(self) -> Markup:
        """Return everything written so far as trusted markup."""
        return Markup("".join(self._parts))

    def has_content(self) -> bool:
        """Return ``True`` when any non-whitespace content was written."""
        return any(part.strip() for part in self._parts)


class StreamSink:
    """Forward each write to an async ``send`` callable, such as a response writer.

    Parameters
    ----------
    send : Callable[[str], Awaitable[None]]
        Coroutine function receiving each non-empty chunk in write order.
    """

    def __init__(self, send: cabc.Callable[[str], cabc.Awaitable[None]]) -> None:
        self._send = send
        self.chunks_written = 0

    async def write(self, content: str | None) -> None:
        if _is_blank(content):
            return
        await self._send(str(content))
        self.chunks_written += 1


__all__ = ["EMPTY", "BufferSink", "ContentSink", "SectionToken", "StreamSink"]
