"""Registry of named sections defined by a content page.

A content page defines each section once, handing over a zero-argument
renderer that writes the section's markup into the active output sink when
the layout pulls it. Names are compared case-insensitively.

Example
-------
>>> registry = SectionRegistry()
>>> registry.define("Scripts", lambda: None)
>>> registry.has("scripts")
True
>>> registry.get("styles") is None
True
"""

from __future__ import annotations

import typing as typ

from .errors import ArgumentError, ConflictError, require_name

if typ.TYPE_CHECKING:
    import collections.abc as cabc

SectionRenderer = typ.Callable[[], typ.Awaitable[None] | None]


def section_key(name: str) -> str:
    """Return the case-insensitive lookup key for ``name``."""
    return name.casefold()


class SectionRegistry:
    """Case-insensitive mapping of section names to deferred renderers."""

    def __init__(self) -> None:
        self._renderers: dict[str, SectionRenderer] = {}
        self._names: dict[str, str] = {}

    def define(self, name: str, renderer: SectionRenderer) -> None:
        """Register ``renderer`` under ``name``.

        Raises
        ------
        ArgumentError
            If ``name`` is empty or ``renderer`` is not callable.
        ConflictError
            If a section with the same name (ignoring case) already exists.
        """
        require_name(name)
        if not callable(renderer):
            msg = f"Renderer for section '{name}' must be callable."
            raise ArgumentError(msg)
        key = section_key(name)
        if key in self._renderers:
            msg = f"Section '{name}' is already defined."
            raise ConflictError(msg)
        self._renderers[key] = renderer
        self._names[key] = name

    def has(self, name: str | None) -> bool:
        return bool(name) and section_key(name) in self._renderers

    def get(self, name: str | None) -> SectionRenderer | None:
        """Return the renderer for ``name`` or ``None`` when it is not defined."""
        if not name:
            return None
        return self._renderers.get(section_key(name))

    def names(self) -> list[str]:
        """Return section names as first spelled, in definition order."""
        return list(self._names.values())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def __iter__(self) -> cabc.Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._renderers)

    def __repr__(self) -> str:
        return f"SectionRegistry({self.names()!r})"


__all__ = ["SectionRegistry", "SectionRenderer", "section_key"]
