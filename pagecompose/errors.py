"""Exception types raised by the composition engine.

Every error derives from :class:`CompositionError` so callers can catch the
whole family at the request boundary. The concrete types also inherit from
the closest builtin (``ValueError`` for bad arguments, ``RuntimeError`` for
calls made in the wrong state) so generic handlers keep working.
"""

from __future__ import annotations


class CompositionError(Exception):
    """Base class for layout and section composition failures."""


class ArgumentError(CompositionError, ValueError):
    """Raised when a public operation receives a missing or empty identifier."""


class ConflictError(CompositionError):
    """Raised when a section name is defined twice in one registry."""


class InvalidStateError(CompositionError, RuntimeError):
    """Raised when an operation is invoked outside the state it requires."""


class LayoutCycleError(InvalidStateError):
    """Raised when a render pass selects the same layout twice."""

    def __init__(self, layout: str, view_path: str) -> None:
        self.layout = layout
        self.view_path = view_path
        msg = (
            f"A circular layout reference was detected when rendering '{view_path}'. "
            f"The layout page '{layout}' has already been rendered."
        )
        super().__init__(msg)


class SectionNotDefinedError(CompositionError):
    """Raised when a required or ignored section is missing from the content page.

    Attributes
    ----------
    section : str
        Name of the section that could not be found.
    path : str
        Template executing the pull (the layout page).
    view_path : str
        Template originally requested for the render pass.
    """

    def __init__(self, section: str, path: str, view_path: str) -> None:
        self.section = section
        self.path = path
        self.view_path = view_path
        msg = (
            f"The layout page '{path}' cannot find the section '{section}' "
            f"in the content page '{view_path}'."
        )
        super().__init__(msg)


class CompositionConfigError(CompositionError, ValueError):
    """Raised when the composition configuration is invalid or incomplete."""


def require_name(name: str | None, argument: str = "name") -> str:
    """Return ``name`` unchanged, rejecting ``None`` and empty strings."""
    if not name:
        msg = f"Argument '{argument}' must be a non-empty string."
        raise ArgumentError(msg)
    return name


__all__ = [
    "ArgumentError",
    "CompositionConfigError",
    "CompositionError",
    "ConflictError",
    "InvalidStateError",
    "LayoutCycleError",
    "SectionNotDefinedError",
    "require_name",
]
