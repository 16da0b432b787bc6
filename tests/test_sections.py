"""Unit tests for the section registry.

These tests cover definition conflicts, case-insensitive lookups, and the
argument checks applied to section names and renderers.

Usage
-----
Run ``pytest tests/test_sections.py -v`` to execute the suite.
"""

from __future__ import annotations

import pytest

from pagecompose.errors import ArgumentError, ConflictError
from pagecompose.sections import SectionRegistry


def _noop() -> None:
    return None


@pytest.mark.parametrize("name", ["Scripts", "title", "side-bar"])
def test_define_then_has(name: str) -> None:
    """A defined name is reported by ``has``."""
    registry = SectionRegistry()
    registry.define(name, _noop)
    assert registry.has(name), f"Expected {name!r} to be defined"


@pytest.mark.parametrize(("first", "second"), [("Scripts", "Scripts"), ("Scripts", "SCRIPTS")])
def test_define_twice_conflicts(first: str, second: str) -> None:
    """Defining the same name twice, ignoring case, is a conflict."""
    registry = SectionRegistry()
    registry.define(first, _noop)
    with pytest.raises(ConflictError, match="already defined"):
        registry.define(second, _noop)


@pytest.mark.parametrize("name", ["", None])
def test_define_rejects_empty_names(name: str | None) -> None:
    registry = SectionRegistry()
    with pytest.raises(ArgumentError):
        registry.define(name, _noop)  # type: ignore[arg-type]
    assert len(registry) == 0


def test_define_rejects_non_callable_renderer() -> None:
    registry = SectionRegistry()
    with pytest.raises(ArgumentError, match="callable"):
        registry.define("Scripts", "<script></script>")  # type: ignore[arg-type]


def test_lookups_ignore_case() -> None:
    """``has``, ``get`` and ``in`` all compare names case-insensitively."""
    registry = SectionRegistry()
    registry.define("Scripts", _noop)
    assert registry.has("scripts")
    assert registry.get("SCRIPTS") is _noop
    assert "sCrIpTs" in registry


def test_missing_lookups_never_raise() -> None:
    """Absent and empty names are simply not found."""
    registry = SectionRegistry()
    assert registry.get("Scripts") is None
    assert registry.get("") is None
    assert not registry.has("")
    assert not registry.has(None)
    assert 42 not in registry


def test_names_keep_definition_spelling_and_order() -> None:
    registry = SectionRegistry()
    registry.define("Title", _noop)
    registry.define("Scripts", _noop)
    assert registry.names() == ["Title", "Scripts"]
    assert list(registry) == ["Title", "Scripts"]
    assert len(registry) == 2
    assert registry


def test_empty_registry_is_falsy() -> None:
    assert not SectionRegistry()
