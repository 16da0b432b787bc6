"""Tests for the ``pagecompose render`` command.

The command function is called directly with keyword arguments, the way the
Cyclopts app dispatches it, so no subprocess or argv parsing is involved.
"""

from __future__ import annotations

import json
import typing as typ

import pytest
from bs4 import BeautifulSoup

from pagecompose import cli
from pagecompose._constants import BEGIN_CONTEXT_EVENT

if typ.TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def templates(tmp_path: Path) -> Path:
    """Write a layout and a content page into a temporary templates directory."""
    root = tmp_path / "templates"
    root.mkdir()
    (root / "layout.html").write_text(
        "<html><head><title>{{ render_section('Title') }}</title></head>"
        "<body>{{ begin_context(0, 6, true) }}{{ render_body() }}{{ end_context() }}"
        "</body></html>",
        encoding="utf-8",
    )
    (root / "index.html").write_text(
        "{{ set_layout('layout.html') }}"
        "{% call define_section('Title') %}{{ site_name }}{% endcall %}"
        "<h1>{{ heading }}</h1>",
        encoding="utf-8",
    )
    return root


@pytest.fixture
def context_file(tmp_path: Path) -> Path:
    path = tmp_path / "context.yaml"
    path.write_text("site_name: df12\nheading: Welcome\n", encoding="utf-8")
    return path


def test_render_writes_output_file(
    tmp_path: Path,
    templates: Path,
    context_file: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    output = tmp_path / "public" / "index.html"
    cli.render(
        "index.html",
        config=tmp_path / "missing.yaml",
        templates_dir=templates,
        context=context_file,
        output=output,
    )
    html = output.read_text(encoding="utf-8")
    assert html.endswith("\n")
    soup = BeautifulSoup(html, "html.parser")
    assert soup.title is not None and soup.title.get_text() == "df12"
    heading = soup.select_one("body h1")
    assert heading is not None and heading.get_text() == "Welcome"
    assert "wrote" in capsys.readouterr().out


def test_render_defaults_to_stdout(
    tmp_path: Path,
    templates: Path,
    context_file: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    cli.render(
        "index.html",
        config=tmp_path / "missing.yaml",
        templates_dir=templates,
        context=context_file,
    )
    out = capsys.readouterr().out
    assert "<h1>Welcome</h1>" in out
    assert "wrote" not in out


def test_render_reads_templates_dir_from_config(
    tmp_path: Path, templates: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    config = tmp_path / "compose.yaml"
    config.write_text(f"templates_dir: {templates.name}\n", encoding="utf-8")
    cli.render("index.html", config=config)
    assert "<h1></h1>" in capsys.readouterr().out


def test_render_writes_trace_events(
    tmp_path: Path, templates: Path, context_file: Path
) -> None:
    trace = tmp_path / "trace.json"
    cli.render(
        "index.html",
        config=tmp_path / "missing.yaml",
        templates_dir=templates,
        context=context_file,
        output=tmp_path / "index.html",
        trace_output=trace,
    )
    events = json.loads(trace.read_text(encoding="utf-8"))
    assert events[0] == {
        "name": BEGIN_CONTEXT_EVENT,
        "path": "layout.html",
        "position": 0,
        "length": 6,
        "is_literal": True,
    }
    assert events[1]["path"] == "layout.html"
    assert "position" not in events[1]


def test_missing_context_file_raises(tmp_path: Path, templates: Path) -> None:
    with pytest.raises(FileNotFoundError, match="Context file"):
        cli.render(
            "index.html",
            config=tmp_path / "missing.yaml",
            templates_dir=templates,
            context=tmp_path / "nope.yaml",
        )


def test_context_must_be_a_mapping(tmp_path: Path) -> None:
    path = tmp_path / "context.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(TypeError, match="mapping"):
        cli._load_context(path)
