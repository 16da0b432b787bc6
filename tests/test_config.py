"""Unit tests for loading composition configuration YAML."""

from __future__ import annotations

import typing as typ

import pytest

from pagecompose.config import (
    CompositionConfig,
    CompositionConfigError,
    TracingConfig,
    load_composition_config,
)
from pagecompose.tracing import LoggingTracer, NullTracer, RecordingTracer, build_tracer

if typ.TYPE_CHECKING:
    from pathlib import Path


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "compose.yaml"
    path.write_text(text.strip() + "\n", encoding="utf-8")
    return path


def test_defaults_apply_to_empty_file(tmp_path: Path) -> None:
    config = load_composition_config(_write(tmp_path, ""))
    assert config.templates_dir == tmp_path / "templates"
    assert config.autoescape is True
    assert config.tracing == TracingConfig()


def test_values_are_read(tmp_path: Path) -> None:
    config = load_composition_config(
        _write(
            tmp_path,
            """
templates_dir: views
autoescape: false
trim_blocks: false
tracing:
  enabled: true
  backend: record
  events:
    - pagecompose.BeginInstrumentationContext
""",
        )
    )
    assert config.templates_dir == tmp_path / "views"
    assert config.autoescape is False
    assert config.trim_blocks is False
    assert config.lstrip_blocks is True
    assert config.tracing.enabled is True
    assert config.tracing.backend == "record"
    assert config.tracing.events == ["pagecompose.BeginInstrumentationContext"]


def test_absolute_templates_dir_is_kept(tmp_path: Path) -> None:
    views = tmp_path / "elsewhere"
    config = load_composition_config(_write(tmp_path, f"templates_dir: {views}"))
    assert config.templates_dir == views


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="not found"):
        load_composition_config(tmp_path / "missing.yaml")


def test_non_mapping_raises(tmp_path: Path) -> None:
    with pytest.raises(TypeError, match="mapping"):
        load_composition_config(_write(tmp_path, "- one\n- two"))


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("autoescape: maybe", "autoescape"),
        ("tracing: on", "'tracing' must be a mapping"),
        ("tracing:\n  backend: otlp", "Unknown tracing backend 'otlp'"),
        ("tracing:\n  events: begin", "tracing.events"),
        ("tracing:\n  enabled: 1", "enabled"),
    ],
)
def test_invalid_values_raise(tmp_path: Path, text: str, message: str) -> None:
    with pytest.raises(CompositionConfigError, match=message):
        load_composition_config(_write(tmp_path, text))


@pytest.mark.parametrize(
    ("tracing", "expected"),
    [
        (TracingConfig(), NullTracer),
        (TracingConfig(enabled=True), LoggingTracer),
        (TracingConfig(enabled=True, backend="record"), RecordingTracer),
    ],
)
def test_build_tracer(tracing: TracingConfig, expected: type) -> None:
    assert isinstance(build_tracer(tracing), expected)


def test_default_config_disables_tracing() -> None:
    assert isinstance(build_tracer(CompositionConfig().tracing), NullTracer)
