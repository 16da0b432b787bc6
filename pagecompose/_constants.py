"""Common literal values used across pagecompose.

Diagnostic message templates and tracing event names live here so the
orchestrator, the render engine, and tests share the same strings.

Examples
--------
>>> from pagecompose import _constants
>>> _constants.SECTION_ALREADY_RENDERED % "Scripts"
'section already rendered: Scripts'
>>> _constants.BEGIN_CONTEXT_EVENT.endswith("BeginInstrumentationContext")
True
"""

SECTION_ALREADY_RENDERED = "section already rendered: %s"
SECTIONS_NOT_RENDERED = "section(s) not rendered: %s"
BODY_NOT_RENDERED = "body not rendered: render_body was not called"

BEGIN_CONTEXT_EVENT = "pagecompose.BeginInstrumentationContext"
END_CONTEXT_EVENT = "pagecompose.EndInstrumentationContext"

DEFAULT_CONFIG_ENV = "PAGECOMPOSE_"
