"""Jinja2 render engine that chains content pages through their layouts."""

from .page import PageExecution, ViewContext
from .view import LayoutView

__all__ = ["LayoutView", "PageExecution", "ViewContext"]
