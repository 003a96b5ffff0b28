"""Convenience functions for one-call rendering."""

from .render import new_builder, render, render_component, render_page

__all__ = ["new_builder", "render", "render_component", "render_page"]
