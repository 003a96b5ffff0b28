"""Streaming HTML Builder.

Writes HTML straight to a buffer while the page is being described: an
element's opening tag is written when it is created and its closing tag when
it is rendered, with no intermediate tree. Opt-in diagnostics catch elements
that were never closed and misuse of render calls.

Progressive API Disclosure:
- Level 1: Simple functions - render(), render_page(), pretty_html()
- Level 2: Builders - Builder class, tag shortcuts, components
- Level 3: Pooling and diagnostics - BuilderPool, DiagnosticsContext
"""

__version__ = "0.1.0"
__author__ = "Streaming HTML Builder Team"

# Level 1: Simple functions
from .api import new_builder, render, render_component, render_page
from .formatting import PrettyPrinter, pretty_html

# Level 2: Builders and elements
from .markup import (
    NO_VALUE,
    Builder,
    Component,
    Element,
    new_element,
    new_text_element,
)

# Level 3: Pooling and diagnostics
from .markup import BuilderPool, acquire_builder, pooled_builder, release_builder
from .diagnostics import (
    DiagnosticsContext,
    clear_issues,
    disable,
    enable,
    is_enabled,
    report,
)

# Configuration classes for advanced usage
from .shared.config import ConfigValidationError, RenderConfig

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions
    "new_builder",
    "render",
    "render_component",
    "render_page",
    "pretty_html",
    "PrettyPrinter",

    # Level 2: Builders and elements
    "NO_VALUE",
    "Builder",
    "Component",
    "Element",
    "new_element",
    "new_text_element",

    # Level 3: Pooling and diagnostics
    "BuilderPool",
    "acquire_builder",
    "pooled_builder",
    "release_builder",
    "DiagnosticsContext",
    "clear_issues",
    "disable",
    "enable",
    "is_enabled",
    "report",

    # Configuration classes
    "ConfigValidationError",
    "RenderConfig",
]
