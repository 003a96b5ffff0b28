"""Tests for the package level API."""

import types

import streaming_html_builder
from streaming_html_builder import diagnostics
from streaming_html_builder.diagnostics.reporting import DISABLED_MESSAGE
from streaming_html_builder import (
    NO_VALUE,
    Builder,
    DiagnosticsContext,
    RenderConfig,
    pretty_html,
    render,
)


class TestPackageMetadata:
    """Test package metadata and exports."""

    def test_version(self):
        """Test version metadata."""
        assert streaming_html_builder.__version__ == "0.1.0"
        assert streaming_html_builder.__author__

    def test_all_exports_resolve(self):
        """Test that every name in __all__ exists."""
        for name in streaming_html_builder.__all__:
            assert hasattr(streaming_html_builder, name), name
            assert not isinstance(getattr(streaming_html_builder, name), types.ModuleType), name

    def test_exported_functions_callable(self):
        """Test that exported operations are functions, not submodules."""
        for name in (
            "new_builder", "render", "render_component", "render_page", "pretty_html",
            "new_element", "new_text_element", "acquire_builder", "pooled_builder",
            "release_builder", "clear_issues", "disable", "enable", "is_enabled", "report",
        ):
            assert callable(getattr(streaming_html_builder, name)), name
        assert callable(diagnostics.report)

    def test_module_level_report(self):
        """Test the top level report() against the process-wide context."""
        assert streaming_html_builder.report() == DISABLED_MESSAGE
        streaming_html_builder.enable()
        assert streaming_html_builder.report("json").startswith("{")


class TestProgressiveAPI:
    """Test the three API levels together."""

    def test_level_one(self):
        """Test one-call rendering."""
        assert render(lambda b: b.h2().t("Hi")) == "<h2>Hi</h2>"
        assert pretty_html("<div><p>x</p></div>") == "<div>\n  <p>x</p>\n</div>\n"

    def test_level_two(self):
        """Test a builder driven directly."""
        b = Builder(RenderConfig().override(builder__emit_doctype=False))
        assert b.div().r(b.span().t("x")) is NO_VALUE
        assert str(b) == "<div><span>x</span></div>"

    def test_level_three(self):
        """Test diagnostics on a private context."""
        context = DiagnosticsContext()
        with context.session():
            b = Builder(diagnostics=context)
            b.body().r(b.div())
            assert "**div** tag not closed" in context.report()
        assert len(context) == 0
