"""Tests for the concern table and call-site capture."""

import logging
import threading

from streaming_html_builder import diagnostics
from streaming_html_builder.diagnostics.callsite import (
    UNKNOWN_SITE,
    CallSite,
    _short_path,
    capture_call_site,
)
from streaming_html_builder.diagnostics.concerns import DiagnosticsContext, default_context
from streaming_html_builder.markup.builder import Builder
from streaming_html_builder.shared.config import DiagnosticsConfig, RenderConfig
from streaming_html_builder.shared.result import ConcernKind

NO_DOCTYPE = RenderConfig().override(builder__emit_doctype=False)


class TestCallSite:
    """Test suite for caller location capture."""

    def test_capture_from_test_code(self):
        """Test that the first frame outside the package is returned."""
        site = capture_call_site()
        assert site.known
        assert site.function == "test_capture_from_test_code"
        assert site.location.startswith("test_diagnostics/test_concerns.py:")

    def test_unknown_site(self):
        """Test the placeholder for missing locations."""
        assert not UNKNOWN_SITE.known
        assert str(UNKNOWN_SITE) == "unknown location"

    def test_str(self):
        """Test the human readable form."""
        assert str(CallSite("views/home.py:12", "index")) == "index (views/home.py:12)"

    def test_short_path(self):
        """Test that only the last two path components are kept."""
        assert _short_path("/srv/app/views/home.py") == "views/home.py"
        assert _short_path("home.py") == "home.py"
        assert _short_path("C:\\app\\views\\home.py") == "views/home.py"


class TestDiagnosticsContext:
    """Test suite for DiagnosticsContext."""

    def test_disabled_by_default(self):
        """Test that a new context records nothing."""
        context = DiagnosticsContext()
        builder = Builder(NO_DOCTYPE, diagnostics=context)
        builder.div()
        builder.p().r("unwrapped")
        assert not context.enabled
        assert len(context) == 0

    def test_disable_clears(self):
        """Test that disabling drops every record."""
        context = DiagnosticsContext(enabled=True)
        Builder(NO_DOCTYPE, diagnostics=context).div()
        assert len(context) == 1
        context.disable()
        assert len(context) == 0
        assert not context.enabled

    def test_upsert_racing_disable_records_nothing(self):
        """Test that an update finishing after disable() leaves the table empty."""
        context = DiagnosticsContext(enabled=True)
        element = Builder(NO_DOCTYPE, diagnostics=context).deferred("div")

        class DisablingLock:
            """Lock that lets disable() win right before the update acquires it."""

            def __init__(self):
                self.inner = threading.Lock()

            def __enter__(self):
                self.inner.acquire()
                context._enabled = False
                context._concerns.clear()
                return self

            def __exit__(self, *exc_info):
                self.inner.release()

        context._lock = DisablingLock()
        context.upsert(ConcernKind.OPEN_TAG, element)
        context.upsert(ConcernKind.OTHER, element, "late issue")
        context._lock = threading.Lock()

        assert not context.enabled
        assert len(context) == 0

    def test_clear_issues_keeps_flag(self):
        """Test clearing between requests of a long-lived process."""
        context = DiagnosticsContext(enabled=True)
        Builder(NO_DOCTYPE, diagnostics=context).div()
        context.clear_issues()
        assert len(context) == 0
        assert context.enabled

    def test_session(self):
        """Test the enable-yield-disable context manager."""
        context = DiagnosticsContext()
        with context.session() as active:
            assert active is context
            assert context.enabled
            Builder(NO_DOCTYPE, diagnostics=context).div()
            assert len(context) == 1
        assert not context.enabled
        assert len(context) == 0

    def test_identity_length(self):
        """Test configurable identity length."""
        context = DiagnosticsContext(DiagnosticsConfig(id_length=12))
        assert len(context.new_identity()) == 12
        assert context.new_identity() != context.new_identity()

    def test_custom_id_attribute(self):
        """Test the configurable identity attribute name."""
        context = DiagnosticsContext(DiagnosticsConfig(id_attribute="data-trace"), enabled=True)
        builder = Builder(NO_DOCTYPE, diagnostics=context)
        builder.div().r()
        assert builder.to_string().startswith('<div data-trace="')

    def test_snapshot_is_independent(self):
        """Test that concerns() returns copies of the issue lists."""
        context = DiagnosticsContext(enabled=True)
        Builder(NO_DOCTYPE, diagnostics=context).p().r("x")
        snapshot = context.concerns()
        snapshot[0].issues.append("tampered")
        assert "tampered" not in context.concerns()[0].issues

    def test_close_without_open_record_logged(self, caplog):
        """Test the structurally impossible close is logged, not raised."""
        context = DiagnosticsContext()
        builder = Builder(NO_DOCTYPE, diagnostics=context)
        element = builder.div()
        context.enable()
        with caplog.at_level(logging.WARNING, logger="streaming_html_builder.diagnostics.concerns"):
            element.r()
        assert builder.to_string() == "<div></div>"
        assert any("No open tag found" in r.getMessage() for r in caplog.records)

    def test_other_without_issue_ignored(self, caplog):
        """Test that an empty issue text is not recorded."""
        context = DiagnosticsContext(enabled=True)
        element = Builder(NO_DOCTYPE, diagnostics=context).br()
        with caplog.at_level(logging.WARNING, logger="streaming_html_builder.diagnostics.concerns"):
            context.upsert(ConcernKind.OTHER, element, "")
        assert len(context) == 0
        assert any("without an issue" in r.getMessage() for r in caplog.records)

    def test_void_open_close_ignored(self):
        """Test that void elements never enter the table as open or closed."""
        context = DiagnosticsContext(enabled=True)
        element = Builder(NO_DOCTYPE, diagnostics=context).hr()
        context.upsert(ConcernKind.OPEN_TAG, element)
        context.upsert(ConcernKind.CLOSED_TAG, element)
        assert len(context) == 0

    def test_concurrent_render_passes(self):
        """Test that concurrent builders sharing a context leave it consistent."""
        context = DiagnosticsContext(enabled=True)

        def render_pass(leak):
            builder = Builder(NO_DOCTYPE, diagnostics=context)
            for _ in range(100):
                builder.div().r(builder.span().t("x"))
            if leak:
                builder.section()

        threads = [threading.Thread(target=render_pass, args=(i % 2 == 0,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        open_tags = context.open_tags()
        assert len(open_tags) == 4
        assert {element.name for element in open_tags} == {"section"}


class TestProcessWideContext:
    """Test suite for the module-level diagnostics functions."""

    def test_enable_disable(self):
        """Test toggling the default context."""
        assert not diagnostics.is_enabled()
        diagnostics.enable()
        assert diagnostics.is_enabled()
        assert default_context().enabled
        diagnostics.disable()
        assert not diagnostics.is_enabled()

    def test_builders_use_default_context(self):
        """Test that builders without a context report to the default one."""
        diagnostics.enable()
        Builder(NO_DOCTYPE).article()
        assert len(default_context().open_tags()) == 1

        diagnostics.clear_issues()
        assert len(default_context()) == 0
        assert diagnostics.is_enabled()

    def test_explicit_context_isolated(self):
        """Test that an explicit context does not leak into the default one."""
        diagnostics.enable()
        private = DiagnosticsContext(enabled=True)
        Builder(NO_DOCTYPE, diagnostics=private).div()
        assert len(private) == 1
        assert len(default_context()) == 0
