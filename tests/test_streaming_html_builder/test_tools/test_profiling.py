"""Tests for render profiling."""

import json
import tempfile
from pathlib import Path
from unittest.mock import MagicMock, patch

from streaming_html_builder.markup.builder import Builder
from streaming_html_builder.shared.config import RenderConfig
from streaming_html_builder.tools.profiling import (
    PerformanceReport,
    PhasePerformance,
    ProfilingSession,
    RenderProfiler,
    benchmark_builders,
    sample_page,
)


class TestProfilingData:
    """Test the profiling data classes."""

    def test_phase_metrics(self):
        """Test derived phase values."""
        phase = PhasePerformance("render", 1.0, 1.5, 1000, 1600, 0.0)
        assert phase.duration_ms == 500.0
        assert phase.memory_delta == 600

    def test_session_throughput(self):
        """Test throughput of a session."""
        session = ProfilingSession("s", start_time=0.0, end_time=2.0, output_size=2 * 1024 * 1024)
        assert session.total_duration_ms == 2000.0
        assert session.throughput_mb_per_s == 1.0

        instant = ProfilingSession("t", start_time=1.0, end_time=1.0)
        assert instant.throughput_mb_per_s == 0.0

    def test_report_aggregates(self):
        """Test averages across sessions."""
        sessions = [
            ProfilingSession("a", 0.0, 0.010, memory_start=0, memory_end=100),
            ProfilingSession("b", 0.0, 0.030, memory_start=0, memory_end=50),
        ]
        report = PerformanceReport(sessions=sessions, generation_time=0.0)
        assert report.session_count == 2
        assert abs(report.average_duration_ms - 20.0) < 1e-9
        assert report.peak_memory_delta == 100
        assert report.to_dict()["summary"]["session_count"] == 2
        assert "sessions" not in report.to_dict()
        assert len(report.to_dict(include_sessions=True)["sessions"]) == 2

    def test_empty_report(self):
        """Test aggregates without sessions."""
        report = PerformanceReport(sessions=[], generation_time=0.0)
        assert report.average_duration_ms == 0.0
        assert report.average_throughput_mb_per_s == 0.0
        assert report.peak_memory_delta == 0


class TestRenderProfiler:
    """Test RenderProfiler."""

    def test_profile_render_session(self):
        """Test session and phase context managers."""
        profiler = RenderProfiler(enable_memory_tracking=False)
        with profiler.profile_render("page") as session:
            builder = Builder(RenderConfig())
            with profiler.profile_phase(session, "render") as phase:
                sample_page(builder)
            session.output_size = len(builder.to_string())

        assert profiler.current_session is None
        assert profiler.sessions == [session]
        assert session.phases == [phase]
        assert session.output_size > 0
        assert session.end_time >= session.start_time
        assert phase.memory_delta == 0

    def test_memory_tracking_uses_psutil(self):
        """Test resident memory sampling through psutil."""
        process = MagicMock()
        process.memory_info.side_effect = [MagicMock(rss=1000), MagicMock(rss=5000)]
        process.cpu_percent.return_value = 0.0
        with patch("streaming_html_builder.tools.profiling.psutil.Process", return_value=process):
            profiler = RenderProfiler()
            with profiler.profile_render("mem") as session:
                pass
        assert session.memory_delta == 4000

    def test_save_and_clear(self):
        """Test saving a report and clearing sessions."""
        profiler = RenderProfiler(enable_memory_tracking=False)
        with profiler.profile_render("one"):
            pass
        report = profiler.generate_report()

        with tempfile.TemporaryDirectory() as tmp_dir:
            output = Path(tmp_dir) / "report.json"
            profiler.save_report(report, output)
            data = json.loads(output.read_text())
        assert data["summary"]["session_count"] == 1
        assert data["sessions"][0]["session_id"] == "one"

        profiler.clear_sessions()
        assert profiler.sessions == []
        assert report.session_count == 1


class TestBenchmark:
    """Test builder benchmarking."""

    def test_benchmark_builders(self):
        """Test fresh and pooled strategies with the sample page."""
        results = benchmark_builders(iterations=3)
        assert set(results) == {"fresh", "pooled"}
        for name, report in results.items():
            assert report.session_count == 3
            assert all(s.metadata["strategy"] == name for s in report.sessions)
            assert all(s.output_size == report.sessions[0].output_size for s in report.sessions)

    def test_benchmark_custom_render(self):
        """Test a caller supplied render function."""
        results = benchmark_builders(lambda b: b.p().t("x"), iterations=1)
        assert results["fresh"].sessions[0].output_size == len("<p>x</p>")
        assert results["pooled"].sessions[0].metadata["elements_opened"] == 1

    def test_sample_page_is_well_formed(self):
        """Test that the sample page closes everything it opens."""
        builder = Builder(RenderConfig())
        sample_page(builder)
        assert builder.metrics.elements_pending == 0
        assert builder.to_string().startswith('<!DOCTYPE html><html lang="en">')
        assert '<td class="count">147</td>' in builder.to_string()
