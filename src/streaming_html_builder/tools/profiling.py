"""Render profiling for streaming HTML builders.

Measures wall time, resident memory and output size of render passes, and
compares fresh builders against pooled ones.
"""

import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import psutil

from streaming_html_builder.markup.builder import Builder
from streaming_html_builder.markup.pool import BuilderPool
from streaming_html_builder.shared.config import RenderConfig
from streaming_html_builder.shared.logging import get_logger


@dataclass
class PhasePerformance:
    """Metrics for one phase of a render session, e.g. rendering or pretty-printing."""

    phase_name: str
    start_time: float
    end_time: float
    memory_start: int  # bytes
    memory_end: int  # bytes
    cpu_percent: float
    operations_count: int = 0

    @property
    def duration_ms(self) -> float:
        """Phase duration in milliseconds."""
        return (self.end_time - self.start_time) * 1000

    @property
    def memory_delta(self) -> int:
        """Resident memory change in bytes."""
        return self.memory_end - self.memory_start


@dataclass
class ProfilingSession:
    """One profiled render pass."""

    session_id: str
    start_time: float
    end_time: float
    output_size: int = 0  # characters
    memory_start: int = 0
    memory_end: int = 0
    phases: List[PhasePerformance] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def total_duration_ms(self) -> float:
        """Total session duration in milliseconds."""
        return (self.end_time - self.start_time) * 1000

    @property
    def memory_delta(self) -> int:
        """Resident memory change over the session in bytes."""
        return self.memory_end - self.memory_start

    @property
    def throughput_mb_per_s(self) -> float:
        """Rendered output per second in MB."""
        duration_s = self.end_time - self.start_time
        if duration_s <= 0:
            return 0.0
        return (self.output_size / (1024 * 1024)) / duration_s


@dataclass
class PerformanceReport:
    """Aggregate of profiled sessions."""

    sessions: List[ProfilingSession]
    generation_time: float

    @property
    def session_count(self) -> int:
        return len(self.sessions)

    @property
    def total_duration_ms(self) -> float:
        return sum(s.total_duration_ms for s in self.sessions)

    @property
    def average_duration_ms(self) -> float:
        """Average render duration across sessions."""
        if not self.sessions:
            return 0.0
        return self.total_duration_ms / len(self.sessions)

    @property
    def average_throughput_mb_per_s(self) -> float:
        """Average throughput across sessions."""
        if not self.sessions:
            return 0.0
        return sum(s.throughput_mb_per_s for s in self.sessions) / len(self.sessions)

    @property
    def peak_memory_delta(self) -> int:
        """Largest resident memory growth of any session."""
        return max((s.memory_delta for s in self.sessions), default=0)

    def to_dict(self, include_sessions: bool = False) -> Dict[str, Any]:
        """Summary of the report, optionally with every session."""
        data: Dict[str, Any] = {
            "generation_time": self.generation_time,
            "summary": {
                "session_count": self.session_count,
                "total_duration_ms": self.total_duration_ms,
                "average_duration_ms": self.average_duration_ms,
                "average_throughput_mb_s": self.average_throughput_mb_per_s,
                "peak_memory_delta": self.peak_memory_delta,
            },
        }
        if include_sessions:
            data["sessions"] = [
                {
                    "session_id": session.session_id,
                    "total_duration_ms": session.total_duration_ms,
                    "output_size": session.output_size,
                    "memory_delta": session.memory_delta,
                    "metadata": session.metadata,
                    "phases": [
                        {
                            "phase_name": phase.phase_name,
                            "duration_ms": phase.duration_ms,
                            "memory_delta": phase.memory_delta,
                            "cpu_percent": phase.cpu_percent,
                            "operations_count": phase.operations_count,
                        }
                        for phase in session.phases
                    ],
                }
                for session in self.sessions
            ]
        return data


class RenderProfiler:
    """Profiler for render passes.

    Examples:
        >>> profiler = RenderProfiler()
        >>> with profiler.profile_render("home") as session:
        ...     builder = Builder()
        ...     with profiler.profile_phase(session, "render"):
        ...         builder.div().t("hi")
        ...     session.output_size = len(builder.to_string())
        >>> report = profiler.generate_report()
    """

    def __init__(self, enable_memory_tracking: bool = True) -> None:
        """Initialize render profiler.

        Args:
            enable_memory_tracking: Sample resident memory around sessions and phases
        """
        self.enable_memory_tracking = enable_memory_tracking
        self.sessions: List[ProfilingSession] = []
        self.current_session: Optional[ProfilingSession] = None
        self._process = psutil.Process() if enable_memory_tracking else None
        self.logger = get_logger(__name__, None, "render_profiler")

    def memory_rss(self) -> int:
        """Current resident set size in bytes, 0 when tracking is off."""
        return self._process.memory_info().rss if self._process else 0

    def cpu_percent(self) -> float:
        return self._process.cpu_percent() if self._process else 0.0

    def start_session(self, session_id: str) -> ProfilingSession:
        """Start a new profiling session."""
        session = ProfilingSession(
            session_id=session_id,
            start_time=time.time(),
            end_time=0.0,
            memory_start=self.memory_rss(),
        )
        self.current_session = session
        self.logger.debug(
            "Started profiling session",
            extra={"session_id": session_id, "memory_tracking": self.enable_memory_tracking},
        )
        return session

    def end_session(self, session: ProfilingSession) -> None:
        """End a profiling session and store it."""
        session.end_time = time.time()
        session.memory_end = self.memory_rss()
        self.sessions.append(session)

        if self.current_session is session:
            self.current_session = None

        self.logger.debug(
            "Ended profiling session",
            extra={
                "session_id": session.session_id,
                "duration_ms": session.total_duration_ms,
                "output_size": session.output_size,
                "phase_count": len(session.phases),
            },
        )

    def profile_phase(self, session: ProfilingSession, phase_name: str) -> "PhaseProfiler":
        """Context manager measuring one phase inside ``session``."""
        return PhaseProfiler(self, session, phase_name)

    def profile_render(self, session_id: str) -> "RenderSessionProfiler":
        """Context manager measuring a whole render session."""
        return RenderSessionProfiler(self, session_id)

    def generate_report(self) -> PerformanceReport:
        """Report of every session recorded so far."""
        return PerformanceReport(sessions=self.sessions.copy(), generation_time=time.time())

    def save_report(self, report: PerformanceReport, output_path: Path) -> None:
        """Write ``report`` with every session as JSON."""
        output_path.write_text(json.dumps(report.to_dict(include_sessions=True), indent=2))
        self.logger.info(
            "Saved performance report",
            extra={"output_path": str(output_path), "session_count": report.session_count},
        )

    def clear_sessions(self) -> None:
        """Drop every stored session."""
        session_count = len(self.sessions)
        self.sessions.clear()
        self.current_session = None
        self.logger.info("Cleared profiling sessions", extra={"cleared_count": session_count})


class PhaseProfiler:
    """Context manager for one phase of a session."""

    def __init__(self, profiler: RenderProfiler, session: ProfilingSession, phase_name: str):
        self.profiler = profiler
        self.session = session
        self.phase_name = phase_name
        self.phase: Optional[PhasePerformance] = None

    def __enter__(self) -> PhasePerformance:
        self.phase = PhasePerformance(
            phase_name=self.phase_name,
            start_time=time.time(),
            end_time=0.0,
            memory_start=self.profiler.memory_rss(),
            memory_end=0,
            cpu_percent=self.profiler.cpu_percent(),
        )
        return self.phase

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.phase is None:
            return
        self.phase.end_time = time.time()
        self.phase.memory_end = self.profiler.memory_rss()
        self.session.phases.append(self.phase)


class RenderSessionProfiler:
    """Context manager for a complete render session."""

    def __init__(self, profiler: RenderProfiler, session_id: str):
        self.profiler = profiler
        self.session_id = session_id
        self.session: Optional[ProfilingSession] = None

    def __enter__(self) -> ProfilingSession:
        self.session = self.profiler.start_session(self.session_id)
        return self.session

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.session:
            self.profiler.end_session(self.session)


def sample_page(builder: Builder) -> None:
    """A small but representative page used by the ``bench`` command."""
    rows = [(f"item-{i}", i * 3) for i in range(50)]
    builder.html("lang", "en").r(
        builder.head().r(
            builder.meta("charset", "utf-8"),
            builder.title().t("Benchmark"),
        ),
        builder.body().r(
            builder.div_class("container").r(
                builder.h1().t("Inventory"),
                builder.table().r(
                    builder.tbody().r(
                        builder.for_each(rows, lambda b, row: b.tr().r(
                            b.td().t(row[0]),
                            b.td_class("count").f("{:d}", row[1]),
                        )),
                    ),
                ),
                builder.p().r(
                    builder.t("See "),
                    builder.a("href", "/docs").t("the docs"),
                    builder.br(),
                ),
            ),
        ),
    )


def benchmark_builders(
    render_fn: Callable[[Builder], Any] = sample_page,
    iterations: int = 10,
    config: Optional[RenderConfig] = None
) -> Dict[str, PerformanceReport]:
    """Compare fresh builders against pooled builders.

    Args:
        render_fn: Callback writing one page into a builder
        iterations: Render passes per strategy
        config: Configuration for every builder

    Returns:
        Dictionary mapping ``"fresh"`` and ``"pooled"`` to performance reports
    """
    config = config or RenderConfig()
    pool = BuilderPool(config)
    results: Dict[str, PerformanceReport] = {}

    def fresh() -> Builder:
        return Builder(config)

    strategies = {"fresh": (fresh, lambda builder: None), "pooled": (pool.acquire, pool.release)}

    for name, (obtain, give_back) in strategies.items():
        profiler = RenderProfiler()
        for i in range(iterations):
            with profiler.profile_render(f"{name}_iteration_{i}") as session:
                builder = obtain()
                with profiler.profile_phase(session, "render"):
                    render_fn(builder)
                session.output_size = len(builder.to_string())
                session.metadata = {
                    "strategy": name,
                    "iteration": i,
                    "elements_opened": builder.metrics.elements_opened,
                }
                give_back(builder)
        results[name] = profiler.generate_report()

    return results
