"""Developer tools for streaming HTML rendering.

This module provides render profiling with resident memory tracking.
"""

from .profiling import (
    PerformanceReport,
    PhasePerformance,
    ProfilingSession,
    RenderProfiler,
    benchmark_builders,
    sample_page,
)

__all__ = [
    "PerformanceReport",
    "PhasePerformance",
    "ProfilingSession",
    "RenderProfiler",
    "benchmark_builders",
    "sample_page",
]
