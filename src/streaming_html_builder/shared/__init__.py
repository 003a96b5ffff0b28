"""Shared utilities for streaming HTML rendering.

This module provides configuration objects, severity and concern types, metric
counters and logging helpers used across all rendering layers.
"""

from .result import (
    ConcernKind,
    DiagnosticSeverity,
    RenderMetrics,
)
from .config import (
    BuilderConfig,
    ConfigError,
    ConfigValidationError,
    DiagnosticsConfig,
    PoolConfig,
    PrettyConfig,
    RenderConfig,
)
from .logging import (
    RenderLogger,
    configure_logging,
    get_logger,
)

__all__ = [
    "ConcernKind",
    "DiagnosticSeverity",
    "RenderMetrics",
    "BuilderConfig",
    "ConfigError",
    "ConfigValidationError",
    "DiagnosticsConfig",
    "PoolConfig",
    "PrettyConfig",
    "RenderConfig",
    "RenderLogger",
    "configure_logging",
    "get_logger",
]
