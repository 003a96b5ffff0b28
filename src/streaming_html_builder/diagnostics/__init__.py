"""Opt-in diagnostics for the element engine.

This module provides the concern table, call-site capture and deduplicated
concern reports.
"""

from .callsite import CallSite, UNKNOWN_SITE, capture_call_site
from .concerns import (
    ConcernRecord,
    DiagnosticsContext,
    clear_issues,
    default_context,
    disable,
    enable,
    is_enabled,
    report,
)
from .reporting import ConcernReport, ConcernReporter, ReportEntry, REPORT_FORMATS

__all__ = [
    "CallSite",
    "UNKNOWN_SITE",
    "capture_call_site",
    "ConcernRecord",
    "DiagnosticsContext",
    "clear_issues",
    "default_context",
    "disable",
    "enable",
    "is_enabled",
    "report",
    "ConcernReport",
    "ConcernReporter",
    "ReportEntry",
    "REPORT_FORMATS",
]
