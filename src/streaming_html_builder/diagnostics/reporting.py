"""Deduplicated reports of the concern table.

The same misuse inside a loop produces one concern per iteration; a report
lists it once. Two records are duplicates when they share the call-site
location, the tag name and the issue text (or both are leaked open tags).
"""

import html
import json
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from streaming_html_builder.diagnostics.concerns import ConcernRecord, DiagnosticsContext
from streaming_html_builder.shared.logging import get_logger
from streaming_html_builder.shared.result import DiagnosticSeverity

DISABLED_MESSAGE = (
    "Diagnostics are not enabled. Enable diagnostics to see element concerns."
)
NO_CONCERNS_MESSAGE = "No element concerns found."

REPORT_FORMATS = ("text", "markdown", "html", "json")

_REPORT_STYLES = (
    "body { font-family: Arial, sans-serif; margin: 20px; } "
    "table { border-collapse: collapse; width: 100%; } "
    "th, td { border: 1px solid #dee2e6; padding: 6px 10px; text-align: left; vertical-align: top; } "
    "th { background-color: #f8f9fa; } "
    ".error { color: #dc3545; } "
    ".warning { color: #fd7e14; }"
)


@dataclass
class ReportEntry:
    """One deduplicated concern."""

    key: str
    tag: str
    details: str
    issues: List[str]
    unclosed: bool
    severity: DiagnosticSeverity

    def issue_summary(self) -> str:
        """Issues joined for a single table cell."""
        return "; ".join(f"• {issue}" for issue in self.issues)


@dataclass
class ConcernReport:
    """Snapshot of the concern table at one point in time."""

    enabled: bool
    generated_at: str
    total_concerns: int = 0
    entries: List[ReportEntry] = field(default_factory=list)

    @property
    def unclosed_count(self) -> int:
        """Number of leaked open tags among the entries."""
        return sum(1 for entry in self.entries if entry.unclosed)

    def get_severity_breakdown(self) -> Dict[str, int]:
        """Entry count per severity name."""
        breakdown: Dict[str, int] = {}
        for entry in self.entries:
            name = entry.severity.name
            breakdown[name] = breakdown.get(name, 0) + 1
        return breakdown


def dedup_key(record: ConcernRecord) -> str:
    """Key under which equivalent concerns collapse into one report entry."""
    element = record.element
    prefix = f"{element.location}|{element.name}|"
    if record.unclosed:
        return prefix + "open_tag_not_closed"
    if record.issues:
        return prefix + ";".join(record.issues)
    return prefix + "unknown"


class ConcernReporter:
    """Builds and exports reports for one DiagnosticsContext."""

    def __init__(self, context: DiagnosticsContext) -> None:
        self.context = context
        self.logger = get_logger(__name__, None, "concern_reporter")

    def generate_report(self) -> ConcernReport:
        """Deduplicate the current concerns into a report."""
        generated_at = time.strftime("%Y-%m-%d %H:%M:%S UTC", time.gmtime())
        if not self.context.enabled:
            return ConcernReport(enabled=False, generated_at=generated_at)

        records = self.context.concerns()
        seen = set()
        entries: List[ReportEntry] = []
        for record in records:
            key = dedup_key(record)
            if key in seen:
                continue
            seen.add(key)
            entries.append(self._entry_for(record))

        self.logger.debug(
            "Concern report generated",
            extra={"concern_count": len(records), "entry_count": len(entries)},
        )
        return ConcernReport(
            enabled=True,
            generated_at=generated_at,
            total_concerns=len(records),
            entries=entries,
        )

    def _entry_for(self, record: ConcernRecord) -> ReportEntry:
        element = record.element
        identity = f" {element.identity}" if element.identity else ""
        details = f"**{element.name}** tag{identity} - {element.call_site}"
        if record.unclosed:
            issues = [f"**{element.name}** tag not closed"]
            severity = DiagnosticSeverity.ERROR
        else:
            issues = list(record.issues)
            severity = DiagnosticSeverity.WARNING
        return ReportEntry(
            key=record.key,
            tag=element.name,
            details=details,
            issues=issues,
            unclosed=record.unclosed,
            severity=severity,
        )

    def export_report(self, report: ConcernReport, format_type: str = "text") -> str:
        """Export a report as ``text``, ``markdown``, ``html`` or ``json``.

        Unknown formats fall back to text. Export never raises; a failure is
        logged and returned as an error string.
        """
        fmt = format_type.lower()
        self.logger.debug("Exporting concern report", extra={"report_format": fmt})
        try:
            if fmt == "json":
                return self._export_json_report(report)
            elif fmt == "html":
                return self._export_html_report(report)
            elif fmt == "markdown":
                return self._export_markdown_report(report)
            else:
                return self._export_text_report(report)
        except Exception as e:
            self.logger.error(
                f"Failed to export report in {fmt} format: {e}",
                extra={"report_format": fmt},
            )
            return f"Error exporting report: {e}"

    def _status_message(self, report: ConcernReport) -> Optional[str]:
        if not report.enabled:
            return DISABLED_MESSAGE
        if not report.entries:
            return NO_CONCERNS_MESSAGE
        return None

    def _export_text_report(self, report: ConcernReport) -> str:
        """Terminal form: a heading and a two-column markdown table."""
        message = self._status_message(report)
        if message:
            return message

        lines = [
            f"## ELEMENT CONCERNS: {len(report.entries)} issues",
            "",
            "| Details | Issues |",
            "|---------|--------|",
        ]
        for entry in report.entries:
            issues = entry.issues[0] if entry.unclosed else entry.issue_summary()
            lines.append(f"| {entry.details} | {issues} |")
        return "\n".join(lines) + "\n"

    def _export_markdown_report(self, report: ConcernReport) -> str:
        message = self._status_message(report)
        if message:
            return message

        lines = [
            "## Element Concerns",
            "",
            f"Total issues: {len(report.entries)}",
            "",
            "| Key | Details | Issues |",
            "|-----|---------|--------|",
        ]
        for entry in report.entries:
            issues = entry.issues[0] if entry.unclosed else entry.issue_summary()
            lines.append(f"| {entry.key} | {entry.details} | {issues} |")
        return "\n".join(lines) + "\n"

    def _export_json_report(self, report: ConcernReport) -> str:
        report_dict: Dict[str, Any] = {
            "enabled": report.enabled,
            "generated_at": report.generated_at,
            "total_concerns": report.total_concerns,
            "unclosed_count": report.unclosed_count,
            "severity_breakdown": report.get_severity_breakdown(),
            "message": self._status_message(report),
            "entries": [
                {
                    "key": entry.key,
                    "tag": entry.tag,
                    "details": entry.details,
                    "issues": entry.issues,
                    "unclosed": entry.unclosed,
                    "severity": entry.severity.name,
                }
                for entry in report.entries
            ],
        }
        return json.dumps(report_dict, indent=2)

    def _export_html_report(self, report: ConcernReport) -> str:
        """Full page rendered with a Builder on a private, disabled context.

        The report itself must not add concerns to the table it describes.
        """
        from streaming_html_builder.markup.builder import Builder

        b = Builder(diagnostics=DiagnosticsContext())
        message = self._status_message(report)

        def summary() -> None:
            if message:
                b.p("style", "font-weight:bold").t(html.escape(message))
                return
            b.p().t(f"Total issues: {len(report.entries)}")
            b.table().r(
                b.thead().r(
                    b.tr().r(b.th().t("Key"), b.th().t("Details"), b.th().t("Issues")),
                ),
                b.tbody().r(b.for_each(report.entries, row)),
            )

        def row(builder: Builder, entry: ReportEntry) -> None:
            css = "error" if entry.severity is DiagnosticSeverity.ERROR else "warning"
            builder.tr_class(css).r(
                builder.td().t(html.escape(entry.key)),
                builder.td().t(html.escape(entry.details)),
                builder.td().r(
                    builder.ul().r(builder.for_each(
                        entry.issues,
                        lambda inner, issue: inner.li().t(html.escape(issue)),
                    )),
                ),
            )

        b.html().r(
            b.head().r(
                b.meta("charset", "utf-8"),
                b.title().t("Element Concerns"),
                b.style().t(_REPORT_STYLES),
            ),
            b.body().r(
                b.h1().t("Element Concerns"),
                b.p().t(f"Generated: {report.generated_at}"),
                b.wrap(summary),
            ),
        )
        return b.to_string()
