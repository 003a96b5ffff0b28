"""Concern table for detecting structural misuse of the element engine.

A concern is a recorded fact about one element: its opening tag was written
and not yet matched by a closing tag, or its render call received something
that was not a properly rendered child. The table is opt-in; while it is
disabled every operation is a no-op so production renders pay nothing.

Every mutation and every iteration happens under one lock because concurrent
render passes may share a context. Reading the enabled flag is lock-free.
"""

import threading
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional

from streaming_html_builder.shared.config import DiagnosticsConfig
from streaming_html_builder.shared.logging import get_logger
from streaming_html_builder.shared.result import ConcernKind

if TYPE_CHECKING:
    from streaming_html_builder.markup.element import Element


@dataclass
class ConcernRecord:
    """One entry of the concern table."""

    key: str
    kind: ConcernKind
    element: "Element"
    issues: List[str] = field(default_factory=list)

    @property
    def unclosed(self) -> bool:
        """Whether this record is a leaked open tag."""
        return self.kind is ConcernKind.OPEN_TAG


class DiagnosticsContext:
    """Opt-in table of element concerns.

    Examples:
        >>> context = DiagnosticsContext()
        >>> with context.session():
        ...     builder = Builder(diagnostics=context)
        ...     builder.div().r(builder.span())
        ...     print(context.report("text"))
    """

    def __init__(
        self,
        config: Optional[DiagnosticsConfig] = None,
        enabled: bool = False
    ) -> None:
        """Initialize a diagnostics context.

        Args:
            config: Identity and call-site settings
            enabled: Start with concern tracking switched on
        """
        self.config = config or DiagnosticsConfig()
        self._enabled = enabled
        self._concerns: Dict[str, ConcernRecord] = {}
        self._lock = threading.Lock()
        self.logger = get_logger(__name__, None, "diagnostics")

    @property
    def enabled(self) -> bool:
        """Whether concerns are being tracked."""
        return self._enabled

    def enable(self) -> None:
        """Start tracking concerns."""
        self._enabled = True
        self.logger.info("Diagnostics enabled")

    def disable(self) -> None:
        """Stop tracking concerns and drop every recorded one."""
        with self._lock:
            self._enabled = False
            cleared = len(self._concerns)
            self._concerns.clear()
        self.logger.info("Diagnostics disabled", extra={"cleared_count": cleared})

    def clear_issues(self) -> None:
        """Drop every recorded concern without changing the enabled flag."""
        with self._lock:
            cleared = len(self._concerns)
            self._concerns.clear()
        self.logger.debug("Concerns cleared", extra={"cleared_count": cleared})

    @contextmanager
    def session(self) -> Iterator["DiagnosticsContext"]:
        """Enable tracking for the duration of a ``with`` block."""
        self.enable()
        try:
            yield self
        finally:
            self.disable()

    def new_identity(self) -> str:
        """Return an identity for correlating open and close records."""
        return uuid.uuid4().hex[:self.config.id_length]

    def upsert(
        self,
        kind: ConcernKind,
        element: "Element",
        issue: Optional[str] = None
    ) -> None:
        """Record, resolve or extend a concern for ``element``.

        OPEN_TAG adds the element as pending; CLOSED_TAG removes its pending
        record; OTHER appends ``issue`` to the element's issue record. Void
        elements are never tracked as open or closed.

        Args:
            kind: Which kind of update this is
            element: The element concerned
            issue: Human readable description, required for OTHER
        """
        if not self._enabled:
            return

        if kind is ConcernKind.OPEN_TAG:
            if element.is_void:
                return
            key = kind.key_for(element.identity)
            with self._lock:
                if self._enabled:
                    self._concerns[key] = ConcernRecord(key, kind, element)
            return

        if kind is ConcernKind.CLOSED_TAG:
            if element.is_void:
                return
            key = ConcernKind.OPEN_TAG.key_for(element.identity)
            with self._lock:
                enabled = self._enabled
                found = self._concerns.pop(key, None)
            if found is None and enabled and self.config.log_anomalies:
                self.logger.warning(
                    "No open tag found for closed element",
                    extra={"element": element.details()},
                )
            return

        if not issue:
            if self.config.log_anomalies:
                self.logger.warning(
                    "Concern update without an issue ignored",
                    extra={"concern_kind": kind.value, "element": element.details()},
                )
            return

        key = kind.key_for(element.identity)
        with self._lock:
            if not self._enabled:
                return
            record = self._concerns.get(key)
            if record is None:
                record = ConcernRecord(key, kind, element)
                self._concerns[key] = record
            record.issues.append(issue)

    def concerns(self) -> List[ConcernRecord]:
        """Snapshot of the current records in insertion order."""
        with self._lock:
            return [
                ConcernRecord(record.key, record.kind, record.element, list(record.issues))
                for record in self._concerns.values()
            ]

    def open_tags(self) -> List["Element"]:
        """Elements whose opening tag has not been matched yet."""
        return [record.element for record in self.concerns() if record.unclosed]

    def __len__(self) -> int:
        with self._lock:
            return len(self._concerns)

    def report(self, format_type: str = "text") -> str:
        """Render the deduplicated concerns as ``text``, ``markdown``, ``html`` or ``json``."""
        from streaming_html_builder.diagnostics.reporting import ConcernReporter

        reporter = ConcernReporter(self)
        return reporter.export_report(reporter.generate_report(), format_type)


_default_context = DiagnosticsContext()


def default_context() -> DiagnosticsContext:
    """The process-wide context used when none is passed explicitly."""
    return _default_context


def enable() -> None:
    """Enable concern tracking on the process-wide context."""
    _default_context.enable()


def disable() -> None:
    """Disable concern tracking on the process-wide context and clear it."""
    _default_context.disable()


def clear_issues() -> None:
    """Clear the process-wide concern table, keeping tracking on or off."""
    _default_context.clear_issues()


def is_enabled() -> bool:
    """Whether the process-wide context is tracking concerns."""
    return _default_context.enabled


def report(format_type: str = "text") -> str:
    """Report the concerns of the process-wide context."""
    return _default_context.report(format_type)
