"""Severity, concern kind and metric types shared by the rendering layers."""

from dataclasses import dataclass
from enum import Enum, auto


class DiagnosticSeverity(Enum):
    """Severity levels for reported concerns."""

    DEBUG = auto()      # Debug-level information
    INFO = auto()       # Informational messages
    WARNING = auto()    # Misuse that still produced output
    ERROR = auto()      # Structural defects such as leaked open tags
    CRITICAL = auto()   # Reserved for defects that corrupt the whole page


class ConcernKind(Enum):
    """Kinds of records held in the diagnostics concern table."""

    OPEN_TAG = "open_tag"
    CLOSED_TAG = "closed_tag"
    OTHER = "other"

    def key_for(self, identity: str) -> str:
        """Build the concern table key for an element identity."""
        return f"{self.value}-{identity}"


@dataclass
class RenderMetrics:
    """Counters maintained by a Builder over one render pass."""

    elements_opened: int = 0
    elements_closed: int = 0
    void_elements: int = 0
    text_runs: int = 0
    characters_written: int = 0

    @property
    def elements_pending(self) -> int:
        """Non-void elements opened but not yet closed."""
        return self.elements_opened - self.void_elements - self.elements_closed

    def reset(self) -> None:
        """Zero every counter."""
        self.elements_opened = 0
        self.elements_closed = 0
        self.void_elements = 0
        self.text_runs = 0
        self.characters_written = 0
