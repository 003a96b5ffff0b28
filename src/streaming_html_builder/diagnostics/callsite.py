"""Capture the caller location that created an element."""

import inspect
from dataclasses import dataclass

_PACKAGE = __name__.split(".")[0]


@dataclass(frozen=True)
class CallSite:
    """Where user code asked for an element."""

    location: str = ""
    function: str = ""

    @property
    def known(self) -> bool:
        """Whether a location was captured."""
        return bool(self.location)

    def __str__(self) -> str:
        if not self.known:
            return "unknown location"
        return f"{self.function} ({self.location})"


UNKNOWN_SITE = CallSite()


def _short_path(filename: str) -> str:
    parts = filename.replace("\\", "/").rsplit("/", 2)
    return "/".join(parts[-2:])


def capture_call_site() -> CallSite:
    """Return the first stack frame outside this package.

    Only called while diagnostics are enabled; walking the stack is too slow
    for production renders.
    """
    frame = inspect.currentframe()
    try:
        while frame is not None:
            module = frame.f_globals.get("__name__", "")
            if module != _PACKAGE and not module.startswith(_PACKAGE + "."):
                code = frame.f_code
                return CallSite(
                    location=f"{_short_path(code.co_filename)}:{frame.f_lineno}",
                    function=code.co_name,
                )
            frame = frame.f_back
        return UNKNOWN_SITE
    finally:
        del frame
