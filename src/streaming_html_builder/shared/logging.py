"""Structured logging utilities for streaming HTML rendering.

Every record emitted through these loggers carries the component that produced
it and, when known, the id of the render pass it belongs to, so that anomalies
from concurrent renders can be told apart in the logs.
"""

import logging
from typing import Any, Dict, Optional


class RenderLogger:
    """Logger that tags each record with its component and render pass id."""

    def __init__(
        self,
        name: str,
        render_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Initialize render logger.

        Args:
            name: Logger name (typically __name__)
            render_id: Optional id of the render pass being logged
            component: Component name for structured logging
        """
        self.logger = logging.getLogger(name)
        self.render_id = render_id
        self.component = component or name.split('.')[-1]

    def bind(self, render_id: Optional[str]) -> "RenderLogger":
        """Return a logger for the same component bound to another render pass."""
        return RenderLogger(self.logger.name, render_id, self.component)

    def _get_extra(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Merge caller supplied fields with the component and render id."""
        combined_extra: Dict[str, Any] = {
            "component": self.component,
            "render_id": self.render_id,
        }

        if extra:
            combined_extra.update(extra)

        return combined_extra

    def is_enabled_for(self, level: int) -> bool:
        """Check whether a record of ``level`` would be emitted."""
        return self.logger.isEnabledFor(level)

    def debug(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = False
    ) -> None:
        """Log debug message."""
        self.logger.debug(message, extra=self._get_extra(extra), exc_info=exc_info)

    def info(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = False
    ) -> None:
        """Log info message."""
        self.logger.info(message, extra=self._get_extra(extra), exc_info=exc_info)

    def warning(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = False
    ) -> None:
        """Log warning message."""
        self.logger.warning(message, extra=self._get_extra(extra), exc_info=exc_info)

    def error(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = True
    ) -> None:
        """Log error message, with traceback by default."""
        self.logger.error(message, extra=self._get_extra(extra), exc_info=exc_info)

    def critical(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = True
    ) -> None:
        """Log critical message, with traceback by default."""
        self.logger.critical(message, extra=self._get_extra(extra), exc_info=exc_info)

    def exception(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None
    ) -> None:
        """Log the active exception with its traceback."""
        self.logger.exception(message, extra=self._get_extra(extra))


def get_logger(
    name: str,
    render_id: Optional[str] = None,
    component: Optional[str] = None
) -> RenderLogger:
    """Get a render-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        render_id: Optional id of the render pass being logged
        component: Component name for structured logging

    Returns:
        RenderLogger instance
    """
    return RenderLogger(name, render_id, component)


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Set the root logging level for command line use."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
    )
