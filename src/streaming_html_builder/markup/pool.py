"""Reuse of Builders across render passes.

A released builder is emptied before it goes back into the pool, so the next
render pass never sees output from an earlier one. While diagnostics are on
builders are not pooled at all: their elements may still be referenced by
the concern table.
"""

import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from streaming_html_builder.diagnostics.concerns import DiagnosticsContext, default_context
from streaming_html_builder.markup.builder import Builder
from streaming_html_builder.shared.config import RenderConfig
from streaming_html_builder.shared.logging import get_logger


class BuilderPool:
    """Bounded, thread-safe pool of Builders.

    Examples:
        >>> pool = BuilderPool()
        >>> builder = pool.acquire()
        >>> builder.p().t("hello")
        >>> page = builder.to_string()
        >>> pool.release(builder)
    """

    def __init__(
        self,
        config: Optional[RenderConfig] = None,
        diagnostics: Optional[DiagnosticsContext] = None
    ) -> None:
        """Initialize builder pool.

        Args:
            config: Configuration handed to every builder; ``config.pool``
                bounds the pool
            diagnostics: Concern table shared by the pooled builders
        """
        self.config = config or RenderConfig()
        self.diagnostics = diagnostics if diagnostics is not None else default_context()
        self.max_size = self.config.pool.max_size

        self._pool: List[Builder] = []
        self._lock = threading.Lock()

        self.created_count = 0
        self.reused_count = 0
        self.returned_count = 0
        self.discarded_count = 0

        self.logger = get_logger(__name__, None, "builder_pool")

    @property
    def pooling_active(self) -> bool:
        """Whether released builders are currently kept for reuse."""
        return self.config.pool.pool_while_diagnosing or not self.diagnostics.enabled

    def acquire(self) -> Builder:
        """Get an empty builder from the pool, or create one."""
        with self._lock:
            if self._pool and self.pooling_active:
                builder = self._pool.pop()
                self.reused_count += 1
                self.logger.debug(
                    "Builder retrieved from pool",
                    extra={"pool_size": len(self._pool), "reused_count": self.reused_count},
                )
                return builder
            self.created_count += 1

        self.logger.debug("New builder created", extra={"created_count": self.created_count})
        return Builder(self.config, self.diagnostics)

    def release(self, builder: Optional[Builder]) -> bool:
        """Return a builder to the pool.

        Args:
            builder: Builder obtained from ``acquire``; None is ignored

        Returns:
            True if the builder was kept for reuse
        """
        if builder is None:
            return False

        if not self.pooling_active:
            with self._lock:
                self.discarded_count += 1
            self.logger.debug("Diagnostics enabled, builder not pooled")
            return False

        builder.reset()
        with self._lock:
            if len(self._pool) >= self.max_size:
                self.discarded_count += 1
                self.logger.debug(
                    "Pool is full, discarding builder",
                    extra={"max_size": self.max_size},
                )
                return False
            self._pool.append(builder)
            self.returned_count += 1
            self.logger.debug(
                "Builder returned to pool",
                extra={"pool_size": len(self._pool), "returned_count": self.returned_count},
            )
        return True

    @contextmanager
    def builder(self) -> Iterator[Builder]:
        """Lend a builder for the duration of a ``with`` block."""
        builder = self.acquire()
        try:
            yield builder
        finally:
            self.release(builder)

    def clear(self) -> None:
        """Drop every pooled builder."""
        with self._lock:
            cleared = len(self._pool)
            self._pool.clear()
        self.logger.info("Pool cleared", extra={"cleared_builders": cleared})

    def __len__(self) -> int:
        with self._lock:
            return len(self._pool)

    def get_statistics(self) -> Dict[str, Any]:
        """Get pool usage statistics."""
        with self._lock:
            return {
                "max_size": self.max_size,
                "current_size": len(self._pool),
                "created_count": self.created_count,
                "reused_count": self.reused_count,
                "returned_count": self.returned_count,
                "discarded_count": self.discarded_count,
                "efficiency": self.reused_count / max(1, self.created_count + self.reused_count),
            }


_default_pool: Optional[BuilderPool] = None
_default_pool_lock = threading.Lock()


def default_pool() -> BuilderPool:
    """The process-wide pool, created on first use."""
    global _default_pool
    with _default_pool_lock:
        if _default_pool is None:
            _default_pool = BuilderPool()
        return _default_pool


def acquire_builder() -> Builder:
    """Get a builder from the process-wide pool."""
    return default_pool().acquire()


def release_builder(builder: Optional[Builder]) -> bool:
    """Return a builder to the process-wide pool. None is ignored."""
    if builder is None:
        return False
    return default_pool().release(builder)


@contextmanager
def pooled_builder() -> Iterator[Builder]:
    """Lend a builder from the process-wide pool for a ``with`` block."""
    with default_pool().builder() as builder:
        yield builder
