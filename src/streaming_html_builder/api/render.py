"""Level 1 API: render functions that manage the Builder for the caller.

Each function takes a builder from a pool, lets a callback or component write
into it, returns the markup and hands the builder back.
"""

import time
import uuid
from typing import Any, Callable, Optional

from streaming_html_builder.markup.builder import Builder, Component
from streaming_html_builder.markup.pool import BuilderPool, default_pool
from streaming_html_builder.shared.config import RenderConfig
from streaming_html_builder.shared.logging import get_logger

PREVIEW_LENGTH = 100


def _pool_for(config: Optional[RenderConfig]) -> BuilderPool:
    return default_pool() if config is None else BuilderPool(config)


def new_builder(config: Optional[RenderConfig] = None) -> Builder:
    """Create a Builder that is not managed by any pool."""
    return Builder(config)


def render(
    fn: Callable[[Builder], Any],
    config: Optional[RenderConfig] = None,
    pretty: bool = False,
    render_id: Optional[str] = None
) -> str:
    """Render the markup written by ``fn`` and return it.

    Args:
        fn: Callback receiving the builder to write into
        config: Optional configuration; the process-wide pool is used without one
        pretty: Re-indent the result for reading
        render_id: Optional id tying log records to this render pass

    Returns:
        The rendered markup

    Examples:
        >>> render(lambda b: b.div_class("note").r(b.p().t("Hi")))
        '<div class="note"><p>Hi</p></div>'
    """
    render_id = render_id or uuid.uuid4().hex[:8]
    logger = get_logger(__name__, render_id, "render")
    start_time = time.time()

    pool = _pool_for(config)
    with pool.builder() as builder:
        fn(builder)
        output = builder.pretty() if pretty else builder.to_string()
        metrics = builder.metrics
        pending = metrics.elements_pending
        elements_opened = metrics.elements_opened

    if pending > 0:
        logger.warning(
            "Render finished with unclosed elements",
            extra={"elements_pending": pending},
        )
    logger.debug(
        "Render completed",
        extra={
            "output_size": len(output),
            "elements_opened": elements_opened,
            "processing_time_ms": (time.time() - start_time) * 1000,
            "preview": (
                output[:PREVIEW_LENGTH] + "..." if len(output) > PREVIEW_LENGTH else output
            ),
        },
    )
    return output


def render_component(
    component: Component,
    config: Optional[RenderConfig] = None,
    pretty: bool = False
) -> str:
    """Render a single component and return its markup."""
    return render(lambda builder: builder.component(component), config, pretty)


def render_page(
    body: Component,
    styles: str = "",
    head_markup: str = "",
    config: Optional[RenderConfig] = None
) -> str:
    """Render a complete HTML page around ``body``.

    See ``Builder.html_page`` for the page layout.
    """
    return render(lambda builder: builder.html_page(styles, head_markup, body), config)
