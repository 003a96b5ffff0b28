"""Builder: owns the output buffer of one render pass.

A Builder hands out element factories bound to its own buffer, so call
sites never pass the buffer around:

    b = Builder()
    b.html().r(
        b.body().r(
            b.div_class("container").r(
                b.span().t("Some text"),
                b.p().r(b.a("href", "https://example.com").t("Example.com")),
            ),
        ),
    )
    page = b.to_string()

Shortcuts such as ``b.div()`` and ``b.div_class("cls")`` are generated from
the tag registry rather than written out one by one.
"""

import io
from typing import Any, Callable, Iterable, Optional, Protocol, TypeVar

from streaming_html_builder.diagnostics.concerns import DiagnosticsContext, default_context
from streaming_html_builder.markup.element import (
    NO_VALUE,
    Element,
    _NoValue,
    defer_element,
    format_text,
    new_element,
    new_text_element,
)
from streaming_html_builder.markup.tags import is_known
from streaming_html_builder.shared.config import RenderConfig
from streaming_html_builder.shared.logging import get_logger
from streaming_html_builder.shared.result import RenderMetrics

T = TypeVar("T")


class Component(Protocol):
    """Anything that can render itself into a Builder."""

    def render(self, builder: "Builder") -> Any:
        ...


class Builder:
    """Accumulates the markup of one render pass.

    Not thread-safe: one Builder serves one render pass on one thread.
    """

    def __init__(
        self,
        config: Optional[RenderConfig] = None,
        diagnostics: Optional[DiagnosticsContext] = None
    ) -> None:
        """Initialize a builder with an empty buffer.

        Args:
            config: Render configuration, defaults to ``RenderConfig()``
            diagnostics: Concern table, defaults to the process-wide context
        """
        self.config = config or RenderConfig()
        self.diagnostics = diagnostics if diagnostics is not None else default_context()
        self.metrics = RenderMetrics()
        self._buffer = io.StringIO()
        self.logger = get_logger(__name__, None, "builder")

    @property
    def buffer(self) -> io.StringIO:
        """The underlying output buffer."""
        return self._buffer

    # Element factories

    def e(self, tag: str, *attr_pairs: Any) -> Element:
        """Write the opening tag of ``tag`` and return the open element."""
        return new_element(
            self._buffer, tag, *attr_pairs,
            diagnostics=self.diagnostics, metrics=self.metrics,
        )

    element = e

    def deferred(self, tag: str, *attr_pairs: Any) -> Element:
        """Return an element whose opening tag is written by ``open()`` later."""
        return defer_element(
            self._buffer, tag, *attr_pairs,
            diagnostics=self.diagnostics, metrics=self.metrics,
        )

    def t(self, *texts: Any) -> _NoValue:
        """Write literal text in place."""
        new_text_element(
            self._buffer, *texts,
            diagnostics=self.diagnostics, metrics=self.metrics,
        )
        return NO_VALUE

    text = t

    def f(self, template: str, *args: Any, **kwargs: Any) -> _NoValue:
        """Write ``template.format(*args, **kwargs)`` in place."""
        return self.t(format_text(None, template, *args, **kwargs))

    def html(self, *attr_pairs: Any) -> Element:
        """Open the ``html`` element, preceded by the doctype when configured."""
        if self.config.builder.emit_doctype:
            self.write_string(self.config.builder.doctype)
        return self.e("html", *attr_pairs)

    def __getattr__(self, name: str) -> Callable[..., Element]:
        """Resolve ``b.<tag>(...)`` and ``b.<tag>_class(cls, ...)`` shortcuts."""
        if name.startswith("_"):
            raise AttributeError(
                f"'{type(self).__name__}' object has no attribute '{name}'"
            )

        with_class = name.endswith("_class")
        tag = name[:-len("_class")] if with_class else name
        tag = tag.rstrip("_")

        if not is_known(tag):
            raise AttributeError(f"'{type(self).__name__}' has no element '{name}'")

        opener = self.html if tag == "html" else (lambda *pairs: self.e(tag, *pairs))

        if with_class:
            def factory(css_class: str, *attr_pairs: Any) -> Element:
                return opener("class", css_class, *attr_pairs)
        else:
            def factory(*attr_pairs: Any) -> Element:
                return opener(*attr_pairs)

        factory.__name__ = name
        factory.__doc__ = f"Open a <{tag}> element."
        return factory

    # Sequencing helpers

    def wrap(self, fn: Callable[[], Any]) -> _NoValue:
        """Run ``fn`` in place, e.g. for conditionals and loops among children."""
        fn()
        return NO_VALUE

    def for_each(self, items: Iterable[T], each: Callable[["Builder", T], Any]) -> _NoValue:
        """Call ``each(builder, item)`` for every item, in place."""
        for item in items:
            each(self, item)
        return NO_VALUE

    def component(self, *components: Component) -> _NoValue:
        """Render components in place."""
        for comp in components:
            comp.render(self)
        return NO_VALUE

    def html_page(self, styles: str, head_markup: str, body: Component) -> str:
        """Render a complete page and return the accumulated output.

        Args:
            styles: CSS placed in a ``<style>`` element, omitted when empty
            head_markup: Raw markup written at the start of ``<head>``
            body: Component rendered inside ``<body>``
        """
        self.html().r(
            self.head().r(
                self.write_string(head_markup),
                self.wrap(lambda: self.style().t(styles) if styles else None),
            ),
            self.body().r(
                self.component(body),
            ),
        )
        return self.to_string()

    # Input / output

    def write_string(self, text: str) -> _NoValue:
        """Append raw markup to the buffer."""
        if text:
            self._buffer.write(text)
            self.metrics.characters_written += len(text)
        return NO_VALUE

    def write_bytes(self, data: bytes) -> _NoValue:
        """Append raw markup given as bytes in the configured encoding."""
        return self.write_string(data.decode(self.config.builder.encoding, "replace"))

    def to_string(self) -> str:
        """The accumulated output."""
        return self._buffer.getvalue()

    def __str__(self) -> str:
        return self.to_string()

    def to_bytes(self) -> bytes:
        """The accumulated output encoded with the configured encoding."""
        return self.to_string().encode(self.config.builder.encoding)

    def reset(self) -> None:
        """Empty the buffer. Diagnostics state is left alone."""
        self._buffer.seek(0)
        self._buffer.truncate(0)
        self.metrics.reset()

    def pretty(self) -> str:
        """The accumulated output re-indented for reading."""
        from streaming_html_builder.formatting.pretty import PrettyPrinter

        return PrettyPrinter(self.config.pretty).format(self.to_string())

    def __repr__(self) -> str:
        return f"Builder(size={self._buffer.tell()}, diagnostics={self.diagnostics.enabled})"
