"""Element engine: write opening tags now, closing tags at render time.

Nothing is kept as a tree. Constructing an element writes its opening tag to
the shared buffer immediately; calling ``r()`` on it writes the closing tag.
Python evaluates call arguments before the call itself, so in

    b.div().r(
        b.span().t("a"),
        b.p().r(b.a("href", "/").t("b")),
    )

every child has written both of its tags before the ``div`` writes
``</div>``. The output is correctly nested without a second pass, as long
as every child is expressed as an argument (or run in place through
``Builder.wrap``).
"""

from typing import Any, Dict, Iterable, List, Optional, TextIO

from streaming_html_builder.diagnostics.callsite import UNKNOWN_SITE, capture_call_site
from streaming_html_builder.diagnostics.concerns import DiagnosticsContext, default_context
from streaming_html_builder.markup.attributes import (
    add_attribute_pairs,
    map_attribute_pairs,
    render_attributes,
)
from streaming_html_builder.markup.tags import TEXT_TAG, VOID_TAGS
from streaming_html_builder.shared.logging import get_logger
from streaming_html_builder.shared.result import ConcernKind, RenderMetrics

logger = get_logger(__name__, None, "element_engine")

_PREVIEW_LENGTH = 40


class _NoValue:
    """Type of ``NO_VALUE``, the result of every well-formed render call."""

    _instance: Optional["_NoValue"] = None

    def __new__(cls) -> "_NoValue":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_VALUE"


NO_VALUE = _NoValue()


def _preview(value: Any) -> str:
    text = value.decode("utf-8", "replace") if isinstance(value, bytes) else str(value)
    if len(text) > _PREVIEW_LENGTH:
        text = text[:_PREVIEW_LENGTH - 3] + "..."
    return repr(text)


class Element:
    """One tag or one raw text run written to a shared buffer.

    The element does not own the buffer; the Builder does. Use
    ``new_element``/``new_text_element`` (or the Builder factories) rather
    than constructing this class directly: the constructor alone does not
    write anything.
    """

    def __init__(
        self,
        buffer: Optional[TextIO],
        name: str,
        *attr_pairs: Any,
        diagnostics: Optional[DiagnosticsContext] = None,
        metrics: Optional[RenderMetrics] = None
    ) -> None:
        """Prepare an element without writing it.

        Args:
            buffer: Text buffer shared by the whole render pass
            name: Tag name, or ``TEXT_TAG`` for a raw text run
            *attr_pairs: Flat ``key, value`` list, or the text parts of a text run
            diagnostics: Concern table; the process-wide one when omitted
            metrics: Optional counters owned by the Builder
        """
        self.buffer = buffer
        self.name = name.lower()
        self.attributes: Dict[str, str] = {}
        self.text_parts: List[str] = []
        self.diagnostics = diagnostics if diagnostics is not None else default_context()
        self.metrics = metrics
        self.identity = ""
        self.call_site = UNKNOWN_SITE
        self.is_open = False
        self.is_rendered = False

        self._ensure_identity()

        if self.is_text:
            self.text_parts = [str(part) for part in attr_pairs]
        else:
            mapping = map_attribute_pairs(attr_pairs)
            self.attributes = mapping.attributes
            if mapping.had_odd_length:
                self._report_dropped(mapping.dropped)

        if buffer is None and self.diagnostics.config.log_anomalies:
            logger.warning(
                "Element constructed without a buffer; nothing will be written",
                extra={"tag": self.name, "call_site": str(self.call_site)},
            )

    # Classification

    @property
    def is_text(self) -> bool:
        """Whether this is a raw text run rather than a tag."""
        return self.name == TEXT_TAG

    @property
    def is_void(self) -> bool:
        """Whether this tag never takes a closing tag or children."""
        return self.name in VOID_TAGS

    @property
    def has_closing_form(self) -> bool:
        """Whether rendering writes ``</name>``."""
        return not (self.is_text or self.is_void)

    @property
    def location(self) -> str:
        """Caller location captured at construction, if any."""
        return self.call_site.location

    @property
    def function(self) -> str:
        """Caller function captured at construction, if any."""
        return self.call_site.function

    def details(self) -> str:
        """Short description used in diagnostics output."""
        label = "text" if self.is_text else f"<{self.name}>"
        identity = f" {self.identity}" if self.identity else ""
        return f"{label} tag{identity} - {self.call_site}"

    # Writing

    def _write(self, text: str) -> None:
        if self.buffer is None or not text:
            return
        self.buffer.write(text)
        if self.metrics is not None:
            self.metrics.characters_written += len(text)

    def _ensure_identity(self) -> None:
        # Diagnostics may be switched on between construction and open().
        if self.identity or not self.diagnostics.enabled:
            return
        self.identity = self.diagnostics.new_identity()
        if self.diagnostics.config.capture_call_site:
            self.call_site = capture_call_site()

    def _flag(self, issue: str) -> None:
        self._ensure_identity()
        self.diagnostics.upsert(ConcernKind.OTHER, self, issue)

    def _report_dropped(self, dropped: Optional[str]) -> None:
        site = f" at {self.call_site}" if self.call_site.known else ""
        issue = f"odd number of attribute items for <{self.name}>; dropped {dropped!r}{site}"
        if self.diagnostics.config.log_anomalies:
            logger.warning(
                "Dropped unpaired attribute item",
                extra={"tag": self.name, "dropped": dropped},
            )
        self._flag(issue)

    def add_attributes(self, *attr_pairs: Any) -> "Element":
        """Add attributes to an element whose opening tag is not written yet."""
        if self.is_open:
            self._flag(
                f"attributes added to <{self.name}> after its opening tag was written were ignored"
            )
            return self
        items = list(attr_pairs)
        dropped = items.pop() if len(items) % 2 else None
        add_attribute_pairs(self.attributes, items)
        if dropped is not None:
            self._report_dropped(str(dropped))
        return self

    def _opening_form(self) -> str:
        if self.is_text:
            return "".join(self.text_parts)
        attributes = render_attributes(self.attributes)
        if self.identity:
            attributes += f' {self.diagnostics.config.id_attribute}="{self.identity}"'
        return f"<{self.name}{attributes}>"

    def open(self) -> "Element":
        """Write the opening tag (or the text run) to the buffer."""
        if self.is_open:
            return self
        self.is_open = True
        self._ensure_identity()
        self._write(self._opening_form())

        if self.metrics is not None:
            if self.is_text:
                self.metrics.text_runs += 1
            else:
                self.metrics.elements_opened += 1
                if self.is_void:
                    self.metrics.void_elements += 1

        if self.has_closing_form:
            self.diagnostics.upsert(ConcernKind.OPEN_TAG, self)
        return self

    # Render completion

    def r(self, *children: Any) -> _NoValue:
        """Finish the element after its children were written.

        The children are already in the buffer by the time this runs; the
        arguments are only inspected for misuse when diagnostics are on.

        Returns:
            NO_VALUE, so the call can itself be a child argument
        """
        if not self.is_open:
            self._flag(
                f"<{self.name}> was rendered before its opening tag was written; call open() first"
            )
            return NO_VALUE

        if self.is_rendered:
            if self.has_closing_form:
                self._flag(f"<{self.name}> was rendered more than once")
            return NO_VALUE
        self.is_rendered = True

        if self.has_closing_form:
            self._write(f"</{self.name}>")
            if self.metrics is not None:
                self.metrics.elements_closed += 1
            self.diagnostics.upsert(ConcernKind.CLOSED_TAG, self)
        elif children and self.is_void:
            self._flag(
                f"<{self.name}> is a void tag and cannot have children; "
                f"{len(children)} child argument(s) ignored"
            )

        if self.diagnostics.enabled:
            for child in children:
                self._check_child(child)
        return NO_VALUE

    render = r

    def _check_child(self, child: Any) -> None:
        if child is None or child is NO_VALUE:
            return
        if isinstance(child, Element):
            if child.is_void or child.is_text:
                return
            self._flag(
                f"child <{child.name}> of <{self.name}> was passed without being rendered; "
                "call r() or t() on it"
            )
            return
        if isinstance(child, (str, bytes)):
            self._flag(
                f"literal {_preview(child)} passed to <{self.name}> was not written; "
                "wrap it with t()"
            )
            return
        self._flag(
            f"unexpected child of type {type(child).__name__} passed to <{self.name}>"
        )

    def t(self, *texts: Any) -> _NoValue:
        """Render with literal text as the only content."""
        return self.r(new_text_element(
            self.buffer, *texts, diagnostics=self.diagnostics, metrics=self.metrics
        ))

    render_text = t

    def f(self, template: str, *args: Any, **kwargs: Any) -> _NoValue:
        """Render with ``template.format(*args, **kwargs)`` as the only content."""
        return self.t(format_text(self, template, *args, **kwargs))

    render_formatted = f

    def for_each(self, items: Iterable[Any], tag: str, *attr_pairs: Any) -> _NoValue:
        """Render each item as a ``tag`` child holding the item as text, then close."""
        for item in items:
            new_element(
                self.buffer, tag, *attr_pairs,
                diagnostics=self.diagnostics, metrics=self.metrics,
            ).t(item)
        return self.r()

    def __str__(self) -> str:
        getvalue = getattr(self.buffer, "getvalue", None)
        return getvalue() if getvalue is not None else ""

    def __repr__(self) -> str:
        state = "rendered" if self.is_rendered else "open" if self.is_open else "deferred"
        return f"Element({self.name!r}, {self.attributes!r}, {state})"


def format_text(owner: Optional[Element], template: str, *args: Any, **kwargs: Any) -> str:
    """Interpolate a template without ever raising.

    A template that does not match its arguments is used verbatim and, when
    ``owner`` is given, recorded as a concern on it.
    """
    if not args and not kwargs:
        return template
    try:
        return template.format(*args, **kwargs)
    except (IndexError, KeyError, ValueError, AttributeError) as e:
        logger.warning(
            "Template interpolation failed; using the template verbatim",
            extra={"template": template, "error": str(e)},
        )
        if owner is not None:
            owner._flag(f"template {_preview(template)} could not be formatted: {e}")
        return template


def new_element(
    buffer: Optional[TextIO],
    tag: str,
    *attr_pairs: Any,
    diagnostics: Optional[DiagnosticsContext] = None,
    metrics: Optional[RenderMetrics] = None
) -> Element:
    """Create an element and write its opening tag immediately.

    Args:
        buffer: Shared output buffer
        tag: Tag name (lowercased), or ``TEXT_TAG`` for a text run
        *attr_pairs: Flat ``key, value`` attribute list

    Returns:
        The open element; call ``r()``/``t()``/``f()`` on it to close it
    """
    return Element(
        buffer, tag, *attr_pairs, diagnostics=diagnostics, metrics=metrics
    ).open()


def new_text_element(
    buffer: Optional[TextIO],
    *texts: Any,
    diagnostics: Optional[DiagnosticsContext] = None,
    metrics: Optional[RenderMetrics] = None
) -> Element:
    """Write literal text to the buffer as a text run element."""
    return new_element(buffer, TEXT_TAG, *texts, diagnostics=diagnostics, metrics=metrics)


def defer_element(
    buffer: Optional[TextIO],
    tag: str,
    *attr_pairs: Any,
    diagnostics: Optional[DiagnosticsContext] = None,
    metrics: Optional[RenderMetrics] = None
) -> Element:
    """Create an element whose opening tag is written later by ``open()``."""
    return Element(buffer, tag, *attr_pairs, diagnostics=diagnostics, metrics=metrics)
