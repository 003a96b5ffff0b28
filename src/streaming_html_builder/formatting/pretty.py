"""Re-indent flat markup for display.

The input is markup this package produced (or markup of the same shape); it
is not validated. The output is for humans and is not meant to be parsed
again, although formatting it a second time gives the same text.
"""

import logging
import re
import time
from typing import List, Optional

from streaming_html_builder.markup.tags import RAW_TEXT_TAGS, is_inline, is_void
from streaming_html_builder.shared.config import PrettyConfig
from streaming_html_builder.shared.logging import get_logger

_TAG_NAME = re.compile(r"</?\s*([^\s/>]+)")
_TAG_START = re.compile(r"<[A-Za-z/!?]")


def _find_tag_end(markup: str, start: int) -> int:
    """Index just past the ``>`` closing the tag at ``start``, skipping quoted values."""
    quote = ""
    for index in range(start + 1, len(markup)):
        char = markup[index]
        if quote:
            if char == quote:
                quote = ""
        elif char in "\"'":
            quote = char
        elif char == ">":
            return index + 1
    return len(markup)


def _tag_name(token: str) -> str:
    match = _TAG_NAME.match(token)
    return match.group(1).lower() if match else ""


class PrettyPrinter:
    """Single-pass re-indenter for serialized markup.

    Block tags start on their own line, indented by nesting depth. Inline
    tags and literal text flow on the current line. Void tags never open a
    level. Text is copied verbatim; text made only of whitespace is dropped.

    Examples:
        >>> PrettyPrinter().format("<div><h1>Title</h1><p>Paragraph</p></div>")
        '<div>\\n  <h1>Title</h1>\\n  <p>Paragraph</p>\\n</div>\\n'
    """

    def __init__(self, config: Optional[PrettyConfig] = None) -> None:
        """Initialize the printer.

        Args:
            config: Indentation settings, defaults to two spaces per level
        """
        self.config = config or PrettyConfig()
        self.logger = get_logger(__name__, None, "pretty_printer")

    def format(self, markup: str) -> str:
        """Return ``markup`` re-indented, ending in a single newline."""
        start_time = time.time()
        indent = self.config.indent_unit
        out: List[str] = []
        depth = 0
        at_line_start = True
        last_was_text = False
        lowered: Optional[str] = None

        def line_break() -> None:
            out.append("\n" + indent * depth)

        pos = 0
        length = len(markup)
        while pos < length:
            match = _TAG_START.search(markup, pos)
            tag_at = match.start() if match else length
            if tag_at > pos:
                text = markup[pos:tag_at]
                pos = tag_at
                if text.strip():
                    out.append(text)
                    last_was_text = True
                    at_line_start = False
                continue

            if markup.startswith("<!--", pos):
                end = markup.find("-->", pos + 4)
                end = length if end == -1 else end + 3
                if at_line_start:
                    out.append(indent * depth)
                else:
                    line_break()
                out.append(markup[pos:end])
                pos = end
                at_line_start = False
                last_was_text = False
                continue

            end = _find_tag_end(markup, pos)
            token = markup[pos:end]
            pos = end

            if token.startswith(("<!", "<?")):
                if not at_line_start:
                    out.append("\n")
                out.append(token + "\n")
                at_line_start = True
                last_was_text = False
                continue

            name = _tag_name(token)
            inline = is_inline(name)

            if token.startswith("</"):
                if not inline:
                    depth = max(depth - 1, 0)
                    if not last_was_text and not at_line_start:
                        line_break()
                out.append(token)
                at_line_start = False
                last_was_text = False
                continue

            if at_line_start:
                out.append(indent * depth)
            elif not inline and not last_was_text:
                line_break()
            out.append(token)
            at_line_start = False
            last_was_text = False

            self_closing = token.endswith("/>")
            if not inline and not self_closing and not is_void(name):
                depth += 1

            if name in RAW_TEXT_TAGS and not self_closing:
                if lowered is None:
                    lowered = markup.lower()
                close = lowered.find(f"</{name}", pos)
                close = length if close == -1 else close
                raw = markup[pos:close]
                pos = close
                if raw.strip():
                    out.append(raw)
                    last_was_text = True

        result = "".join(out).rstrip("\n")
        if result and self.config.trailing_newline:
            result += "\n"

        if self.logger.is_enabled_for(logging.DEBUG):
            self.logger.debug(
                "Markup reformatted",
                extra={
                    "input_size": length,
                    "output_size": len(result),
                    "processing_time_ms": (time.time() - start_time) * 1000,
                },
            )
        return result


def pretty_html(markup: str, indent_width: int = 2) -> str:
    """Re-indent ``markup`` with ``indent_width`` spaces per level."""
    return PrettyPrinter(PrettyConfig(indent_width=indent_width)).format(markup)
