"""Tag registry: which tags are void, which flow inline, which are known at all.

The registry is static. Void tags never get a closing tag and never take
children; inline tags never force a line break in pretty-printed output.
"""

from enum import Enum
from typing import FrozenSet, Tuple

# Reserved name for raw text runs. Never rendered as a tag.
TEXT_TAG = "t"


class TagKind(Enum):
    """Classification of a tag name."""

    VOID = "void"
    INLINE = "inline"
    BLOCK = "block"


VOID_TAGS: FrozenSet[str] = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input", "keygen",
    "link", "meta", "param", "source", "track", "wbr",
})

INLINE_TAGS: FrozenSet[str] = frozenset({
    "a", "abbr", "b", "bdi", "bdo", "br", "cite", "code", "data", "dfn", "em",
    "i", "img", "kbd", "label", "mark", "q", "s", "samp", "small", "span",
    "strong", "sub", "sup", "time", "u", "var", "wbr",
})

# Contents of these elements are raw text, not markup.
RAW_TEXT_TAGS: FrozenSet[str] = frozenset({"script", "style"})

# Names that get generated Builder shortcuts (``b.div()``, ``b.div_class()``).
KNOWN_TAGS: Tuple[str, ...] = (
    "a", "abbr", "address", "area", "article", "aside", "audio", "b", "base",
    "bdi", "bdo", "blockquote", "body", "br", "button", "canvas", "caption",
    "cite", "code", "col", "colgroup", "data", "datalist", "dd", "del",
    "details", "dfn", "dialog", "div", "dl", "dt", "em", "embed", "fieldset",
    "figcaption", "figure", "footer", "form", "h1", "h2", "h3", "h4", "h5",
    "h6", "head", "header", "hgroup", "hr", "html", "i", "iframe", "img",
    "input", "ins", "kbd", "label", "legend", "li", "link", "main", "map",
    "mark", "menu", "meta", "meter", "nav", "noscript", "object", "ol",
    "optgroup", "option", "output", "p", "param", "picture", "pre",
    "progress", "q", "rp", "rt", "ruby", "s", "samp", "script", "search",
    "section", "select", "slot", "small", "source", "span", "strong", "style",
    "sub", "summary", "sup", "svg", "table", "tbody", "td", "template",
    "textarea", "tfoot", "th", "thead", "time", "title", "tr", "track", "u",
    "ul", "var", "video", "wbr",
)

_KNOWN: FrozenSet[str] = frozenset(KNOWN_TAGS)


def is_void(name: str) -> bool:
    """Check whether ``name`` is a void tag (case-insensitive)."""
    return name.lower() in VOID_TAGS


def is_inline(name: str) -> bool:
    """Check whether ``name`` flows inline when pretty-printed."""
    return name.lower() in INLINE_TAGS


def is_known(name: str) -> bool:
    """Check whether ``name`` has generated builder shortcuts."""
    return name.lower() in _KNOWN


def tag_kind(name: str) -> TagKind:
    """Classify a tag name. Void wins over inline for tags that are both."""
    lowered = name.lower()
    if lowered in VOID_TAGS:
        return TagKind.VOID
    if lowered in INLINE_TAGS:
        return TagKind.INLINE
    return TagKind.BLOCK
