"""Attribute mapping for element constructors.

Attributes arrive as a flat ``key, value, key, value`` list. Keys are unique
and keep first-seen order; a repeated key keeps its position and takes the
later value.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Sequence


@dataclass
class AttributeMapping:
    """Result of mapping a flat attribute list."""

    attributes: Dict[str, str] = field(default_factory=dict)
    dropped: Optional[str] = None

    @property
    def had_odd_length(self) -> bool:
        """Whether an unpaired trailing item was discarded."""
        return self.dropped is not None


def map_attribute_pairs(pairs: Sequence[Any]) -> AttributeMapping:
    """Map a flat ``key, value, ...`` list to an ordered dictionary.

    An odd trailing item is dropped and reported on the result rather than
    raising, since a malformed call must never abort a render.

    Args:
        pairs: Flat list interpreted pairwise; non-string items are ``str()``-ed

    Returns:
        AttributeMapping with the attributes and the dropped item, if any
    """
    result = AttributeMapping()
    count = len(pairs)
    if count % 2:
        result.dropped = str(pairs[-1])
        count -= 1

    add_attribute_pairs(result.attributes, (pairs[i] for i in range(count)))
    return result


def add_attribute_pairs(target: Dict[str, str], items: Iterable[Any]) -> Optional[str]:
    """Add pairs from ``items`` to ``target`` in place.

    Returns:
        The unpaired trailing item that was dropped, or None
    """
    key: Optional[str] = None
    for item in items:
        if key is None:
            key = str(item)
        else:
            target[key] = str(item)
            key = None
    return key


def render_attributes(attributes: Dict[str, str]) -> str:
    """Serialize attributes as `` name="value"`` runs, values unescaped."""
    return "".join(f' {name}="{value}"' for name, value in attributes.items())
