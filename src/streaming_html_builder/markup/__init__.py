"""Streaming markup: tag registry, attributes, elements, builders and pooling."""

from .tags import TEXT_TAG, TagKind, is_inline, is_known, is_void, tag_kind
from .attributes import AttributeMapping, map_attribute_pairs, render_attributes
from .element import (
    NO_VALUE,
    Element,
    defer_element,
    format_text,
    new_element,
    new_text_element,
)
from .builder import Builder, Component
from .pool import BuilderPool, acquire_builder, pooled_builder, release_builder

__all__ = [
    "TEXT_TAG",
    "TagKind",
    "is_inline",
    "is_known",
    "is_void",
    "tag_kind",
    "AttributeMapping",
    "map_attribute_pairs",
    "render_attributes",
    "NO_VALUE",
    "Element",
    "defer_element",
    "format_text",
    "new_element",
    "new_text_element",
    "Builder",
    "Component",
    "BuilderPool",
    "acquire_builder",
    "pooled_builder",
    "release_builder",
]
