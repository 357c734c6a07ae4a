"""Pull the model's text out of an upstream envelope.

The provider does not guarantee one response shape, so each known shape gets
a matcher and the first one that yields non-empty text wins:

1. a flat ``output_text`` string
2. ``output[*].content[*]`` blocks typed ``output_text`` or ``text``, joined by newlines
3. a generic ``text`` string
"""
import logging
from typing import Any, Callable

from roastshot.constants import (
    ENVELOPE_CONTENT_KEY,
    ENVELOPE_FALLBACK_TEXT_KEY,
    ENVELOPE_FLAT_TEXT_KEY,
    ENVELOPE_OUTPUT_KEY,
    TEXT_BLOCK_TYPES,
)

logger = logging.getLogger(__name__)

ShapeMatcher = Callable[[dict], str]


def _string_field(envelope: dict, key: str) -> str:
    match envelope.get(key):
        case str() as text:
            return text
        case _:
            return ""


def _flat_text(envelope: dict) -> str:
    return _string_field(envelope, ENVELOPE_FLAT_TEXT_KEY)


def _text_blocks(item: Any) -> list[str]:
    match item.get(ENVELOPE_CONTENT_KEY) if isinstance(item, dict) else None:
        case list() as content:
            return [
                block["text"]
                for block in content
                if isinstance(block, dict)
                and block.get("type") in TEXT_BLOCK_TYPES
                and isinstance(block.get("text"), str)
                and block["text"]
            ]
        case _:
            return []


def _output_blocks(envelope: dict) -> str:
    match envelope.get(ENVELOPE_OUTPUT_KEY):
        case list() as items:
            return "\n".join(
                fragment for item in items for fragment in _text_blocks(item)
            )
        case _:
            return ""


def _fallback_text(envelope: dict) -> str:
    return _string_field(envelope, ENVELOPE_FALLBACK_TEXT_KEY)


SHAPE_MATCHERS: tuple[ShapeMatcher, ...] = (_flat_text, _output_blocks, _fallback_text)


def extract(envelope: Any) -> str:
    """Return the model text from ``envelope``, or "" when no shape matches. Never raises."""
    match envelope:
        case dict():
            pass
        case _:
            logger.debug("Envelope is %s, not an object", type(envelope).__name__)
            return ""
    for matcher in SHAPE_MATCHERS:
        text = matcher(envelope)
        if text:
            return text
    return ""
