"""
Best-effort recovery of JSON from free-form model responses.

The model is asked for pure JSON but may wrap it in a code fence, surround it
with prose, leave trailing commas or forget to quote keys. Recovery applies
repair passes from the most benign to the most aggressive; each pass is a pure
``text -> text`` function and is followed by its own parse attempt.
"""

import json
import logging
import re
from typing import Any, Callable

from .errors import MalformedModelOutputError
from .schema import ContentTree

logger = logging.getLogger(__name__)

CODE_FENCE = "```"

_OPENING_FENCE_RE = re.compile(r"^```[a-zA-Z]*\n?")
_CLOSING_FENCE_RE = re.compile(r"\n?```$")
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")
_BARE_KEY_RE = re.compile(r"([,{\s])([A-Za-z_][A-Za-z0-9_\-]*)\s*:")


def strip_code_fence(text: str) -> str:
    """Remove a surrounding ``` fence and its optional language tag."""
    cleaned = text.strip()
    if cleaned.startswith(CODE_FENCE) and cleaned.endswith(CODE_FENCE):
        cleaned = _OPENING_FENCE_RE.sub("", cleaned)
        cleaned = _CLOSING_FENCE_RE.sub("", cleaned)
    return cleaned


def slice_outer_braces(text: str) -> str:
    """Keep only the span from the first '{' to the last '}'."""
    first = text.find("{")
    last = text.rfind("}")
    if first != -1 and last > first:
        return text[first:last + 1]
    return text


def strip_trailing_commas(text: str) -> str:
    """Drop commas directly before a closing brace or bracket."""
    return _TRAILING_COMMA_RE.sub(r"\1", text)


def quote_bare_keys(text: str) -> str:
    """Quote unquoted object keys. Heuristic: may misfire on values with colons."""
    return _BARE_KEY_RE.sub(r'\1"\2":', text)


# Cleanup applied before the first parse attempt
CLEANUP_PASSES: tuple[Callable[[str], str], ...] = (
    strip_code_fence,
    slice_outer_braces,
)

# Each entry is tried in order against the cleaned text until one parses
REPAIR_LADDER: tuple[tuple[str, tuple[Callable[[str], str], ...]], ...] = (
    ("strict", ()),
    ("trailing commas", (strip_trailing_commas,)),
    ("bare keys", (quote_bare_keys, strip_trailing_commas)),
)


def recover_json(text: str) -> Any:
    """
    Parse a model response into a JSON value, repairing it where needed.

    Args:
        text: Raw response text from the model.

    Returns:
        The parsed JSON value.

    Raises:
        MalformedModelOutputError: If no repair pass yields valid JSON.
    """
    if text is None:
        raise MalformedModelOutputError("Model returned no text")

    cleaned = text
    for cleanup in CLEANUP_PASSES:
        cleaned = cleanup(cleaned)

    last_error = None
    for name, passes in REPAIR_LADDER:
        candidate = cleaned
        for repair in passes:
            candidate = repair(candidate)
        try:
            value = json.loads(candidate)
        except json.JSONDecodeError as e:
            logger.debug(f"JSON parse attempt '{name}' failed: {e}")
            last_error = e
            continue
        if passes:
            logger.info(f"Recovered model JSON with repair pass: {name}")
        return value

    raise MalformedModelOutputError(
        f"Model output is not valid JSON and automatic repair failed ({last_error}). "
        "Inspect the logged response for details."
    )


def recover_content_tree(text: str) -> ContentTree:
    """
    Recover a Content Tree from a model response.

    Same as recover_json, but the top-level value must be a JSON object.

    Raises:
        MalformedModelOutputError: If recovery fails or the value is not an object.
    """
    value = recover_json(text)
    if not isinstance(value, dict):
        raise MalformedModelOutputError(
            f"Model output must be a JSON object, got {type(value).__name__}"
        )
    return value
