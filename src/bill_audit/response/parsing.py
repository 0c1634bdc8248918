"""
JSON parse step between extraction and sanitizing
"""

import json
from typing import Any

from ..exceptions import ParseError
from .extraction import extract_json_object


def parse_json_object(fragment: str, *, raw_text: str | None = None) -> dict[str, Any]:
    """Decode an extracted fragment that must hold a JSON object.

    Args:
        fragment: Output of `extract_json_object`.
        raw_text: The full model text, attached to the error for diagnostics.

    Raises:
        ParseError: If the fragment is not valid JSON or not an object.
    """
    raw = fragment if raw_text is None else raw_text
    try:
        parsed = json.loads(fragment)
    except json.JSONDecodeError as e:
        raise ParseError(
            f"Model output is not valid JSON: {e.msg} at position {e.pos}",
            raw_text=raw,
        ) from e
    except (ValueError, RecursionError) as e:
        # Oversized integer literals and very deep nesting
        raise ParseError(
            f"Model output could not be decoded: {type(e).__name__}",
            raw_text=raw,
        ) from e
    if not isinstance(parsed, dict):
        raise ParseError(
            f"Model output is a JSON {type(parsed).__name__}, expected an object",
            raw_text=raw,
        )
    return parsed


def parse_model_text(text: str) -> dict[str, Any]:
    """Run extraction and parsing on raw model text.

    Raises:
        ExtractionError: If no brace-delimited region exists.
        ParseError: If that region is not a JSON object.
    """
    return parse_json_object(extract_json_object(text), raw_text=text)
