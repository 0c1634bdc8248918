"""
Isolate the JSON object in free-form model text
"""

import re

from ..exceptions import ExtractionError

_JSON_FENCE = re.compile(r"```json\s*", re.IGNORECASE)
_BARE_FENCE = re.compile(r"```\s*")


def strip_code_fences(text: str) -> str:
    """Remove fenced code-block markers, with or without a ``json`` tag."""
    return _BARE_FENCE.sub("", _JSON_FENCE.sub("", text)).strip()


def extract_json_object(text: str) -> str:
    """Return the substring from the first ``{`` to the last ``}`` inclusive.

    This is a heuristic rather than a tokenizer: it assumes the answer is the
    only brace-delimited region in the text. Commentary that contains its own
    braces ahead of or after the answer ends up inside the returned slice.

    Raises:
        ExtractionError: If there is no ``{``, no ``}``, or the last ``}``
            does not come after the first ``{``.
    """
    cleaned = strip_code_fences(text)
    first = cleaned.find("{")
    last = cleaned.rfind("}")
    if first == -1 or last == -1 or last <= first:
        raise ExtractionError("No JSON object found in model output.", raw_text=text)
    return cleaned[first : last + 1]
