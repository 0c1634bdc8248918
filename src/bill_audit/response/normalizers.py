"""Field normalizers for untrusted model output.

Every function here is total: it accepts any decoded JSON value (or a
missing field, passed as None) and returns a value of the target type,
falling back to a fixed default instead of raising.
"""

from collections.abc import Sequence
import math
from typing import Any, get_args

from ..constants import DEFAULT_PAGE_NUMBER, DEFAULT_PIN_COORDINATE
from .types import BillType, Comparison, JsonValue, Number, Verdict

BILL_TYPE_TOKENS: tuple[tuple[str, BillType], ...] = (
    ("water", "water"),
    ("electric", "electric"),
    ("electricity", "electric"),
    ("gas", "gas"),
    ("internet", "internet"),
)

COMPARISON_TOKENS: tuple[tuple[str, Comparison], ...] = (
    ("below", "below"),
    ("above", "above"),
)

VERDICTS: tuple[Verdict, ...] = get_args(Verdict)


def as_text(value: JsonValue) -> str:
    """Return the text form of a scalar; containers have none and give ""."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return str(value)
    return ""


def coerce_number(value: JsonValue) -> Number | None:
    """Coerce a value to a number, or None when it has no numeric reading.

    Integers and floats pass through, numeric strings are parsed (integral
    results become ints). Booleans, containers and blank strings are None.
    Non-finite results are returned as-is; callers decide how to treat them.
    Integers too large for a float have no usable reading and give None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        try:
            float(value)
        except OverflowError:
            return None
        return value
    if isinstance(value, float):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
        if math.isfinite(number) and number.is_integer():
            return int(number)
        return number
    return None


def _finite(value: JsonValue) -> Number | None:
    number = coerce_number(value)
    if number is None or not math.isfinite(number):
        return None
    return number


def clamp_pct(value: JsonValue) -> int:
    """Round half up and clamp to [0, 100]; missing or non-finite gives 0."""
    number = _finite(value)
    if number is None:
        return 0
    return max(0, min(100, math.floor(number + 0.5)))


def number_or_none(value: JsonValue) -> Number | None:
    """Return a finite number, or None."""
    return _finite(value)


def positive_int(value: JsonValue, default: int = DEFAULT_PAGE_NUMBER) -> int:
    """Truncate to an integer; missing, non-finite or below 1 gives ``default``."""
    number = _finite(value)
    if number is None or int(number) < 1:
        return default
    return int(number)


def coordinate(value: JsonValue, default: float = DEFAULT_PIN_COORDINATE) -> Number:
    """Return a finite number, or ``default`` when there is none."""
    number = _finite(value)
    return default if number is None else number


def string_list(value: JsonValue) -> list[str]:
    """Keep the string items of a list, trimmed, dropping blanks."""
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def text_or_default(value: JsonValue, default: str) -> str:
    """Trimmed text form of ``value``, or ``default`` when that is empty."""
    return as_text(value).strip() or default


def text_or_none(value: JsonValue) -> str | None:
    """Trimmed text form of ``value``, or None when that is empty."""
    return as_text(value).strip() or None


def match_enum[T](value: JsonValue, tokens: Sequence[tuple[str, T]], default: T) -> T:
    """Return the member of the first token found in the lower-cased text.

    Tokens are checked in order, so earlier tokens win when the text
    contains several (``"Gas & Electric"`` is electric).
    """
    text = as_text(value).lower()
    for token, member in tokens:
        if token in text:
            return member
    return default


def normalize_bill_type(value: JsonValue) -> BillType:
    return match_enum(value, BILL_TYPE_TOKENS, "unknown")


def normalize_comparison(value: JsonValue) -> Comparison:
    return match_enum(value, COMPARISON_TOKENS, "about_average")


def normalize_verdict(value: JsonValue) -> Verdict:
    """Exact match after trimming and lower-casing; anything else is low."""
    text = as_text(value).strip().lower()
    for verdict in VERDICTS:
        if text == verdict:
            return verdict
    return "low"


def as_object(value: Any) -> dict[str, JsonValue]:
    """Return ``value`` when it is a JSON object, else an empty dict."""
    return value if isinstance(value, dict) else {}


def object_items(value: JsonValue) -> list[dict[str, JsonValue]]:
    """Return the object elements of a list; anything else gives []."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]
