"""
Pluralization — select one variant of a pipe-delimited message.

Message format:
    "{0} No apples|{1} One apple|[2,*] :count apples"
    "apple|apples"

Selection order:
1. Inline conditions: the first segment whose {n}, {n1,n2} or [n1,n2]
   prefix matches the number wins ("*" = unbounded on that side).
2. Plural rules: conditions are stripped and the language's plural index
   picks the segment, falling back to the first one.

Malformed conditions never raise; they simply never match.
"""

import re

from .plural_rules import get_plural_index

__all__ = ["choose"]

_CONDITION_RE = re.compile(r"^[\{\[]([^\[\]\{\}]*)[\}\]](.*)", re.DOTALL)
_CONDITION_PREFIX_RE = re.compile(r"^[\{\[]([^\[\]\{\}]*)[\}\]]")


def choose(message: str, number: float, lang: str | None) -> str:
    """Select the translation variant matching a number.

    Args:
        message: Pipe-delimited message, optionally with inline conditions.
        number: The count driving the selection (fractions allowed).
        lang: Language tag used for the plural rule fallback.

    Returns:
        The selected segment. Segments chosen by an inline condition are
        trimmed; segments chosen by the plural rule are returned as-is.
    """
    segments = message.split("|")

    extracted = _extract(segments, number)
    if extracted is not None:
        return extracted.strip()

    segments = _strip_conditions(segments)
    index = get_plural_index(lang, number)

    if len(segments) == 1 or index >= len(segments) or not segments[index]:
        return segments[0]

    return segments[index]


def _extract(segments: list[str], number: float) -> str | None:
    for part in segments:
        line = _extract_from_string(part, number)
        if line is not None:
            return line
    return None


def _extract_from_string(part: str, number: float) -> str | None:
    """Return the segment text if its inline condition matches the number."""
    match = _CONDITION_RE.match(part)
    if match is None:
        return None

    condition, value = match.group(1), match.group(2)

    if "," in condition:
        low, high = (s.strip() for s in condition.split(",")[:2])
        if high == "*":
            low_value = _parse_number(low)
            return value if low_value is not None and number >= low_value else None
        if low == "*":
            high_value = _parse_number(high)
            return value if high_value is not None and number <= high_value else None

        low_value, high_value = _parse_number(low), _parse_number(high)
        if low_value is None or high_value is None:
            return None
        return value if low_value <= number <= high_value else None

    exact = _parse_number(condition)
    return value if exact is not None and exact == number else None


def _strip_conditions(segments: list[str]) -> list[str]:
    return [_CONDITION_PREFIX_RE.sub("", part, count=1) for part in segments]


def _parse_number(text: str) -> float | None:
    try:
        return float(text)
    except ValueError:
        return None
