"""Shared parsing helpers for environment and argument value normalization."""

from __future__ import annotations


def normalize_optional_string(value: object) -> str | None:
    """Normalize an optional value to a stripped non-empty string.

    Args:
        value: Arbitrary input value.

    Returns:
        Stripped string value, or `None` when the value is empty after trimming.
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text


def parse_positive_float(value: str, field_name: str) -> float:
    """Parse a strictly positive number from its textual form.

    Args:
        value: Text value to parse.
        field_name: Field name for an actionable validation error message.

    Raises:
        ValueError: If the token is not a positive finite number.
    """

    try:
        parsed = float(value)
    except ValueError as exc:
        raise ValueError(f"`{field_name}` must be a positive number.") from exc
    if not parsed > 0 or parsed == float("inf"):
        raise ValueError(f"`{field_name}` must be a positive number.")
    return parsed
