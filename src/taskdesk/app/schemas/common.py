"""Validators shared by several payload schemas."""

from __future__ import annotations

from collections.abc import Iterable


def require_text(value: object, label: str) -> str:
    """Return ``value`` stripped, rejecting blank strings."""

    if not isinstance(value, str):
        raise ValueError(f"{label} must be a string.")
    cleaned = value.strip()
    if not cleaned:
        raise ValueError(f"{label} must not be blank.")
    return cleaned


def optional_text(value: object) -> str | None:
    """Collapse blank optional strings to ``None``."""

    if value is None:
        return None
    if isinstance(value, str):
        cleaned = value.strip()
        return cleaned or None
    return value  # type: ignore[return-value]


def normalise_user_ids(values: Iterable[str] | None) -> list[str]:
    """Deduplicate and sort a collection of user ids, dropping blanks."""

    if values is None:
        return []
    return sorted({value.strip() for value in values if value and value.strip()})


__all__ = ["normalise_user_ids", "optional_text", "require_text"]
