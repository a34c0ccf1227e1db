"""Structured outcome returned by every mutating manager operation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")

FORBIDDEN = "forbidden"
NOT_FOUND = "not_found"
VALIDATION_ERROR = "validation_error"
STORE_ERROR = "store_error"


@dataclass(frozen=True, slots=True)
class Result(Generic[T]):
    """Either ``success`` with ``data`` or a failure carrying ``error``.

    ``code`` classifies failures (forbidden, not_found, validation_error,
    store_error) so outer layers can map them without parsing messages.
    """

    success: bool
    data: T | None = None
    error: str | None = None
    code: str | None = None

    @classmethod
    def ok(cls, data: T | None = None) -> "Result[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, code: str) -> "Result[T]":
        return cls(success=False, error=error, code=code)

    def to_dict(self) -> dict[str, Any]:
        if self.success:
            return {"success": True, "data": self.data}
        return {"success": False, "error": self.error}


__all__ = [
    "FORBIDDEN",
    "NOT_FOUND",
    "Result",
    "STORE_ERROR",
    "VALIDATION_ERROR",
]
