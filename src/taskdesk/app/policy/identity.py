"""The acting principal passed explicitly through every core operation."""

from __future__ import annotations

from dataclasses import dataclass

from ..models import UserRole


@dataclass(frozen=True, slots=True)
class Identity:
    """Resolved ``(user_id, role)`` pair for the duration of a request."""

    user_id: str
    role: UserRole

    @classmethod
    def of(cls, user_id: str, role: UserRole | str) -> "Identity":
        return cls(user_id=user_id, role=UserRole(role))


__all__ = ["Identity"]
