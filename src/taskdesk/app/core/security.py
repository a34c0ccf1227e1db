"""Bearer token verification for identities issued by the external provider."""

from __future__ import annotations

from typing import Any

from jose import JWTError, jwt
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .config import Settings


class InvalidTokenError(ValueError):
    """Raised when a bearer token cannot be trusted."""


class TokenClaims(BaseModel):
    """The subset of JWT claims the service relies on."""

    model_config = ConfigDict(extra="ignore")

    sub: str = Field(min_length=1, max_length=64)
    email: str | None = None


def decode_access_token(token: str, settings: Settings) -> TokenClaims:
    """Verify ``token`` with the configured secret and return its claims."""

    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"verify_aud": False},
        )
    except JWTError as exc:
        raise InvalidTokenError("Token signature or expiry is invalid.") from exc

    try:
        return TokenClaims.model_validate(payload)
    except ValidationError as exc:
        raise InvalidTokenError("Token is missing a usable subject.") from exc


__all__ = ["InvalidTokenError", "TokenClaims", "decode_access_token"]
