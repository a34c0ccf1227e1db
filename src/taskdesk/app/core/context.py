"""Request-scoped context: correlation id and the resolved caller."""

from __future__ import annotations

from contextvars import ContextVar, Token

REQUEST_ID_HEADER = "X-Request-ID"

_request_id_ctx_var: ContextVar[str] = ContextVar("request_id", default="-")
_actor_id_ctx_var: ContextVar[str | None] = ContextVar("actor_id", default=None)


def get_request_id() -> str:
    return _request_id_ctx_var.get()


def bind_request_id(request_id: str) -> Token[str]:
    return _request_id_ctx_var.set(request_id)


def reset_request_id(token: Token[str]) -> None:
    _request_id_ctx_var.reset(token)


def get_actor_id() -> str | None:
    """Return the user id resolved for the current request, if any."""

    return _actor_id_ctx_var.get()


def bind_actor_id(actor_id: str | None) -> Token[str | None]:
    """Record which user the current request acts for, so log records can carry it."""

    return _actor_id_ctx_var.set(actor_id)


def reset_actor_id(token: Token[str | None]) -> None:
    _actor_id_ctx_var.reset(token)


__all__ = [
    "REQUEST_ID_HEADER",
    "bind_actor_id",
    "bind_request_id",
    "get_actor_id",
    "get_request_id",
    "reset_actor_id",
    "reset_request_id",
]
