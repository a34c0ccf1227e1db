"""Shared plumbing for the policy-enforcing managers."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, ClassVar, TypeVar

from pydantic import BaseModel, ValidationError

from ..db.changes import ChangeListener, Subscription
from ..db.store import EntityStore, StoreError
from ..models import EntityKind
from ..policy import Action, Identity, denial_message
from ..results import FORBIDDEN, NOT_FOUND, STORE_ERROR, VALIDATION_ERROR, Result

logger = logging.getLogger(__name__)

SchemaType = TypeVar("SchemaType", bound=BaseModel)


def parse_payload(schema: type[SchemaType], data: SchemaType | BaseModel | Mapping[str, Any]) -> SchemaType:
    """Validate ``data`` against ``schema``; raises ``pydantic.ValidationError``."""

    if isinstance(data, schema):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    return schema.model_validate(data)


def describe_validation_error(exc: ValidationError) -> str:
    """Flatten a pydantic error into a single readable sentence."""

    parts: list[str] = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()))
        message = str(error.get("msg", "invalid value"))
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Validation failed."


class BaseManager:
    """Common failure handling for managers working on one entity kind."""

    kind: ClassVar[EntityKind]
    label: ClassVar[str]

    def __init__(self, store: EntityStore) -> None:
        self._store = store

    @property
    def store(self) -> EntityStore:
        return self._store

    def _deny(self, identity: Identity, action: Action) -> Result[Any]:
        logger.warning(
            "Authorization denied",
            extra={
                "entity_kind": self.kind.value,
                "action": action.value,
                "actor_id": identity.user_id,
                "role": identity.role.value,
            },
        )
        return Result.fail(denial_message(identity, action, self.kind), FORBIDDEN)

    def _invalid(self, exc: ValidationError) -> Result[Any]:
        message = describe_validation_error(exc)
        logger.info(
            "Rejected invalid payload",
            extra={"entity_kind": self.kind.value, "reason": message},
        )
        return Result.fail(message, VALIDATION_ERROR)

    def _missing(self, record_id: str) -> Result[Any]:
        return Result.fail(f"{self.label} {record_id} not found", NOT_FOUND)

    def _store_failure(self, operation: str, exc: StoreError) -> Result[Any]:
        logger.error(
            "Store failure during %s",
            operation,
            extra={"entity_kind": self.kind.value, "operation": operation},
        )
        return Result.fail(str(exc), STORE_ERROR)

    def _log_read_failure(self, operation: str, exc: StoreError) -> None:
        logger.error(
            "Store failure during %s; returning empty result",
            operation,
            extra={"entity_kind": self.kind.value, "operation": operation, "reason": str(exc)},
        )

    async def _watch(self, kinds: Iterable[EntityKind], recompute: ChangeListener) -> Subscription:
        """Register ``recompute`` on the change feed and run it once for the initial push.

        A failing first push is logged like any other listener failure; the
        subscription stays live and is returned so the caller can revoke it.
        """

        subscription = self._store.watch(tuple(kinds), recompute)
        try:
            await recompute(None)  # type: ignore[arg-type]
        except Exception:
            logger.exception("Initial subscription push failed", extra={"entity_kind": self.kind.value})
        return subscription

    def _log_mutation(self, verb: str, identity: Identity | None, record_id: str) -> None:
        logger.info(
            "%s %s",
            self.label,
            verb,
            extra={
                "entity_kind": self.kind.value,
                "entity_id": record_id,
                "actor_id": identity.user_id if identity is not None else None,
            },
        )


__all__ = ["BaseManager", "describe_validation_error", "parse_payload"]
