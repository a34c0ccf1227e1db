"""Persistence plumbing: sessions, the entity store and its change feed."""

from __future__ import annotations

from .changes import ChangeEvent, ChangeFeed, ChangeListener, ChangeType, Subscription, change_feed
from .session import get_engine, get_session, get_session_maker
from .store import EntityStore, RecordNotFoundError, SQLModelEntityStore, SnapshotListener, StoreError

__all__ = [
    "ChangeEvent",
    "ChangeFeed",
    "ChangeListener",
    "ChangeType",
    "EntityStore",
    "RecordNotFoundError",
    "SQLModelEntityStore",
    "SnapshotListener",
    "StoreError",
    "Subscription",
    "change_feed",
    "get_engine",
    "get_session",
    "get_session_maker",
]
