from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from taskdesk.app.core.config import get_settings
from taskdesk.app.db import ChangeFeed, SQLModelEntityStore, change_feed
from taskdesk.app.deps import get_db_session
from taskdesk.app.main import create_app
from taskdesk.app.models import EntityKind, Project, Task, UserProfile, UserRole
from taskdesk.app.policy import Identity

ADMIN_ID = "admin-1"
EMPLOYEE_ID = "employee-1"
CLIENT_ID = "client-1"
OTHER_CLIENT_ID = "client-2"


@pytest_asyncio.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    engine: AsyncEngine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as connection:
        await connection.run_sync(SQLModel.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        try:
            yield session
        finally:
            if session.in_transaction():
                await session.rollback()


@pytest.fixture
def feed() -> ChangeFeed:
    return ChangeFeed()


@pytest.fixture
def store(session: AsyncSession, feed: ChangeFeed) -> SQLModelEntityStore:
    return SQLModelEntityStore(session, feed=feed)


@pytest.fixture
def admin() -> Identity:
    return Identity.of(ADMIN_ID, UserRole.ADMIN)


@pytest.fixture
def employee() -> Identity:
    return Identity.of(EMPLOYEE_ID, UserRole.EMPLOYEE)


@pytest.fixture
def client_identity() -> Identity:
    return Identity.of(CLIENT_ID, UserRole.CLIENT)


@pytest.fixture
def other_client() -> Identity:
    return Identity.of(OTHER_CLIENT_ID, UserRole.CLIENT)


@pytest.fixture
def seed_project(store: SQLModelEntityStore) -> Callable[..., Awaitable[Project]]:
    async def _seed(project_id: str, *, client_id: str | None = None, **values: Any) -> Project:
        values.setdefault("name", f"Project {project_id}")
        values.setdefault("created_by", ADMIN_ID)
        project = Project(id=project_id, client_id=client_id, **values)
        return await store.insert(EntityKind.PROJECT, project)

    return _seed


@pytest.fixture
def seed_task(store: SQLModelEntityStore) -> Callable[..., Awaitable[Task]]:
    async def _seed(
        task_id: str,
        *,
        project_id: str | None = None,
        assignees: list[str] | None = None,
        **values: Any,
    ) -> Task:
        values.setdefault("title", f"Task {task_id}")
        values.setdefault("created_by", ADMIN_ID)
        task = Task(id=task_id, project_id=project_id, assignees=sorted(assignees or []), **values)
        return await store.insert(EntityKind.TASK, task)

    return _seed


@pytest_asyncio.fixture
async def profiles(store: SQLModelEntityStore) -> dict[str, UserProfile]:
    seeded: dict[str, UserProfile] = {}
    for user_id, role in (
        (ADMIN_ID, UserRole.ADMIN),
        (EMPLOYEE_ID, UserRole.EMPLOYEE),
        (CLIENT_ID, UserRole.CLIENT),
        (OTHER_CLIENT_ID, UserRole.CLIENT),
    ):
        profile = UserProfile(id=user_id, email=f"{user_id}@example.com", name=user_id.title(), role=role)
        seeded[user_id] = await store.insert(EntityKind.USER, profile)
    return seeded


@pytest_asyncio.fixture
async def app(session: AsyncSession) -> AsyncIterator[FastAPI]:
    get_settings.cache_clear()
    application = create_app()

    async def _override_db_session():
        yield session

    application.dependency_overrides[get_db_session] = _override_db_session
    try:
        yield application
    finally:
        application.dependency_overrides.clear()
        change_feed.reset()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as http_client:
        yield http_client


def auth_headers(user_id: str) -> dict[str, str]:
    settings = get_settings()
    token = jwt.encode({"sub": user_id}, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for() -> Callable[[str], dict[str, str]]:
    return auth_headers
