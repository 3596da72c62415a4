"""Shared pytest fixtures — async test client, fake DB sessions, fake Redis."""

from __future__ import annotations

import uuid
from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager
from types import SimpleNamespace
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from farmportal.auth.dependencies import get_current_user
from farmportal.auth.jwt import create_access_token
from farmportal.database import get_db
from farmportal.main import app
from farmportal.models.enums import UserRoleEnum
from tests.fakes import FakeAsyncSession, FakeRedis, RecordingSession


def _user_stub(role: UserRoleEnum) -> Any:
	return SimpleNamespace(
		id=uuid.uuid4(),
		username=f"{role.value}-user",
		role=role,
		is_active=True,
		email=f"{role.value}@test.local",
	)


@pytest.fixture
def fake_db_session() -> FakeAsyncSession:
	"""A lightweight async-session stub for dependency overrides in API tests."""
	return FakeAsyncSession()


@pytest.fixture
def make_session() -> Callable[..., RecordingSession]:
	"""Factory for service-level session stubs: ``make_session(result, ...)``."""

	def _factory(*results: Any) -> RecordingSession:
		return RecordingSession(list(results))

	return _factory


@pytest.fixture
def fake_redis() -> FakeRedis:
	"""Reusable fake Redis client with async publish and counters."""
	return FakeRedis()


@asynccontextmanager
async def _noop_lifespan(_: Any) -> AsyncGenerator[None, None]:
	yield


@pytest.fixture
async def client(fake_db_session: FakeAsyncSession) -> AsyncGenerator[AsyncClient, None]:
	"""HTTPX async client with lifespan disabled, DB mocked and an admin signed in."""

	async def override_get_db() -> AsyncGenerator[Any, None]:
		yield fake_db_session

	async def override_current_user() -> Any:
		return _user_stub(UserRoleEnum.admin)

	app.dependency_overrides[get_db] = override_get_db
	app.dependency_overrides[get_current_user] = override_current_user
	original_lifespan = app.router.lifespan_context
	app.router.lifespan_context = _noop_lifespan

	transport = ASGITransport(app=app)
	async with AsyncClient(transport=transport, base_url="http://test") as test_client:
		yield test_client

	app.router.lifespan_context = original_lifespan
	app.dependency_overrides.clear()


@pytest.fixture
async def auth_client(fake_db_session: FakeAsyncSession) -> AsyncGenerator[AsyncClient, None]:
	"""HTTPX async client with DB override only (real auth dependencies active)."""

	async def override_get_db() -> AsyncGenerator[Any, None]:
		yield fake_db_session

	app.dependency_overrides[get_db] = override_get_db
	original_lifespan = app.router.lifespan_context
	app.router.lifespan_context = _noop_lifespan

	transport = ASGITransport(app=app)
	async with AsyncClient(transport=transport, base_url="http://test") as test_client:
		yield test_client

	app.router.lifespan_context = original_lifespan
	app.dependency_overrides.clear()


@pytest.fixture
def buyer_user() -> Any:
	return _user_stub(UserRoleEnum.buyer)


@pytest.fixture
def farmer_user() -> Any:
	user = _user_stub(UserRoleEnum.farmer)
	user.farmer = SimpleNamespace(id=uuid.uuid4(), user_id=user.id)
	return user


@pytest.fixture
def auth_user_id() -> uuid.UUID:
	return uuid.UUID("11111111-1111-1111-1111-111111111111")


@pytest.fixture
def access_token(auth_user_id: uuid.UUID) -> str:
	return create_access_token(str(auth_user_id), expires_minutes=30, role="farmer")
