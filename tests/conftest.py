"""Pytest fixtures for payroll core tests."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio

from au_payroll.database import create_schema, get_engine, make_session_factory
from au_payroll.stp.aggregator import PayEventAggregator
from au_payroll.stp.gateway import SubmissionGateway
from au_payroll.stp.providers import AuthorityStubProvider
from au_payroll.stp.repository import InMemoryPayEventRepository
from au_payroll.stp.service import PayEventService
from au_payroll.stp.sql_repository import SqlPayEventRepository

from helpers import SteppingClock

# Use in-memory SQLite for tests (with async support)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock(datetime(2024, 8, 16, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def aggregator(clock) -> PayEventAggregator:
    return PayEventAggregator(clock=clock)


@pytest.fixture
def provider() -> AuthorityStubProvider:
    return AuthorityStubProvider()


@pytest.fixture
def gateway(provider) -> SubmissionGateway:
    return SubmissionGateway(provider, timeout_seconds=1.0)


@pytest.fixture
def repository() -> InMemoryPayEventRepository:
    return InMemoryPayEventRepository()


@pytest.fixture
def service(repository, gateway, aggregator) -> PayEventService:
    return PayEventService(repository, gateway, aggregator)


@pytest_asyncio.fixture
async def sql_repository() -> AsyncGenerator[SqlPayEventRepository, None]:
    """SQL repository on a fresh in-memory database."""
    engine = get_engine(TEST_DATABASE_URL)
    await create_schema(engine)
    yield SqlPayEventRepository(make_session_factory(engine))
    await engine.dispose()
