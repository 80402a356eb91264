"""Pytest configuration and fixtures."""

import os
from typing import AsyncGenerator

# Disable rate limiting for tests; must be set before importing the app
os.environ["CONTROLGAP_RATE_LIMIT_ENABLED"] = "false"
os.environ["CONTROLGAP_ORG_CONFIG"] = os.path.join(
    os.path.dirname(__file__), "nonexistent-controlgap.yaml"
)

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from controlgap.api.server import app
from controlgap.config import OrganizationSettings, set_org_settings
from controlgap.db import get_db, Base
from controlgap.db.models import ProcessDB
from controlgap.db.repositories import ProcessRepository, StandardControlRepository
from controlgap.models import (
    ControlType,
    DomainTag,
    MaturityProfileRule,
    ProfileTag,
    StandardControlSpec,
)
from controlgap.models.rules import ALWAYS


# Use in-memory SQLite for tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(autouse=True)
def default_org_settings():
    """Run every test against default organization settings."""
    set_org_settings(OrganizationSettings())
    yield
    set_org_settings(None)


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(test_engine) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=True,
    )

    async def override_get_db():
        async with async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# Small catalog: A always applies, B needs automation, C needs an ERP
ABC_CATALOG = [
    StandardControlSpec(
        control_name="A",
        control_objective="Applies to every process",
        control_type=ControlType.PREVENTIVE,
        domain_tag=DomainTag.OPS,
        typical_frequency="monthly",
        typical_evidence="Review log",
        rule=ALWAYS,
    ),
    StandardControlSpec(
        control_name="B",
        control_objective="Applies to automated processes",
        control_type=ControlType.DETECTIVE,
        domain_tag=DomainTag.REPORTING,
        typical_frequency="daily",
        typical_evidence="Exception report",
        rule=MaturityProfileRule(tags=frozenset({ProfileTag.AUTOMATED})),
    ),
    StandardControlSpec(
        control_name="C",
        control_objective="Applies to ERP-enabled processes",
        control_type=ControlType.CORRECTIVE,
        domain_tag=DomainTag.FINANCIAL,
        typical_frequency="quarterly",
        typical_evidence="Reconciliation sign-off",
        rule=MaturityProfileRule(tags=frozenset({ProfileTag.ERP_ENABLED})),
    ),
]

ERP_ANSWERS = {
    "automation": "erp",
    "processStructure": "centralized",
    "failureImpact": "high",
}


@pytest_asyncio.fixture(scope="function")
async def abc_catalog(test_session: AsyncSession) -> dict:
    """Store the A/B/C catalog; returns catalog ids by control name."""
    repo = StandardControlRepository(test_session)
    ids = {}
    for spec in ABC_CATALOG:
        control = await repo.create(spec)
        ids[spec.control_name] = control.id
    await test_session.commit()
    return ids


@pytest_asyncio.fixture(scope="function")
async def test_process(test_session: AsyncSession) -> ProcessDB:
    """Create a test process."""
    process = await ProcessRepository(test_session).create(
        process_name="Accounts Payable",
        process_scope="Invoice receipt to payment",
        process_owner="AP Manager",
        systems_in_scope=["SAP"],
    )
    await test_session.commit()
    return process
