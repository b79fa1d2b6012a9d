"""Pytest configuration and fixtures for CharterBox tests.

Most tests run against in-memory stores. Tests using `init_test_db` need a
real MongoDB and are skipped when none is reachable.
"""

import asyncio
import os
import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import pytest
import pytest_asyncio
from beanie import init_beanie
from httpx import ASGITransport, AsyncClient
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

from charterbox.config import CharterboxConfig, SecretsConfig, Settings, reset_settings
from charterbox.database import get_document_models
from charterbox.models.yacht import YachtPackage
from charterbox.schemas.lead import LeadRecord
from charterbox.services.etl import LeadIdConflictError, ReferenceData


# MongoDB connection URL for tests (can be overridden with env var)
TEST_MONGODB_URL = os.environ.get("TEST_MONGODB_URL", "mongodb://localhost:27017")


# =============================================================================
# In-memory stores
# =============================================================================


class InMemoryBookingStore:
    """Booking store keeping LeadRecords in a dict keyed by lead id."""

    def __init__(self, leads: list[LeadRecord] | None = None):
        self.leads: dict[str, LeadRecord] = {lead.id: lead for lead in leads or []}
        self.writes = 0

    async def find_booking_by_ref(self, ref: str) -> LeadRecord | None:
        for lead in self.leads.values():
            if lead.booking_ref_no == ref:
                return lead
        return None

    async def find_booking_by_transaction_id(self, transaction_id: str) -> LeadRecord | None:
        for lead in self.leads.values():
            if lead.transaction_id == transaction_id:
                return lead
        return None

    async def upsert_booking(self, lead: LeadRecord, create: bool = False) -> None:
        if create and lead.id in self.leads:
            raise LeadIdConflictError(f"Lead id {lead.id} already exists")
        self.writes += 1
        self.leads[lead.id] = lead

    async def list_lead_ids(self, prefix: str) -> list[str]:
        return [lead_id for lead_id in self.leads if lead_id.startswith(prefix)]


class FailingBookingStore(InMemoryBookingStore):
    """Raises on writes of leads whose client name is in `fail_for`."""

    def __init__(self, fail_for: set[str], leads: list[LeadRecord] | None = None):
        super().__init__(leads)
        self.fail_for = fail_for

    async def upsert_booking(self, lead: LeadRecord, create: bool = False) -> None:
        if lead.client_name in self.fail_for:
            raise ConnectionError(f"write failed for {lead.client_name}")
        await super().upsert_booking(lead, create)


class InMemorySalesLeadStore:
    def __init__(self):
        self.sales_leads: list[dict] = []

    async def insert_sales_lead(self, data: dict) -> str:
        self.sales_leads.append(data)
        return data["sales_lead_id"]


def make_lead(lead_id: str, **fields) -> LeadRecord:
    """Build a stored lead for tests."""
    return LeadRecord(id=lead_id, **fields)


# =============================================================================
# Reference data and settings
# =============================================================================


@pytest.fixture
def reference() -> ReferenceData:
    """Agents, yachts (with price lists) and users known to the importer."""
    return ReferenceData(
        agents={"AG-RAYNA": "Rayna Tours", "DO-ONLINE": "Online Sales"},
        yachts={
            "DO-yacht-lotus": "LOTUS ROYALE",
            "DO-yacht-ocean": "OCEAN EMPRESS",
            "DO-yacht-mansour": "AL MANSOUR",
        },
        users={"U-1": "Sara Khan"},
        agent_discounts={"AG-RAYNA": 10.0},
        yacht_packages={
            "DO-yacht-lotus": [
                YachtPackage(id="lotus-adult", name="ADULT", rate=250.0),
                YachtPackage(id="lotus-child", name="CHILD", rate=150.0),
                YachtPackage(id="lotus-adult-alc", name="ADULT ALC", rate=400.0),
                YachtPackage(id="lotus-vip-adult", name="VIP ADULT", rate=600.0),
            ],
            "DO-yacht-ocean": [
                YachtPackage(id="ocean-vip-alc", name="VIP ALC", rate=900.0),
            ],
        },
    )


@pytest.fixture
def test_settings() -> Settings:
    """Settings built from defaults, without reading config files."""
    return Settings(config=CharterboxConfig(), secrets=SecretsConfig())


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Reload global settings per test from defaults and test env vars."""
    monkeypatch.delenv("WOOCOMMERCE_WEBHOOK_SECRET", raising=False)
    monkeypatch.delenv("CHARTERBOX_WOOCOMMERCE_SECRET", raising=False)
    monkeypatch.setenv("CHARTERBOX_WEBHOOKS_RATE_LIMIT", "1000/minute")
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def booking_store() -> InMemoryBookingStore:
    return InMemoryBookingStore()


@pytest.fixture
def sales_lead_store() -> InMemorySalesLeadStore:
    return InMemorySalesLeadStore()


# =============================================================================
# HTTP client
# =============================================================================


def create_test_app():
    """Create a FastAPI app configured for testing (no database lifespan)."""
    from fastapi import FastAPI
    from slowapi import _rate_limit_exceeded_handler
    from slowapi.errors import RateLimitExceeded

    from charterbox import __version__
    from charterbox.routers import import_router, webhooks

    # Empty lifespan for testing - stores are injected per test
    @asynccontextmanager
    async def test_lifespan(app: FastAPI):
        yield

    test_app = FastAPI(
        title="CharterBox Test",
        version=__version__,
        lifespan=test_lifespan,
    )
    test_app.state.limiter = webhooks.limiter
    test_app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    test_app.include_router(import_router.router, prefix="/api/import", tags=["Import"])
    test_app.include_router(webhooks.router, prefix="/api/webhooks", tags=["Webhooks"])
    return test_app


@pytest_asyncio.fixture(scope="function")
async def client(
    reference: ReferenceData,
    booking_store: InMemoryBookingStore,
    sales_lead_store: InMemorySalesLeadStore,
) -> AsyncGenerator[AsyncClient, None]:
    """Async test client whose routes use the in-memory stores."""
    from charterbox.dependencies import (
        get_booking_store,
        get_reference_data,
        get_sales_lead_store,
    )

    app = create_test_app()
    app.dependency_overrides[get_booking_store] = lambda: booking_store
    app.dependency_overrides[get_sales_lead_store] = lambda: sales_lead_store
    app.dependency_overrides[get_reference_data] = lambda: reference

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# =============================================================================
# MongoDB
# =============================================================================


@pytest.fixture(scope="session")
def event_loop_policy():
    """Use the default event loop policy."""
    return asyncio.DefaultEventLoopPolicy()


@pytest_asyncio.fixture(scope="function")
async def mongo_client():
    """Create a MongoDB client for testing, skipping when none is reachable."""
    client = AsyncIOMotorClient(
        TEST_MONGODB_URL,
        maxPoolSize=10,
        minPoolSize=1,
        serverSelectionTimeoutMS=2000,
    )
    try:
        await client.admin.command("ping")
    except PyMongoError:
        client.close()
        pytest.skip(f"MongoDB not available at {TEST_MONGODB_URL}")
    yield client
    client.close()


@pytest_asyncio.fixture(scope="function")
async def init_test_db(mongo_client):
    """Initialize Beanie with a unique test database and drop it afterwards."""
    db_name = f"test_charterbox_{uuid.uuid4().hex[:8]}"
    db = mongo_client[db_name]

    await init_beanie(
        database=db,
        document_models=get_document_models(),
    )
    yield db

    await mongo_client.drop_database(db_name)
