import json

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tempest.core.db import get_db
from tempest.models import Base
from tempest.main import app

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

# Reference observation report from the station documentation.
OBSERVATION_REPORT = [
    1_588_186_800, 0.0, 2.6, 4.6, 187, 3, 1017.57, 22.37, 50.26,
    328, 0.03, 3, 0.0, 0, 0, 0, 2.410, 1,
]


def observation_message(report=None, **overrides) -> dict:
    message = {
        "serial_number": "ST-00000512",
        "type": "obs_st",
        "hub_sn": "HB-00013030",
        "obs": [list(OBSERVATION_REPORT if report is None else report)],
        "firmware_revision": 129,
    }
    message.update(overrides)
    return message


def encode(message: dict) -> bytes:
    return json.dumps(message).encode("utf-8")


@pytest.fixture
def observation_datagram() -> bytes:
    return encode(observation_message())


@pytest.fixture
def rapid_wind_datagram() -> bytes:
    return encode(
        {
            "serial_number": "SK-00008453",
            "type": "rapid_wind",
            "hub_sn": "HB-00000001",
            "ob": [1493322445, 2.3, 128],
        }
    )


@pytest_asyncio.fixture
async def test_engine():
    """
    Create an in-memory SQLite async engine with all tables created.

    `StaticPool` keeps the single in-memory database alive across sessions.
    """
    engine = create_async_engine(TEST_DB_URL, poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine):
    """
    Provide a fresh AsyncSession for each test.
    """
    TestingSessionLocal = sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
def test_app(db_session):
    """
    Return a FastAPI app instance with get_db overridden to use the test session.
    Note: this fixture is sync, but it *overrides* an async dependency.
    """
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()
