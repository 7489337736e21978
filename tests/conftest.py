"""Shared fixtures: a throwaway SQLite database wired into the FastAPI app."""

from __future__ import annotations

import asyncio
import os
import sys
import tempfile
from datetime import datetime, timedelta
from decimal import Decimal
from pathlib import Path
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))
os.environ.setdefault(
    "LOG_FILE", str(Path(tempfile.gettempdir()) / "airport-ops-tests" / "app.log")
)

from app.controllers.dependencies import get_clock  # noqa: E402
from app.database import get_session, seed_reference_roles  # noqa: E402
from app.main import app  # noqa: E402
from app.models import (  # noqa: E402
    Airport,
    Base,
    City,
    CrewPosition,
    Flight,
    FlightCrew,
    FlightStatus,
    Route,
    User,
)
from app.utils import hash_password  # noqa: E402

NOW = datetime(2025, 6, 15, 12, 0)


@pytest.fixture
def session_factory(tmp_path: Path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'airport.db'}",
        poolclass=NullPool,
    )
    factory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

    async def _prepare() -> None:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        async with factory() as session:
            await seed_reference_roles(session)

    asyncio.run(_prepare())
    yield factory
    asyncio.run(engine.dispose())


@pytest.fixture
def run_db(session_factory):
    """Run ``work(session)`` to completion against the test database."""

    def _run(work):
        async def _inner():
            async with session_factory() as session:
                return await work(session)

        return asyncio.run(_inner())

    return _run


@pytest.fixture
def client(session_factory):
    async def override_get_session():
        async with session_factory() as session:
            yield session

    def override_get_clock():
        return lambda: NOW

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_clock] = override_get_clock

    yield TestClient(app)

    app.dependency_overrides.clear()


async def _build_world(session: AsyncSession) -> SimpleNamespace:
    oslo = City(name="Oslo", country="Norway")
    bergen = City(name="Bergen", country="Norway")
    stockholm = City(name="Stockholm", country="Sweden")
    session.add_all([oslo, bergen, stockholm])
    await session.flush()

    osl = Airport(iata_code="OSL", icao_code="ENGM", name="Oslo Gardermoen", city_id=oslo.id)
    bgo = Airport(iata_code="BGO", icao_code="ENBR", name="Bergen Flesland", city_id=bergen.id)
    arn = Airport(iata_code="ARN", icao_code="ESSA", name="Stockholm Arlanda", city_id=stockholm.id)
    session.add_all([osl, bgo, arn])
    await session.flush()

    ada = User(
        username="ada",
        email="ada@airops.io",
        password_hash=hash_password("secret1"),
        first_name="Ada",
        last_name="Lovelace",
    )
    grace = User(
        username="grace",
        email="grace@airops.io",
        password_hash=hash_password("secret1"),
        first_name="Grace",
        last_name="Hopper",
    )
    alan = User(
        username="alan",
        email="alan@airops.io",
        password_hash=hash_password("secret1"),
        first_name="Alan",
        last_name="Turing",
    )
    session.add_all([ada, grace, alan])
    await session.flush()

    osl_bgo = Route(
        name="Oslo - Bergen",
        departure_airport_id=osl.id,
        arrival_airport_id=bgo.id,
        distance=305,
        duration="55m",
        base_price=Decimal("120.00"),
    )
    bgo_osl = Route(
        name="Bergen - Oslo",
        departure_airport_id=bgo.id,
        arrival_airport_id=osl.id,
        distance=305,
        duration="55m",
        base_price=Decimal("120.00"),
    )
    session.add_all([osl_bgo, bgo_osl])
    await session.flush()

    upcoming = Flight(
        route_id=osl_bgo.id,
        flight_number="AO100",
        scheduled_departure=NOW + timedelta(hours=6),
        scheduled_arrival=NOW + timedelta(hours=7),
        status=FlightStatus.SCHEDULED,
    )
    later = Flight(
        route_id=osl_bgo.id,
        flight_number="AO102",
        scheduled_departure=NOW + timedelta(hours=30),
        scheduled_arrival=NOW + timedelta(hours=31),
        status=FlightStatus.SCHEDULED,
    )
    departed = Flight(
        route_id=bgo_osl.id,
        flight_number="AO201",
        scheduled_departure=NOW - timedelta(hours=1),
        scheduled_arrival=NOW,
        actual_departure=NOW - timedelta(hours=1),
        status=FlightStatus.DEPARTED,
    )
    session.add_all([upcoming, later, departed])
    await session.flush()

    alan_on_departed = FlightCrew(
        flight_id=departed.id,
        user_id=alan.id,
        position=CrewPosition.FLIGHT_ATTENDANT,
    )
    session.add(alan_on_departed)
    await session.commit()

    return SimpleNamespace(
        osl=osl.id,
        bgo=bgo.id,
        arn=arn.id,
        ada=ada.id,
        grace=grace.id,
        alan=alan.id,
        osl_bgo=osl_bgo.id,
        bgo_osl=bgo_osl.id,
        upcoming=upcoming.id,
        later=later.id,
        departed=departed.id,
        alan_on_departed=alan_on_departed.id,
    )


@pytest.fixture
def world(run_db) -> SimpleNamespace:
    """Three airports, three crew members, two routes and three flights."""

    return run_db(_build_world)
