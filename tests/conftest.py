"""Shared test fixtures."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./petzify-test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENV", "test")
os.environ.setdefault("SMTP_HOST", "")

from datetime import date, datetime  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

import app.models  # noqa: E402,F401 - register tables
from app.models.appointment import Appointment, AppointmentStatus  # noqa: E402
from app.models.provider import CurrentProvider, Provider  # noqa: E402
from app.models.slot import Slot  # noqa: E402

# Fixed "now" used across tests: Wednesday 2026-03-11 10:15 UTC.
NOW = datetime(2026, 3, 11, 10, 15)
TODAY = NOW.date()


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def provider(session) -> CurrentProvider:
    row = Provider(username="drmeera", name="Meera Rao", hashed_password="not-a-real-hash")
    session.add(row)
    await session.commit()
    await session.refresh(row)
    return CurrentProvider(id=row.id, username=row.username, name=row.name)


@pytest.fixture
async def other_provider(session) -> CurrentProvider:
    row = Provider(username="drkabir", name="Kabir Shah", hashed_password="not-a-real-hash")
    session.add(row)
    await session.commit()
    await session.refresh(row)
    return CurrentProvider(id=row.id, username=row.username, name=row.name)


@pytest.fixture
def add_slot(session):
    """Insert a slot row directly, bypassing validation."""

    async def _add(provider: CurrentProvider, day: date, start: str, end: str, reserved: bool = False) -> Slot:
        slot = Slot(
            provider_id=provider.id,
            provider_name=provider.name,
            date=datetime.combine(day, datetime.min.time()),
            start_time=start,
            end_time=end,
            is_reserved=reserved,
        )
        session.add(slot)
        await session.commit()
        await session.refresh(slot)
        return slot

    return _add


@pytest.fixture
def add_appointment(session):
    """Insert an appointment row directly."""

    async def _add(
        provider: CurrentProvider,
        when: datetime,
        start: str,
        status: AppointmentStatus = AppointmentStatus.PENDING,
        client_name: str = "Asha",
        client_email: str | None = None,
    ) -> Appointment:
        appointment = Appointment(
            provider_id=provider.id,
            provider_name=provider.name,
            appointment_date=when,
            start_time=start,
            end_time=start[:3] + "30",
            client_name=client_name,
            client_email=client_email,
            pet_name="Bruno",
            status=status.value,
        )
        session.add(appointment)
        await session.commit()
        await session.refresh(appointment)
        return appointment

    return _add
