"""Shared test fixtures for async database, sessions, job store and employee records."""

from collections.abc import AsyncGenerator
from datetime import date
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from employee_api.core.config import Settings
from employee_api.models.base import Base
from employee_api.models.employee import Employee
from employee_api.services.export_job_store import ExportJobStore


@pytest.fixture
def settings() -> Settings:
    """Test application settings."""
    return Settings(database_url="sqlite+aiosqlite:///:memory:")


@pytest.fixture
async def async_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine]:
    """Create a file-backed async SQLite engine so concurrent sessions share data."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(async_engine, expire_on_commit=False)


@pytest.fixture
async def async_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession]:
    """Create a per-test async session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def job_store(session_factory: async_sessionmaker[AsyncSession]) -> ExportJobStore:
    return ExportJobStore(session_factory)


EMPLOYEE_ROWS = [
    {
        "id": 1,
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@example.com",
        "phone_number": "555-0101",
        "date_of_birth": date(1985, 12, 10),
        "hire_date": date(2020, 1, 15),
        "salary": 95000.0,
        "position": "Engineer",
        "department": "Engineering",
    },
    {
        "id": 2,
        "first_name": "Grace",
        "last_name": "Hopper",
        "email": "grace@example.com",
        "phone_number": None,
        "date_of_birth": date(1980, 12, 9),
        "hire_date": date(2018, 6, 1),
        "salary": 120000.0,
        "position": "Manager",
        "department": "Engineering",
    },
    {
        "id": 3,
        "first_name": "alan",
        "last_name": "Turing",
        "email": "alan@example.com",
        "phone_number": "555-0103",
        "date_of_birth": date(1990, 6, 23),
        "hire_date": date(2021, 3, 1),
        "salary": 70000.0,
        "position": "Engineer",
        "department": "Research",
    },
    {
        "id": 4,
        "first_name": "Katherine",
        "last_name": "Johnson",
        "email": "katherine@example.com",
        "phone_number": "555-0104",
        "date_of_birth": None,
        "hire_date": None,
        "salary": None,
        "position": "Analyst",
        "department": "Research",
    },
    {
        "id": 5,
        "first_name": "Bob",
        "last_name": "O'Neil, Jr.",
        "email": "bob@example.com",
        "phone_number": None,
        "date_of_birth": date(1975, 1, 2),
        "hire_date": date(2015, 9, 30),
        "salary": 50000.5,
        "position": "Clerk",
        "department": "Sales",
    },
]


@pytest.fixture
async def employees(async_session: AsyncSession) -> list[Employee]:
    """Insert a small, varied set of employees."""
    rows = [Employee(**row) for row in EMPLOYEE_ROWS]
    async_session.add_all(rows)
    await async_session.commit()
    return rows
