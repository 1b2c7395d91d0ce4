import os
import tempfile

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "store-admin-test-logs"))

import pytest
from typing import AsyncGenerator, Callable
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from main import app
from app.core.database import get_async_session
from app.core.security import create_access_token
from app.models.base import Base
from app.models.auth.employee import Employee
from app.models import AuditLog, Brand, Category  # noqa: F401  registers every table on Base.metadata


@pytest.fixture
async def test_engine(tmp_path):
    """File-backed SQLite so separate sessions get separate connections"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(test_engine) -> async_sessionmaker:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


async def _create_employee(session_maker, email: str, permissions) -> Employee:
    async with session_maker() as session:
        employee = Employee(
            name=email.split("@")[0].title(),
            email=email,
            job_title="Staff",
            permissions=list(permissions),
            is_active=True,
        )
        session.add(employee)
        await session.commit()
        await session.refresh(employee)
        return employee


@pytest.fixture
async def admin(session_maker) -> Employee:
    return await _create_employee(session_maker, "admin@store.test", ["ALL"])


@pytest.fixture
async def viewer(session_maker) -> Employee:
    return await _create_employee(session_maker, "viewer@store.test", ["categories.view", "brands.view"])


@pytest.fixture
def make_headers() -> Callable[[Employee], dict]:
    def _headers(employee: Employee) -> dict:
        return {"Authorization": f"Bearer {create_access_token(employee.id)}"}
    return _headers


@pytest.fixture
def admin_headers(admin, make_headers) -> dict:
    return make_headers(admin)


@pytest.fixture
async def client(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """Create test client bound to the per-test database"""
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
