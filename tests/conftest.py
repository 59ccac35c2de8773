import asyncio
import os
from uuid import UUID

import pytest
from jose import jwt
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DB_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-secret")

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

async_engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
AsyncSessionLocal = sessionmaker(
    async_engine, class_=AsyncSession, expire_on_commit=False
)


async def override_get_session():
    async with AsyncSessionLocal() as session:
        yield session


async def _create_tables():
    import weddingsite.models  # noqa: F401 - registers the tables on SQLModel.metadata

    async with async_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def _drop_tables():
    async with async_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)


async def _add_all(*records):
    async with AsyncSessionLocal() as session:
        session.add_all(records)
        await session.commit()


def seed(*records):
    """Persist records in the test database."""
    asyncio.run(_add_all(*records))


def auth_header(user_id: UUID) -> dict:
    from weddingsite.auth.dependencies import SUPABASE_JWT_SECRET

    token = jwt.encode(
        {"sub": str(user_id), "email": f"{user_id}@example.com"},
        SUPABASE_JWT_SECRET,
        algorithm="HS256",
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="module", autouse=True)
def setup_database():
    from weddingsite.main import app
    from weddingsite.db.database import get_session

    app.dependency_overrides[get_session] = override_get_session
    asyncio.run(_create_tables())
    yield
    asyncio.run(_drop_tables())
    app.dependency_overrides.pop(get_session, None)
