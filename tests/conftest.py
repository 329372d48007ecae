"""
Pytest configuration and fixtures

Every API test gets its own SQLite database file, so nothing leaks between
tests. The app's get_db dependency is overridden to hand out sessions bound
to that database.
"""
import asyncio
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["AI_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from mindfit.main import app
from mindfit.database import Base, get_db
from mindfit.core.security import create_access_token
from mindfit.models.user import User
from mindfit.utils.password import hash_password

LOSS_GOAL = {
    "goal_type": "weight_loss",
    "goal_subtype": "standard",
    "initial_weight": 100.0,
    "target_weight": 80.0,
}


@pytest.fixture
def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)

    async def _create_tables():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(_create_tables())
    yield async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)
    asyncio.run(engine.dispose())


@pytest.fixture
def client(session_factory):
    async def _get_test_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_test_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session_factory):
    """Insert a user straight into the database and return its id"""
    def _make_user(email, role="mentee", password="password123", **fields):
        async def _insert():
            async with session_factory() as db:
                user = User(
                    email=email,
                    name=fields.pop("name", email.split("@")[0]),
                    hashed_password=hash_password(password),
                    role=role,
                    is_active=True,
                    **fields
                )
                db.add(user)
                await db.commit()
                return user.id
        return asyncio.run(_insert())
    return _make_user


def auth_headers(user_id):
    token = create_access_token({"sub": str(user_id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(make_user):
    return auth_headers(make_user("coach@example.com", role="admin", name="Coach"))


@pytest.fixture
def mentee_id(make_user):
    return make_user("ana@example.com", name="Ana", **LOSS_GOAL)


@pytest.fixture
def mentee_headers(mentee_id):
    return auth_headers(mentee_id)


@pytest.fixture
def headers_for():
    return auth_headers
