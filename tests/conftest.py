import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from jose import jwt  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

from storefront.core.config import settings  # noqa: E402
from storefront.core.database import get_async_session  # noqa: E402
from storefront.main import app  # noqa: E402
from storefront.models import Category, Product, User  # noqa: E402
from storefront.services.image_store import ImageStore, get_image_store  # noqa: E402

API = f"{settings.api_prefix}/products"

# Smallest valid PNG header, enough for an upload
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def make_token(user_id, role="USER") -> str:
    return jwt.encode({"userId": user_id, "role": role}, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def image_store(tmp_path):
    return ImageStore(str(tmp_path / "public"), "myImage", 1_000_000)


@pytest_asyncio.fixture
async def seeded(db_session):
    """Two categories, two users and three products."""
    db_session.add_all([
        Category(id=1, name="Phones"),
        Category(id=2, name="Laptops"),
        User(id=1, username="alice", role="USER"),
        User(id=2, username="root", role="ADMIN"),
    ])
    await db_session.commit()
    db_session.add_all([
        Product(id=1, name="Galaxy S20", description="Android phone", categoryid=1,
                brand="Samsung", price=Decimal("799.00"), img_src="https://img.example/s20.png"),
        Product(id=2, name="iPhone 12", description="iOS phone", categoryid=1,
                brand="Apple", price=Decimal("999.00")),
        Product(id=3, name="Mac Book Air", description="Light laptop", categoryid=2,
                brand="Apple", price=Decimal("1299.00")),
    ])
    await db_session.commit()
    return db_session


@pytest_asyncio.fixture
async def client(session_maker, image_store):
    async def override_session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_session
    app.dependency_overrides[get_image_store] = lambda: image_store
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {make_token(2, role='ADMIN')}"}


@pytest.fixture
def user_headers():
    return {"Authorization": f"Bearer {make_token(1)}"}
