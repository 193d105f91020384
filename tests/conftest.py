"""Pytest fixtures: a throwaway SQLite database per test, services and HTTP client on top."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("ADMIN_EMAIL", "admin@eshop.com")
os.environ.setdefault("ADMIN_PASSWORD", "admin123")

import httpx
import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from main import app
from shared.config.database import Base, get_db
from services.auth_service.service import AuthService
from services.product_service.schemas import ProductCreate
from services.product_service.service import ProductService
from services.product_service.repository import ProductRepository
from services.wallet_service.service import WalletService

ADMIN_EMAIL = os.environ["ADMIN_EMAIL"]
ADMIN_PASSWORD = os.environ["ADMIN_PASSWORD"]


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'eshop.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    async with session_factory() as session:
        await AuthService.seed_admin(session)

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def auth_headers(client):
    resp = await client.post("/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
def make_product(db):
    async def _make(sku: str, quantity: int, price: float = 100.0, name: str | None = None):
        return await ProductService.create_product(
            db,
            ProductCreate(
                sku=sku,
                name=name or sku,
                price=price,
                quantity=quantity,
                category="Electronics",
            ),
        )
    return _make


@pytest.fixture
def make_wallet(db):
    async def _make(owner_email: str = "owner@eshop.com"):
        return await WalletService.create_wallet(db, owner_email)
    return _make


@pytest.fixture
def stock_of(db):
    """Fresh read of a product's quantity."""
    async def _stock(product_id: int) -> int:
        product = await ProductRepository.get_for_update(db, product_id)
        return product.quantity
    return _stock
