"""Shared fixtures: throwaway SQLite database, seeded users, products and carts."""

import asyncio
import os
import tempfile
import uuid
from decimal import Decimal

import pytest

_DB_DIR = tempfile.mkdtemp(prefix="storefront-tests-")

os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'storefront.db')}"
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import select  # noqa: E402

from storefront.core.database import engine, AsyncSessionLocal  # noqa: E402
from storefront.core.security import SecurityUtils  # noqa: E402
from storefront.main import app  # noqa: E402
from storefront.models import Base, Cart, Product, User, UserRole  # noqa: E402


def run(coro):
    return asyncio.run(coro)


async def _save(*objs):
    async with AsyncSessionLocal() as session:
        session.add_all(objs)
        await session.commit()
        for obj in objs:
            await session.refresh(obj)
    return objs


@pytest.fixture(autouse=True)
def database():
    async def reset():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)

    run(reset())
    yield


@pytest.fixture()
def client():
    return TestClient(app)


@pytest.fixture()
def make_user():
    def _make(role=UserRole.CUSTOMER, name="Test User"):
        user = User(
            id=uuid.uuid4(),
            name=name,
            email=f"{uuid.uuid4().hex[:10]}@example.com",
            role=role,
            is_active=True,
        )
        run(_save(user))
        return user

    return _make


@pytest.fixture()
def customer(make_user):
    return make_user()


@pytest.fixture()
def admin(make_user):
    return make_user(role=UserRole.ADMIN, name="Admin")


@pytest.fixture()
def auth_headers():
    def _headers(user):
        token = SecurityUtils.create_access_token({"sub": str(user.id)})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture()
def make_product():
    def _make(name="Widget", price="20.00", stock=10, is_active=True):
        product = Product(
            id=uuid.uuid4(),
            name=name,
            description=f"{name} description",
            price=Decimal(price),
            stock=stock,
            images=[{"url": f"https://img.example.com/{name.lower()}.jpg", "alt": name}],
            is_active=is_active,
        )
        run(_save(product))
        return product

    return _make


@pytest.fixture()
def fill_cart():
    """Put lines straight into the user's cart, bypassing the stock check"""

    async def fill(user, lines):
        async with AsyncSessionLocal() as session:
            result = await session.execute(select(Cart).where(Cart.user_id == user.id))
            cart = result.scalar_one_or_none()
            if cart is None:
                cart = Cart(user_id=user.id, items=[], total_items=0, total_price=Decimal("0"))
                session.add(cart)
            for product, quantity in lines:
                cart.add_item(product.id, quantity, product.price)
            await session.commit()
            await session.refresh(cart)
            return cart

    def _fill(user, lines):
        return run(fill(user, lines))

    return _fill


@pytest.fixture()
def fetch():
    """Load rows in a fresh session: fetch(Model, **filters) -> list"""

    def _fetch(model, **filters):
        async def load():
            async with AsyncSessionLocal() as session:
                result = await session.execute(select(model).filter_by(**filters))
                return result.scalars().all()

        return run(load())

    return _fetch


@pytest.fixture()
def stock_of(fetch):
    def _stock(product):
        return fetch(Product, id=product.id)[0].stock

    return _stock


ADDRESS = {
    "name": "Ada Lovelace",
    "street": "12 Analytical Way",
    "city": "London",
    "state": "LDN",
    "zipCode": "N1 9GU",
    "country": "GB",
}


@pytest.fixture()
def checkout_payload():
    return {
        "shippingAddress": dict(ADDRESS),
        "paymentMethod": {"type": "card", "last4": "4242"},
        "notes": "Leave at the door",
    }


@pytest.fixture()
def place_order(client, auth_headers, fill_cart, checkout_payload):
    """Fill the cart and check out; returns the created order JSON"""

    def _place(user, lines):
        fill_cart(user, lines)
        response = client.post("/api/orders", json=checkout_payload, headers=auth_headers(user))
        assert response.status_code == 201, response.text
        return response.json()["order"]

    return _place


@pytest.fixture()
def admin_update(client, auth_headers, admin):
    def _update(order_id, **body):
        return client.put(
            f"/api/orders/{order_id}/status",
            json=body,
            headers=auth_headers(admin),
        )

    return _update
