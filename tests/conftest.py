import os
import tempfile
from datetime import datetime

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ["MEDIA_ROOT"] = tempfile.mkdtemp(prefix="geprek-media-")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from models import MenuItem, MenuCategory, Order, OrderStatus, OrderType
from services.cart import CartStore
from utils.database import Base, get_db
from utils.timeutils import get_now

NOW = datetime(2026, 10, 19, 12, 0, 0)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_now] = lambda: NOW
    app.state.cart_store = CartStore()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def auth_headers(client, email, role, password="rahasia123"):
    response = client.post("/api/v1/users/signup", json={
        "email": email,
        "password": password,
        "full_name": email.split("@")[0].title(),
        "role": role,
    })
    assert response.status_code == 201, response.text
    response = client.post("/api/v1/users/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def admin_headers(client):
    return auth_headers(client, "admin@geprek.id", "admin")


@pytest.fixture
def manager_headers(client):
    return auth_headers(client, "manager@geprek.id", "manager")


@pytest.fixture
def make_menu_item(db):
    def _make(name="Ayam Geprek Original", price=15000, category=MenuCategory.MAIN, spicy_level=0, is_available=True):
        item = MenuItem(
            name=name,
            description="",
            price=price,
            category=category,
            spicy_level=spicy_level,
            is_available=is_available,
        )
        db.add(item)
        db.commit()
        db.refresh(item)
        return item
    return _make


@pytest.fixture
def make_order(db):
    def _make(total_amount, created_at=NOW, status=OrderStatus.COMPLETED, order_type=OrderType.OFFLINE,
              customer_name="Siti", customer_phone="081200000000", notes=None):
        order = Order(
            customer_name=customer_name,
            customer_phone=customer_phone,
            order_type=order_type,
            total_amount=total_amount,
            status=status,
            notes=notes,
            created_at=created_at,
        )
        db.add(order)
        db.commit()
        db.refresh(order)
        return order
    return _make
