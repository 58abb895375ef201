"""Shared test fixtures - in-memory database, salon/admin sessions, seed data.

Invariants:
    - Every test gets a fresh in-memory SQLite database (StaticPool, one connection)
    - get_db is overridden to hand out the same session the fixtures write through
    - Rate limit windows are cleared between tests
    - Redis is never contacted; the in-memory limiter is used
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.pop("REDIS_URL", None)
os.environ.pop("REDIS_HOST", None)

from datetime import datetime, timedelta  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from salonx import rate_limiter  # noqa: E402
from salonx.auth import ADMIN_SALON_ID  # noqa: E402
from salonx.config import SESSION_COOKIE_NAME  # noqa: E402
from salonx.database import Base, get_db  # noqa: E402
from salonx.main import app  # noqa: E402
from salonx.models import ActivationKey, Customer, Salon, Service, Staff  # noqa: E402
from salonx.models_inventory import Inventory, Product, Supplier  # noqa: E402
from salonx.security_utils import create_session_token, hash_activation_key  # noqa: E402

ADMIN_EMAIL = "admin@salonx.in"
TEST_ACTIVATION_KEY = "SALONX-ABCD-EFGH-JKLM"


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
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture(autouse=True)
def reset_rate_limits():
    rate_limiter.memory_cache.clear()
    yield
    rate_limiter.memory_cache.clear()


@pytest.fixture
def client(db):
    """Anonymous client with get_db overridden"""

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_salon(db, email="owner@glamour.in", name="Glamour Studio", status="active") -> Salon:
    salon = Salon(name=name, owner_email=email, phone="9876543210", city="Pune", status=status)
    db.add(salon)
    db.commit()
    db.refresh(salon)
    return salon


@pytest.fixture
def salon(db):
    return make_salon(db)


@pytest.fixture
def other_salon(db):
    return make_salon(db, email="owner@shine.in", name="Shine Salon")


@pytest.fixture
def activation_key(db, salon):
    """Active key for `salon`; the plain text is TEST_ACTIVATION_KEY"""
    key = ActivationKey(
        salon_id=salon.id,
        key_hash=hash_activation_key(TEST_ACTIVATION_KEY),
        status="active",
        expires_at=datetime.utcnow() + timedelta(days=30),
    )
    db.add(key)
    db.commit()
    return key


def session_cookie_for(salon_id: str, email: str, is_admin: bool = False) -> dict:
    return {SESSION_COOKIE_NAME: create_session_token(salon_id, email, is_admin=is_admin)}


@pytest.fixture
def salon_client(client, salon):
    """Client logged in as `salon`"""
    client.cookies.update(session_cookie_for(salon.id, salon.owner_email))
    return client


@pytest.fixture
def admin_client(client):
    """Client logged in as a platform admin"""
    client.cookies.update(session_cookie_for(ADMIN_SALON_ID, ADMIN_EMAIL, is_admin=True))
    return client


@pytest.fixture
def staff(db, salon):
    member = Staff(salon_id=salon.id, name="Priya", role="Stylist", phone="9000000001", is_active=True)
    db.add(member)
    db.commit()
    db.refresh(member)
    return member


@pytest.fixture
def cashier(db, salon):
    member = Staff(salon_id=salon.id, name="Ravi", role="Receptionist", is_active=True, is_cashier=True)
    db.add(member)
    db.commit()
    db.refresh(member)
    return member


@pytest.fixture
def haircut(db, salon):
    service = Service(salon_id=salon.id, name="Haircut", category="Hair", duration_minutes=45, price=500)
    db.add(service)
    db.commit()
    db.refresh(service)
    return service


@pytest.fixture
def customer(db, salon):
    person = Customer(salon_id=salon.id, name="Anita", phone="9123456780", tags=[])
    db.add(person)
    db.commit()
    db.refresh(person)
    return person


@pytest.fixture
def supplier(db, salon):
    vendor = Supplier(salon_id=salon.id, name="Beauty Wholesale", contact_person="Mohan", phone="9111111111")
    db.add(vendor)
    db.commit()
    db.refresh(vendor)
    return vendor


@pytest.fixture
def shampoo(db, salon):
    """Retail product with 20 units on hand, reorder level 5"""
    product = Product(
        salon_id=salon.id,
        name="Keratin Shampoo",
        category="Hair Care",
        type="both",
        unit="pcs",
        cost_price=200,
        selling_price=350,
    )
    db.add(product)
    db.flush()
    db.add(Inventory(salon_id=salon.id, product_id=product.id, quantity=20, reorder_level=5))
    db.commit()
    db.refresh(product)
    return product
