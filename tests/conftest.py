# tests/conftest.py
import os

# settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DEVICE_STORE_URL"] = "memory://"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "1"
os.environ["ADMIN_TOKEN"] = "test-admin-token"
os.environ["MERGE_GUEST_ON_SIGN_IN"] = "0"

import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import storefront.data.models  # noqa: F401
from storefront.api import create_app
from storefront.api.deps import get_device_store, get_payment_gateway
from storefront.data.database import Base, get_db
from storefront.repos.device_store import MemoryDeviceStore
from storefront.services.payment_client import SimulatedPaymentGateway

ADMIN_HEADERS = {"X-Admin-Token": "test-admin-token"}


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def device_store():
    return MemoryDeviceStore()


@pytest.fixture
def gateway():
    return SimulatedPaymentGateway(success_rate=1.0)


@pytest.fixture
def client(session_factory, device_store, gateway):
    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_device_store] = lambda: device_store
    app.dependency_overrides[get_payment_gateway] = lambda: gateway

    with TestClient(app) as c:
        yield c


@pytest.fixture
def user_headers():
    return {
        "X-User-Id": str(uuid.uuid4()),
        "X-User-Email": "ann@example.com",
        "X-Device-Id": "device-1",
    }


@pytest.fixture
def guest_headers():
    return {"X-Device-Id": "device-1"}


def _product(pid="A", price=1000, name=None, **extra):
    return {
        "product_id": pid,
        "product_name": name or f"Product {pid}",
        "product_price": price,
        "product_image": f"https://img.example.com/{pid}.jpg",
        **extra,
    }


@pytest.fixture
def make_product():
    return _product
