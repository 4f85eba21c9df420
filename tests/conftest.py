import os
from datetime import datetime
from typing import Generator

# Settings are read at import time
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.pop("REDIS_URL", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from berryevents.database import Base, get_db
from berryevents.main import app as fastapi_app
from berryevents.models import ServiceProvider, User
from berryevents.security_utils import hash_password

from .helpers import PASSWORD, bearer


def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "/tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "/tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)


@pytest.fixture()
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


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    """Session for arranging data and asserting on what the API wrote"""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def app(session_factory):
    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    fastapi_app.dependency_overrides[get_db] = _override_get_db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def make_user(db):
    counter = {"n": 0}

    def _make_user(email=None, username=None, password=PASSWORD) -> User:
        counter["n"] += 1
        n = counter["n"]
        user = User(
            email=email or f"customer{n}@example.com",
            username=username or f"customer{n}",
            hashed_password=hash_password(password),
            first_name="Test",
            last_name=f"Customer{n}",
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def user(make_user) -> User:
    return make_user()


@pytest.fixture()
def auth_headers(user) -> dict:
    return bearer(user.id)


@pytest.fixture()
def provider(make_user, db) -> ServiceProvider:
    owner = make_user()
    provider = ServiceProvider(
        user_id=owner.id,
        business_name="Sparkle Cleaning",
        hourly_rate=45,
        services_offered=["house-cleaning"],
        is_verified=True,
    )
    db.add(provider)
    db.commit()
    db.refresh(provider)
    return provider


@pytest.fixture()
def item_payload():
    """Builds a POST /api/cart/items body"""

    def _item_payload(**overrides) -> dict:
        payload = {
            "serviceId": "house-cleaning",
            "serviceType": "house-cleaning",
            "serviceName": "House Cleaning",
            "scheduledDate": (datetime(2030, 5, 17, 9, 0)).isoformat(),
            "scheduledTime": "09:00",
            "duration": 3,
            "basePrice": "180.00",
            "addOnsPrice": "20.00",
            "subtotal": "200.00",
            "comments": "Ring the bell twice",
        }
        payload.update(overrides)
        return payload

    return _item_payload
