"""
Shared fixtures.

Environment is set before any storefront module is imported, because the
settings object is built at import time and refuses to start without a
signing key.
"""
import os

TEST_SECRET = "test-signing-key-0123456789-abcdefghijklmnop"

os.environ["JWT_SECRET"] = TEST_SECRET
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["PASSWORD_HASH_ROUNDS"] = "1"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session

from storefront.core.security import TokenConfig, TokenService
from storefront.db.session import build_engine, create_db_and_tables, get_session
from storefront.main import create_app
from storefront.models.product import Product


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def token_service():
    return TokenService(TokenConfig(secret=TEST_SECRET))


@pytest.fixture
def app(engine, token_service):
    app = create_app(token_service)

    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    return app


@pytest.fixture
def test_client(app):
    return TestClient(app)


@pytest.fixture
def add_product(engine):
    """Insert a catalog product in its own short-lived session and return its id."""
    def _add(name="Widget", unit_price="10.00", product_id=None, category_id=None):
        with Session(engine) as session:
            product = Product(
                id=product_id,
                name=name,
                unit_price=Decimal(unit_price),
                category_id=category_id,
            )
            session.add(product)
            session.commit()
            return product.id
    return _add


@pytest.fixture
def register_and_login(test_client):
    """Register a user through the API, log in, and return the login body."""
    def _register_and_login(username="alice", email="a@x.com", password="pw123456"):
        response = test_client.post("/api/auth/register", json={
            "username": username,
            "email": email,
            "password": password,
        })
        assert response.status_code == 200, response.text
        response = test_client.post("/api/auth/login", json={
            "username": username,
            "password": password,
        })
        assert response.status_code == 200, response.text
        return response.json()
    return _register_and_login


@pytest.fixture
def auth_headers(register_and_login):
    token = register_and_login()["token"]
    return {"Authorization": f"Bearer {token}"}
