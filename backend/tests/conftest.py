"""
Pytest fixtures for StoreLedger backend tests.

Provides test database setup, two independent stores (tenants), and a test client.
"""

from datetime import datetime

import pytest
from storeledger import create_app
from storeledger.config import TestConfig
from storeledger.extensions import db
from storeledger.services import auth_service, customer_service, session_service, supplier_service


# Fixed reference instant for window/metrics tests (a Wednesday)
NOW = datetime(2026, 3, 18, 15, 30, 0)

CEMENT = {"name": "Cement", "price": 300, "quantity": 2, "unit": "bag"}
SAND = {"name": "Sand", "price": 150, "quantity": 4, "unit": "ton"}


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app(TestConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


def registration_payload(email: str, store_name: str, store_phone: str, **overrides) -> dict:
    payload = {
        "email": email,
        "password": "secret123",
        "confirmPassword": "secret123",
        "firstName": "Ravi",
        "lastName": "Kumar",
        "storeName": store_name,
        "storePhone": store_phone,
        "countryCode": "+91",
        "gstNumber": "",
        "village": "Rampur",
        "postOffice": "Rampur PO",
        "policeStation": "Rampur PS",
        "district": "Nadia",
        "state": "West Bengal",
        "postalPin": "741101",
    }
    payload.update(overrides)
    return payload


@pytest.fixture(scope='function')
def store_a(db_session):
    """Store A with its owner (first tenant)."""
    _, store = auth_service.register_owner(
        registration_payload("owner_a@example.com", "Store A", "9000000001")
    )
    return store


@pytest.fixture(scope='function')
def store_b(db_session):
    """Store B with its owner (second tenant)."""
    _, store = auth_service.register_owner(
        registration_payload("owner_b@example.com", "Store B", "9000000002")
    )
    return store


@pytest.fixture(scope='function')
def token_a(store_a):
    _, token = session_service.create_session(store_a.user_id)
    return token


@pytest.fixture(scope='function')
def token_b(store_b):
    _, token = session_service.create_session(store_b.user_id)
    return token


@pytest.fixture(scope='function')
def customer_a(store_a):
    return customer_service.create_customer(
        store_a.id, {"name": "Anil", "phone": "8000000001", "address": "Main Road"}
    )


@pytest.fixture(scope='function')
def customer_b(store_b):
    return customer_service.create_customer(
        store_b.id, {"name": "Bimal", "phone": "8000000002", "address": "Station Road"}
    )


@pytest.fixture(scope='function')
def supplier_a(store_a):
    return supplier_service.create_supplier(
        store_a.id, {"name": "Dalmia Depot", "phone": "7000000001", "address": "Highway 12"}
    )


@pytest.fixture(scope='function')
def supplier_b(store_b):
    return supplier_service.create_supplier(
        store_b.id, {"name": "Tata Yard", "phone": "7000000002", "address": "Port Road"}
    )


def get_auth_token(client, email: str, password: str) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/api/auth/login', json={
        'email': email,
        'password': password
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}
