"""
Authorization tests for the StoreLedger API.

Verifies:
- Unauthenticated requests return 401
- Registration, login, logout and /me
- A user without a store cannot reach store data
"""

import pytest

from conftest import auth_headers, get_auth_token, registration_payload
from storeledger.extensions import db
from storeledger.models import User
from storeledger.services import auth_service, session_service


# =============================================================================
# UNAUTHENTICATED ACCESS: 401
# =============================================================================


class TestUnauthenticatedAccess:
    """All protected endpoints return 401 without a token."""

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/auth/me"),
            ("POST", "/api/auth/logout"),
            ("GET", "/api/customers"),
            ("POST", "/api/customers"),
            ("GET", "/api/suppliers"),
            ("GET", "/api/products"),
            ("GET", "/api/products/low-stock"),
            ("GET", "/api/sales"),
            ("POST", "/api/sales"),
            ("POST", "/api/sales/1/payments"),
            ("GET", "/api/buying"),
            ("GET", "/api/dashboard/kpi"),
            ("GET", "/api/dashboard/dues"),
            ("GET", "/api/dashboard/outstanding"),
            ("GET", "/api/dashboard/sales"),
        ],
    )
    def test_requires_auth(self, client, db_session, method, path):
        resp = getattr(client, method.lower())(path)
        assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"
        assert resp.json["kind"] == "Unauthorized"

    def test_malformed_header(self, client, token_a):
        resp = client.get("/api/customers", headers={"Authorization": f"Token {token_a}"})
        assert resp.status_code == 401

    def test_unknown_token(self, client, db_session):
        resp = client.get("/api/customers", headers=auth_headers("0" * 64))
        assert resp.status_code == 401
        assert resp.json["error"] == "Invalid or expired token"

    def test_user_without_store(self, client, db_session):
        user = User(
            email="nostore@example.com",
            password_hash=auth_service.hash_password("secret123"),
            first_name="No",
            last_name="Store",
        )
        db.session.add(user)
        db.session.commit()
        _, token = session_service.create_session(user.id)

        resp = client.get("/api/customers", headers=auth_headers(token))
        assert resp.status_code == 401
        assert resp.json["error"] == "Store not found for current user"


# =============================================================================
# REGISTRATION
# =============================================================================


class TestRegister:

    def test_register_creates_user_and_store(self, client, db_session):
        resp = client.post(
            "/api/auth/register",
            json=registration_payload("New@Example.com", "Sharma Traders", "9123456789", gstNumber="19ABCDE1234F1Z5"),
        )
        assert resp.status_code == 201
        assert resp.json["user"]["email"] == "new@example.com"
        assert resp.json["store"]["name"] == "Sharma Traders"
        assert resp.json["store"]["gstNumber"] == "19ABCDE1234F1Z5"
        assert resp.json["store"]["address"]["pincode"] == "741101"
        assert "password_hash" not in resp.json["user"]

    def test_duplicate_email(self, client, store_a):
        resp = client.post(
            "/api/auth/register",
            json=registration_payload("OWNER_A@example.com", "Again", "9000000009"),
        )
        assert resp.status_code == 409
        assert resp.json == {"error": "User already exists", "kind": "Validation", "field": "email"}

    def test_missing_field(self, client, db_session):
        resp = client.post(
            "/api/auth/register",
            json=registration_payload("x@example.com", "X", "9000000010", district=""),
        )
        assert resp.status_code == 400
        assert resp.json["field"] == "district"

    def test_password_mismatch(self, client, db_session):
        resp = client.post(
            "/api/auth/register",
            json=registration_payload("x@example.com", "X", "9000000010", confirmPassword="secret124"),
        )
        assert resp.status_code == 400
        assert resp.json["field"] == "confirmPassword"

    def test_short_password(self, client, db_session):
        resp = client.post(
            "/api/auth/register",
            json=registration_payload("x@example.com", "X", "9000000010", password="abc", confirmPassword="abc"),
        )
        assert resp.status_code == 400
        assert resp.json["field"] == "password"

    def test_non_json_body(self, client, db_session):
        resp = client.post("/api/auth/register", data="nope", content_type="text/plain")
        assert resp.status_code == 400


# =============================================================================
# LOGIN / LOGOUT / ME
# =============================================================================


class TestLogin:

    def test_login_returns_token_and_store(self, client, store_a):
        resp = client.post("/api/auth/login", json={"email": "owner_a@example.com", "password": "secret123"})
        assert resp.status_code == 200
        assert len(resp.json["token"]) == 64
        assert resp.json["storeId"] == store_a.id
        assert resp.json["session"]["storeId"] == store_a.id

    def test_wrong_password(self, client, store_a):
        resp = client.post("/api/auth/login", json={"email": "owner_a@example.com", "password": "wrong-pass"})
        assert resp.status_code == 401
        assert resp.json == {"error": "Invalid credentials", "kind": "Unauthorized"}

    def test_missing_credentials(self, client, db_session):
        resp = client.post("/api/auth/login", json={"email": "owner_a@example.com"})
        assert resp.status_code == 400

    def test_me(self, client, store_a):
        token = get_auth_token(client, "owner_a@example.com", "secret123")
        resp = client.get("/api/auth/me", headers=auth_headers(token))
        assert resp.status_code == 200
        assert resp.json["user"]["email"] == "owner_a@example.com"
        assert resp.json["store"]["id"] == store_a.id

    def test_logout_revokes_token(self, client, store_a):
        token = get_auth_token(client, "owner_a@example.com", "secret123")
        headers = auth_headers(token)

        assert client.post("/api/auth/logout", headers=headers).status_code == 200
        assert client.get("/api/auth/me", headers=headers).status_code == 401


# =============================================================================
# PUBLIC ENDPOINTS
# =============================================================================


class TestPublicEndpoints:
    """System health endpoint is public."""

    def test_health(self, client, db_session):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json["status"] == "healthy"
        assert resp.json["checks"]["database"]["status"] == "healthy"

    def test_cors_for_allowed_origin(self, client, db_session):
        resp = client.get("/api/health", headers={"Origin": "http://localhost:3000"})
        assert resp.headers["Access-Control-Allow-Origin"] == "http://localhost:3000"

    def test_no_cors_for_unknown_origin(self, client, db_session):
        resp = client.get("/api/health", headers={"Origin": "http://evil.example"})
        assert "Access-Control-Allow-Origin" not in resp.headers
