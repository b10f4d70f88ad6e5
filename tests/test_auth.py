"""Registration, login and token handling."""

from datetime import datetime, timedelta, timezone

from jose import jwt

from salon_api.config import JWT_ALGORITHM, SECRET_KEY
from salon_api.security_utils import create_access_token, decode_access_token

from tests.conftest import DEFAULT_PASSWORD, auth_headers, make_admin, make_user

REGISTRATION = {
    "name": "Anna",
    "surname": "Ivanova",
    "phone": "+7 (900) 123-45-67",
    "email": "Anna@Example.com",
    "password": "secret123",
}


class TestRegister:
    def test_register(self, client):
        response = client.post("/api/auth/register", json=REGISTRATION)
        assert response.status_code == 200
        body = response.json()
        assert body["user"]["email"] == "anna@example.com"
        assert body["user"]["phone"] == "+79001234567"
        assert body["user"]["role"] == "client"
        assert body["user"]["telegramConnected"] is False
        assert decode_access_token(body["token"])["sub"] == str(body["user"]["id"])

    def test_duplicate_email(self, client, db):
        make_user(db, email="anna@example.com", phone="79990000000")
        response = client.post("/api/auth/register", json=REGISTRATION)
        assert response.status_code == 400

    def test_duplicate_phone(self, client, db):
        make_user(db, email="other@example.com", phone="+79001234567")
        response = client.post("/api/auth/register", json=REGISTRATION)
        assert response.status_code == 400

    def test_short_password(self, client):
        response = client.post("/api/auth/register", json={**REGISTRATION, "password": "123"})
        assert response.status_code == 422

    def test_invalid_email(self, client):
        response = client.post("/api/auth/register", json={**REGISTRATION, "email": "not-an-email"})
        assert response.status_code == 422


class TestLogin:
    def test_login_with_email(self, client, db):
        user = make_user(db)
        response = client.post(
            "/api/auth/login", json={"phoneOrEmail": "ANNA@example.com", "password": DEFAULT_PASSWORD}
        )
        assert response.status_code == 200
        assert response.json()["user"]["id"] == user.id

    def test_login_with_phone(self, client, db):
        user = make_user(db)
        response = client.post(
            "/api/auth/login", json={"phoneOrEmail": "79001234567", "password": DEFAULT_PASSWORD}
        )
        assert response.status_code == 200
        assert response.json()["user"]["id"] == user.id

    def test_login_with_phone_as_registered(self, client):
        registered = client.post("/api/auth/register", json=REGISTRATION).json()
        response = client.post(
            "/api/auth/login",
            json={"phoneOrEmail": REGISTRATION["phone"], "password": REGISTRATION["password"]},
        )
        assert response.status_code == 200
        assert response.json()["user"]["id"] == registered["user"]["id"]

    def test_login_with_malformed_phone(self, client, db):
        make_user(db)
        response = client.post("/api/auth/login", json={"phoneOrEmail": "12-34", "password": "whatever"})
        assert response.status_code == 401
        assert response.json()["detail"] == "User not found"

    def test_unknown_user(self, client):
        response = client.post(
            "/api/auth/login", json={"phoneOrEmail": "ghost@example.com", "password": "whatever"}
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "User not found"

    def test_wrong_password(self, client, db):
        make_user(db)
        response = client.post(
            "/api/auth/login", json={"phoneOrEmail": "anna@example.com", "password": "wrong-password"}
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid password"


class TestAdminLogin:
    def test_admin_login(self, client, db):
        make_admin(db)
        response = client.post(
            "/api/auth/admin/login", json={"email": "admin@example.com", "password": DEFAULT_PASSWORD}
        )
        assert response.status_code == 200
        assert response.json()["user"]["role"] == "admin"

    def test_client_cannot_use_admin_login(self, client, db):
        make_user(db)
        response = client.post(
            "/api/auth/admin/login", json={"email": "anna@example.com", "password": DEFAULT_PASSWORD}
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Access denied"


class TestMe:
    def test_me(self, client, db):
        user = make_user(db, telegram_id="12345")
        response = client.get("/api/auth/me", headers=auth_headers(user))
        assert response.status_code == 200
        body = response.json()
        assert body["email"] == "anna@example.com"
        assert body["telegramConnected"] is True
        assert body["telegramId"] == "12345"

    def test_missing_token(self, client):
        assert client.get("/api/auth/me").status_code == 401

    def test_garbage_token(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer not.a.token"})
        assert response.status_code == 401

    def test_expired_token(self, client, db):
        user = make_user(db)
        expired = jwt.encode(
            {"sub": str(user.id), "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
            SECRET_KEY,
            algorithm=JWT_ALGORITHM,
        )
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {expired}"})
        assert response.status_code == 401

    def test_deleted_user(self, client):
        token = create_access_token(9999, "ghost@example.com", "client")
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["detail"] == "User not found"
