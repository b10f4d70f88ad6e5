"""Telegram account linking."""

from datetime import timedelta

from salon_api.domain.telegram.service import utcnow
from salon_api.models import TelegramLink, User

from tests.conftest import BOT_SECRET, auth_headers, make_user

BOT_HEADERS = {"X-Telegram-Bot-Secret": BOT_SECRET}


def _request_code(client, user) -> str:
    response = client.post("/api/telegram/link", headers=auth_headers(user))
    assert response.status_code == 200
    return response.json()["linkCode"]


def _verify(client, code, telegram_id="123456789", username="anna_beauty", headers=BOT_HEADERS):
    return client.post(
        "/api/telegram/verify",
        json={"code": code, "telegramId": telegram_id, "telegramUsername": username},
        headers=headers,
    )


class TestLinkCode:
    def test_code_format(self, client, db):
        code = _request_code(client, make_user(db))
        assert len(code) == 6
        assert code.isalnum()
        assert code == code.upper()

    def test_new_code_replaces_old_one(self, client, db):
        user = make_user(db)
        old_code = _request_code(client, user)
        new_code = _request_code(client, user)

        codes = [link.link_code for link in db.query(TelegramLink).filter(TelegramLink.user_id == user.id)]
        assert codes == [new_code]
        if old_code != new_code:
            assert _verify(client, old_code).status_code == 404

    def test_requires_authentication(self, client):
        assert client.post("/api/telegram/link").status_code == 401


class TestVerifyAndCheck:
    def test_unverified_code_is_not_linked(self, client, db):
        code = _request_code(client, make_user(db))
        assert client.get(f"/api/telegram/check-link/{code}").json() == {"linked": False}

    def test_verify_links_account(self, client, db):
        user = make_user(db)
        code = _request_code(client, user)

        response = _verify(client, code)
        assert response.status_code == 200
        assert response.json() == {
            "userId": user.id,
            "telegramId": "123456789",
            "telegramUsername": "anna_beauty",
        }

        check = client.get(f"/api/telegram/check-link/{code}").json()
        assert check == {"linked": True, "telegramId": "123456789", "telegramUsername": "anna_beauty"}

        me = client.get("/api/auth/me", headers=auth_headers(user)).json()
        assert me["telegramConnected"] is True
        assert me["telegramUsername"] == "anna_beauty"

    def test_numeric_telegram_id_is_accepted(self, client, db):
        code = _request_code(client, make_user(db))
        response = client.post(
            "/api/telegram/verify", json={"code": code, "telegramId": 987654321}, headers=BOT_HEADERS
        )
        assert response.status_code == 200
        assert response.json()["telegramId"] == "987654321"

    def test_expired_code(self, client, db):
        user = make_user(db)
        code = _request_code(client, user)
        db.query(TelegramLink).filter(TelegramLink.link_code == code).update(
            {"expires_at": utcnow() - timedelta(minutes=1)}
        )
        db.commit()

        assert _verify(client, code).status_code == 404
        assert client.get(f"/api/telegram/check-link/{code}").json() == {"linked": False}

    def test_unknown_code(self, client):
        assert _verify(client, "ZZZZ99").status_code == 404

    def test_malformed_code(self, client):
        assert _verify(client, "abc").status_code == 422

    def test_wrong_bot_secret(self, client, db):
        code = _request_code(client, make_user(db))
        response = _verify(client, code, headers={"X-Telegram-Bot-Secret": "nope"})
        assert response.status_code == 401

    def test_missing_bot_secret(self, client, db):
        code = _request_code(client, make_user(db))
        assert _verify(client, code, headers={}).status_code == 401

    def test_verified_code_cannot_be_reused(self, client, db):
        user = make_user(db)
        code = _request_code(client, user)
        assert _verify(client, code).status_code == 200

        response = _verify(client, code, telegram_id="999", username="someone_else")
        assert response.status_code == 409

        me = client.get("/api/auth/me", headers=auth_headers(user)).json()
        assert me["telegramId"] == "123456789"


class TestUnlink:
    def test_unlink(self, client, db):
        user = make_user(db)
        code = _request_code(client, user)
        _verify(client, code)

        response = client.post("/api/telegram/unlink", headers=auth_headers(user))
        assert response.status_code == 200
        assert response.json() == {"success": True}

        db.expire_all()
        refreshed = db.get(User, user.id)
        assert refreshed.telegram_id is None
        assert refreshed.telegram_username is None
        assert db.query(TelegramLink).filter(TelegramLink.user_id == user.id).count() == 0
