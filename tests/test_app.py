"""Application-level endpoints and error handling."""

from tests.conftest import auth_headers, make_user


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "OK"
    assert body["database"] == "Connected"
    assert body["telegramBot"] in ("Active", "Disabled")
    assert "timestamp" in body


def test_index_lists_endpoints(client):
    body = client.get("/").json()
    assert "/api/bookings/available-times" in body["endpoints"]["bookings"]


def test_validation_errors_are_422(client, db):
    user = make_user(db)
    response = client.post("/api/bookings", json={"serviceId": "abc"}, headers=auth_headers(user))
    assert response.status_code == 422
    assert isinstance(response.json()["detail"], list)
