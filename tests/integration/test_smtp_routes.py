"""Integration tests for /api/smtp."""

from repositories import collections
from services.mail_credential_service import PASSWORD_MASK

SMTP = {
    "host": "smtp.x.com",
    "port": 465,
    "user": "mailer@x.com",
    "password": "hunter2",
    "secure": True,
}


def test_unconfigured(client, auth_headers):
    resp = client.get("/api/smtp", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["configured"] is False
    assert resp.json()["password"] is None


def test_save_then_read_masked(client, auth_headers, mongo_db):
    resp = client.post("/api/smtp", json=SMTP, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["success"] is True

    body = client.get("/api/smtp", headers=auth_headers).json()
    assert body["configured"] is True
    assert body["host"] == "smtp.x.com"
    assert body["user"] == "mailer@x.com"
    assert body["password"] == PASSWORD_MASK
    assert "hunter2" not in str(body)

    stored = mongo_db[collections.SMTP_CREDENTIALS].sync.find_one({})
    assert "hunter2" not in stored["password"]


def test_bad_port(client, auth_headers):
    resp = client.post("/api/smtp", json={**SMTP, "port": 70000}, headers=auth_headers)
    assert resp.status_code == 422


def test_requires_auth(client):
    assert client.get("/api/smtp").status_code == 401
    assert client.post("/api/smtp", json=SMTP).status_code == 401
