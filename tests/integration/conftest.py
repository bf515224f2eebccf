"""
Integration fixtures: the real routers, dependencies and error handlers,
wired through bind_state() to a mongomock database and a recording
EmailProvider. No network connections are made.
"""

import os
from contextlib import asynccontextmanager

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app import bind_state, include_routers
from config import AppSettings, OtpSettings
from errors import register_error_handlers
from repositories.indexes import ensure_indexes

# Ensure a MONGODB_URI is present so AppSettings can be instantiated
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/")


@pytest.fixture
def settings(jwt_settings, encryption_settings) -> AppSettings:
    return AppSettings(
        jwt=jwt_settings,
        encryption=encryption_settings,
        otp=OtpSettings(otp_resend_cooldown_seconds=60),
    )


@pytest.fixture
def app(settings, mongo_db, email_provider) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        bind_state(app, settings, mongo_db, None, email_provider)
        await ensure_indexes(mongo_db)
        yield

    app = FastAPI(lifespan=lifespan)
    register_error_handlers(app)
    include_routers(app)
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def signup_and_verify(client, email_provider):
    """Factory: register an account, verify its signup code, return a session token."""

    def _run(email="a@x.com", user_name="alice", password="secret1") -> str:
        resp = client.post(
            "/api/auth/signup",
            json={"user_name": user_name, "email": email, "password": password},
        )
        assert resp.status_code == 201, resp.text
        code = email_provider.last_code(email, "signup")
        resp = client.post(
            "/api/otp/verify", json={"email": email, "otp": code, "type": "signup"}
        )
        assert resp.status_code == 200, resp.text
        resp = client.post("/api/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        return resp.json()["token"]

    return _run


@pytest.fixture
def session_token(signup_and_verify) -> str:
    return signup_and_verify()


@pytest.fixture
def auth_headers(session_token) -> dict:
    return {"Authorization": f"Bearer {session_token}"}
