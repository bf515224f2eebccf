"""Unit tests for the AppError hierarchy and its HTTP handlers."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from errors import (
    AppError,
    AuthenticationError,
    ConflictError,
    DecryptionError,
    EmailNotVerifiedError,
    ForbiddenError,
    NotFoundError,
    OtpExpiredError,
    QuotaExceededError,
    RateLimitError,
    ValidationError,
    register_error_handlers,
)


@pytest.mark.parametrize(
    "cls, status, code",
    [
        (ValidationError, 400, "validation_error"),
        (QuotaExceededError, 400, "quota_exceeded"),
        (AuthenticationError, 401, "authentication_error"),
        (ForbiddenError, 403, "forbidden"),
        (EmailNotVerifiedError, 403, "email_not_verified"),
        (NotFoundError, 404, "not_found"),
        (ConflictError, 409, "conflict"),
        (OtpExpiredError, 410, "otp_expired"),
        (RateLimitError, 429, "rate_limit_exceeded"),
        (DecryptionError, 500, "decryption_error"),
    ],
)
def test_status_and_code(cls, status, code):
    e = cls("message")
    assert isinstance(e, AppError)
    assert e.status_code == status
    assert e.error_code == code
    assert e.message == "message"


class TestAppErrorToDict:
    def test_basic(self):
        e = NotFoundError("key not found")
        assert e.to_dict() == {"error": "key not found", "code": "not_found"}

    @pytest.mark.parametrize(
        "kwargs, key, value",
        [
            ({"field": "otp"}, "field", "otp"),
            ({"details": {"attempts_remaining": 2}}, "details", {"attempts_remaining": 2}),
        ],
        ids=["with_field", "with_details"],
    )
    def test_optional_key_present(self, kwargs, key, value):
        e = ValidationError("invalid", **kwargs)
        assert e.to_dict()[key] == value

    def test_no_optional_keys_when_absent(self):
        d = NotFoundError("missing").to_dict()
        assert "field" not in d
        assert "details" not in d


class TestHandlers:
    def _client(self, exc: Exception) -> TestClient:
        app = FastAPI()
        register_error_handlers(app)

        @app.get("/boom")
        async def boom():
            raise exc

        return TestClient(app, raise_server_exceptions=False)

    def test_app_error_rendered(self):
        resp = self._client(OtpExpiredError("OTP has expired")).get("/boom")
        assert resp.status_code == 410
        assert resp.json() == {"error": "OTP has expired", "code": "otp_expired"}

    def test_unhandled_error_is_generic_500(self):
        resp = self._client(RuntimeError("secret detail")).get("/boom")
        assert resp.status_code == 500
        assert resp.json()["code"] == "internal_error"
        assert "secret detail" not in resp.text
