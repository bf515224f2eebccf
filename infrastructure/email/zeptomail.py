"""ZeptoMail implementation of EmailProvider.

Renders the OTP mail from templates/emails with Jinja2 and posts it to the
ZeptoMail REST API over the shared HttpClient. Delivery failures are logged
and reported as False; they never raise.
"""

import os
from typing import Optional

import httpx
from jinja2 import Environment, FileSystemLoader, select_autoescape

from config import EmailSettings
from infrastructure.http_client import HttpClient
from schemas.models.otp import OTP_TYPE_FORGOT_PASSWORD, OTP_TYPE_SIGNUP
from shared.logging import get_logger

log = get_logger(__name__)

_ZEPTO_API_URL = "https://api.zeptomail.in/v1.1/email"
_TOKEN_PREFIX = "Zoho-enczapikey "
_DEFAULT_TEMPLATE_DIR = os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(__file__))),
    "templates",
    "emails",
)

# otp_type -> (subject, template, plain-text headline)
_OTP_MAILS = {
    OTP_TYPE_SIGNUP: (
        "Verify your email",
        "verification.html",
        "Your verification code is",
    ),
    OTP_TYPE_FORGOT_PASSWORD: (
        "Reset your password",
        "password_reset.html",
        "Your password reset code is",
    ),
}


class ZeptoMailProvider:
    def __init__(
        self,
        settings: EmailSettings,
        http_client: HttpClient,
        app_name: str = "mailsend",
        app_url: str = "http://localhost:8000",
        template_dir: str = _DEFAULT_TEMPLATE_DIR,
    ) -> None:
        self._settings = settings
        self._http = http_client
        self._app_name = app_name
        self._app_url = app_url
        self._jinja = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html", "xml"]),
        )

    def _auth_header(self) -> str:
        token = self._settings.zepto_api_token
        if not token.startswith(_TOKEN_PREFIX):
            token = f"{_TOKEN_PREFIX}{token}"
        return token

    async def _send(
        self,
        to_email: str,
        to_name: Optional[str],
        subject: str,
        html_body: str,
        text_body: str,
    ) -> bool:
        if not self._settings.zepto_api_token:
            log.error("email_send_failed", reason="token_not_configured")
            return False

        payload = {
            "from": {
                "address": self._settings.zepto_from_email,
                "name": self._settings.zepto_from_name,
            },
            "to": [
                {
                    "email_address": {
                        "address": to_email,
                        "name": to_name or to_email,
                    }
                }
            ],
            "subject": subject,
            "htmlbody": html_body,
            "textbody": text_body,
        }
        headers = {
            "Authorization": self._auth_header(),
            "Content-Type": "application/json",
        }

        try:
            response = await self._http.post(
                _ZEPTO_API_URL, json=payload, headers=headers
            )
        except httpx.HTTPError as e:
            log.error(
                "email_send_error",
                subject=subject,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

        if response.status_code in (200, 201, 202):
            log.info("email_sent_success", subject=subject)
            return True
        log.error(
            "email_send_failed",
            subject=subject,
            status_code=response.status_code,
            response=response.text[:200],
        )
        return False

    async def send_otp_email(
        self, email: str, user_name: Optional[str], otp_code: str, otp_type: str
    ) -> bool:
        """Mail a one-time code for the given purpose."""
        try:
            subject, template_name, headline = _OTP_MAILS[otp_type]
        except KeyError:
            raise ValueError(f"Unknown OTP type: {otp_type!r}") from None

        subject = f"{subject} - {self._app_name}"
        html_body = self._jinja.get_template(template_name).render(
            otp_code=otp_code,
            user_name=user_name,
            app_name=self._app_name,
            app_url=self._app_url,
        )
        greeting = f"Hello {user_name}," if user_name else "Hello,"
        text_body = (
            f"{subject}\n\n"
            f"{greeting}\n\n"
            f"{headline}: {otp_code}\n\n"
            f"This code expires in 10 minutes. If you did not request it, "
            f"you can ignore this email."
        )
        return await self._send(email, user_name, subject, html_body, text_body)
