"""
Request authentication: one bearer credential in, an Identity or
UNAUTHENTICATED out.

The Authorization header is parsed once into a tagged credential
(ApiKeyCredential / TokenCredential / Unrecognized) and dispatched with
``match``. Every failure, whatever the path, returns the same UNAUTHENTICATED
object; the reason is only visible in debug logs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from bson import ObjectId

from services.api_key_service import ApiKeyService
from services.token_service import TokenService
from shared.generators import API_KEY_PREFIX
from shared.logging import get_logger

log = get_logger(__name__)

BEARER_SCHEME = "bearer"

AUTH_METHOD_TOKEN = "token"
AUTH_METHOD_API_KEY = "api_key"


@dataclass(frozen=True)
class ApiKeyCredential:
    key: str


@dataclass(frozen=True)
class TokenCredential:
    token: str


@dataclass(frozen=True)
class Unrecognized:
    reason: str


Credential = Union[ApiKeyCredential, TokenCredential, Unrecognized]


@dataclass(frozen=True)
class Identity:
    """
    The authenticated caller.

    API keys only carry the account id; email and user_name are filled in
    for session tokens, which embed them.
    """

    account_id: str
    auth_method: str
    email: Optional[str] = None
    user_name: Optional[str] = None

    @property
    def object_id(self) -> ObjectId:
        return ObjectId(self.account_id)


@dataclass(frozen=True)
class Unauthenticated:
    pass


UNAUTHENTICATED = Unauthenticated()


def parse_credential(header: Optional[str]) -> Credential:
    if not header:
        return Unrecognized("missing_header")

    scheme, _, value = header.strip().partition(" ")
    if scheme.lower() != BEARER_SCHEME:
        return Unrecognized("unsupported_scheme")

    value = value.strip()
    if not value:
        return Unrecognized("empty_credential")
    if value.startswith(API_KEY_PREFIX):
        return ApiKeyCredential(value)

    segments = value.split(".")
    if len(segments) == 3 and all(segments):
        return TokenCredential(value)
    return Unrecognized("unknown_shape")


class AuthResolver:
    def __init__(self, tokens: TokenService, api_keys: ApiKeyService) -> None:
        self._tokens = tokens
        self._api_keys = api_keys

    async def resolve(self, header: Optional[str]) -> Union[Identity, Unauthenticated]:
        match parse_credential(header):
            case ApiKeyCredential(key=key):
                account_id = await self._api_keys.verify(key)
                if account_id is None:
                    return _reject("api_key_invalid")
                return Identity(
                    account_id=str(account_id), auth_method=AUTH_METHOD_API_KEY
                )

            case TokenCredential(token=token):
                claims = self._tokens.verify(token)
                if claims is None:
                    return _reject("token_invalid")
                if not ObjectId.is_valid(claims.account_id):
                    return _reject("token_subject_invalid")
                return Identity(
                    account_id=claims.account_id,
                    auth_method=AUTH_METHOD_TOKEN,
                    email=claims.email,
                    user_name=claims.user_name,
                )

            case Unrecognized(reason=reason):
                return _reject(reason)


def _reject(reason: str) -> Unauthenticated:
    log.debug("auth_failed", reason=reason)
    return UNAUTHENTICATED
