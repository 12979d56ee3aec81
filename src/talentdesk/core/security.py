from __future__ import annotations

import logging
from datetime import timedelta
from functools import lru_cache
from typing import Any

import bcrypt
import jwt

from talentdesk.config import Settings, get_settings
from talentdesk.core.dates import utcnow
from talentdesk.core.errors import AuthenticationFailed, ValidationFailed

logger = logging.getLogger(__name__)

GOOGLE_ISSUERS = ("accounts.google.com", "https://accounts.google.com")
BCRYPT_ROUNDS = 10


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, hashed: str | None) -> bool:
    if not hashed:
        burn_password_check(password)
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password("timing-equalizer")


def burn_password_check(password: str) -> None:
    """Spend the same bcrypt work as a real check when the account is unknown."""
    verify_password(password, _dummy_hash())


def create_access_token(user_id: str, settings: Settings | None = None) -> str:
    settings = settings or get_settings()
    now = utcnow()
    payload = {
        "sub": user_id,
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt_ttl_min),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings | None = None) -> str:
    settings = settings or get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationFailed("Not authorized, token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthenticationFailed("Not authorized, token failed") from exc
    return str(payload["sub"])


class GoogleTokenVerifier:
    """Checks a Google ID token's signature, audience and issuer."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self._jwks: jwt.PyJWKClient | None = None

    @property
    def jwks(self) -> jwt.PyJWKClient:
        if self._jwks is None:
            self._jwks = jwt.PyJWKClient(self.settings.google_certs_url)
        return self._jwks

    def verify(self, token: str) -> dict[str, Any]:
        if not token:
            raise ValidationFailed("No Google token provided")
        if token.count(".") != 2:
            raise ValidationFailed("Invalid Google token format")
        if not self.settings.google_client_id:
            raise AuthenticationFailed("Google login is not configured")

        try:
            signing_key = self.jwks.get_signing_key_from_jwt(token)
            claims = jwt.decode(
                token,
                signing_key.key,
                algorithms=["RS256"],
                audience=self.settings.google_client_id,
                options={"require": ["sub", "exp", "iss", "aud"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise AuthenticationFailed("Google token has expired") from exc
        except (jwt.InvalidTokenError, jwt.PyJWKClientError) as exc:
            logger.warning("Google token rejected: %s", exc)
            raise AuthenticationFailed("Google login failed") from exc

        if claims.get("iss") not in GOOGLE_ISSUERS:
            raise AuthenticationFailed("Google login failed")
        return claims
