"""
Issue and validate signed, time-limited JWTs carrying a user id.

Access and refresh tokens share one structure and one verification path; they
differ only in lifetime. Signing uses a symmetric secret injected at
construction. Each token may carry a key id ("kid" header) so that retired
secrets can stay verifiable while a new one is rolled out.
"""

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import jwt

from app.schemas.auth import TokenClaims

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TTL = timedelta(minutes=15)
REFRESH_TOKEN_TTL = timedelta(days=7)

INVALID_TOKEN_MESSAGE = "Invalid or expired token"


class InvalidTokenError(Exception):
    """
    Raised when a token is malformed, mis-signed, or expired.

    The public message is the same for every cause; `reason` is for logs only.
    """

    def __init__(self, reason: str = "malformed") -> None:
        self.message = INVALID_TOKEN_MESSAGE
        self.reason = reason
        super().__init__(self.message)


class TokenGenerationError(Exception):
    """Raised when a token cannot be signed (bad key or algorithm configuration)."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class TokenIssuer:
    """Stateless issuer/validator bound to one active signing key."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        access_ttl: timedelta = ACCESS_TOKEN_TTL,
        refresh_ttl: timedelta = REFRESH_TOKEN_TTL,
        key_id: str | None = None,
        verification_keys: Mapping[str, str] | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self._key_id = key_id
        self._keys: dict[str, str] = dict(verification_keys or {})
        if key_id is not None:
            self._keys[key_id] = secret
        self._clock = clock

    def issue_access_token(self, user_id: int) -> tuple[str, int]:
        """Return (token, expires_at as Unix seconds) for a 15-minute access token."""
        token, expires_at = self._issue(user_id, self.access_ttl)
        return token, int(expires_at.timestamp())

    def issue_refresh_token(self, user_id: int) -> str:
        """Return a refresh token valid for 7 days."""
        token, _ = self._issue(user_id, self.refresh_ttl)
        return token

    def _issue(self, user_id: int, ttl: timedelta) -> tuple[str, datetime]:
        now = self._clock()
        expires_at = now + ttl
        payload: dict[str, Any] = {
            "user_id": user_id,
            "exp": expires_at,
            "iat": now,
        }
        headers = {"kid": self._key_id} if self._key_id else None
        try:
            token = jwt.encode(
                payload,
                self._secret,
                algorithm=self._algorithm,
                headers=headers,
            )
        except (jwt.PyJWTError, NotImplementedError, TypeError, ValueError) as e:
            logger.error(
                "Token signing failed",
                extra={"user_id": user_id, "algorithm": self._algorithm},
            )
            raise TokenGenerationError("Could not sign token.", cause=e) from e
        return token, expires_at

    def _key_for(self, token: str) -> tuple[str, str | None]:
        try:
            header = jwt.get_unverified_header(token)
        except jwt.PyJWTError as e:
            raise InvalidTokenError("malformed") from e
        kid = header.get("kid")
        if kid is None:
            return self._secret, None
        if not isinstance(kid, str) or kid not in self._keys:
            raise InvalidTokenError("signature")
        return self._keys[kid], kid

    def validate(self, token: str) -> TokenClaims:
        """
        Verify signature and expiry and return the decoded claims.

        Raises InvalidTokenError for malformed, mis-signed, or expired tokens.
        """
        if not token or not isinstance(token, str):
            raise InvalidTokenError("malformed")
        secret, kid = self._key_for(token)
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "user_id"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("expired") from e
        except jwt.InvalidSignatureError as e:
            raise InvalidTokenError("signature") from e
        except jwt.PyJWTError as e:
            raise InvalidTokenError("malformed") from e

        user_id = payload.get("user_id")
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise InvalidTokenError("malformed")
        iat = payload.get("iat")
        return TokenClaims(
            user_id=user_id,
            expires_at=datetime.fromtimestamp(payload["exp"], UTC),
            issued_at=datetime.fromtimestamp(iat, UTC) if isinstance(iat, (int, float)) else None,
            key_id=kid,
        )


def build_token_issuer(settings: "Settings") -> TokenIssuer:
    """Create the process-wide issuer from application settings."""
    return TokenIssuer(
        secret=settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
        access_ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        refresh_ttl=timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        key_id=settings.JWT_KEY_ID,
        verification_keys={
            kid: secret.get_secret_value()
            for kid, secret in settings.JWT_VERIFICATION_KEYS.items()
        },
    )
