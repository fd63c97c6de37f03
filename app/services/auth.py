"""
Login and refresh flows: credential verification composed with token issuance.

The Authenticator holds no state of its own. Unknown email and wrong password
surface as the same WrongCredentialsError so callers cannot probe which
accounts exist.
"""

import logging
import threading
from dataclasses import dataclass
from functools import lru_cache

from app.core.security import hash_password, verify_password
from app.core.tokens import InvalidTokenError, TokenIssuer
from app.schemas.auth import TokenClaims
from app.services.user_store import UserNotFoundError, UserStore

logger = logging.getLogger(__name__)

WRONG_CREDENTIALS_MESSAGE = "Invalid email or password."


class WrongCredentialsError(Exception):
    """Raised when the email is unknown or the password does not match."""

    def __init__(self) -> None:
        self.message = WRONG_CREDENTIALS_MESSAGE
        super().__init__(self.message)


class OperationCancelledError(Exception):
    """Raised when the caller's cancel event is set before the call completes."""

    def __init__(self, operation: str) -> None:
        self.message = f"{operation} was cancelled."
        super().__init__(self.message)


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    expires_at: int
    user_id: int
    role: str | None = None


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password("not-a-real-password")


def _check_cancelled(cancel: threading.Event | None, operation: str) -> None:
    if cancel is not None and cancel.is_set():
        raise OperationCancelledError(operation)


class Authenticator:
    """Composes a UserStore and a TokenIssuer into login/refresh/validate."""

    def __init__(self, store: UserStore, issuer: TokenIssuer) -> None:
        self.store = store
        self.issuer = issuer

    def login(
        self,
        email: str,
        password: str,
        cancel: threading.Event | None = None,
    ) -> TokenPair:
        """
        Verify credentials and mint an access/refresh token pair.

        Raises WrongCredentialsError, TokenGenerationError, OperationCancelledError;
        store errors propagate unchanged.
        """
        _check_cancelled(cancel, "login")
        try:
            user = self.store.find_by_email(email.strip().lower())
        except UserNotFoundError:
            # Unknown emails pay one bcrypt check, same as a wrong password.
            verify_password(password, _dummy_hash())
            logger.info("Login rejected", extra={"reason": "unknown_email"})
            raise WrongCredentialsError() from None

        _check_cancelled(cancel, "login")
        if not verify_password(password, user.password_hash):
            logger.info(
                "Login rejected", extra={"reason": "wrong_password", "user_id": user.id}
            )
            raise WrongCredentialsError()

        _check_cancelled(cancel, "login")
        access_token, expires_at = self.issuer.issue_access_token(user.id)
        refresh_token = self.issuer.issue_refresh_token(user.id)
        logger.info("Login succeeded", extra={"user_id": user.id})
        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=expires_at,
            user_id=user.id,
            role=user.role,
        )

    def refresh(
        self,
        refresh_token: str,
        cancel: threading.Event | None = None,
    ) -> TokenPair:
        """
        Exchange a valid refresh token for a new token pair.

        The presented refresh token is not invalidated; it stays usable until it expires.
        Raises InvalidTokenError, UserNotFoundError, TokenGenerationError, OperationCancelledError.
        """
        _check_cancelled(cancel, "refresh")
        try:
            claims = self.issuer.validate(refresh_token)
        except InvalidTokenError as e:
            logger.info("Refresh rejected", extra={"reason": e.reason})
            raise

        _check_cancelled(cancel, "refresh")
        try:
            user = self.store.find_by_id(claims.user_id)
        except UserNotFoundError:
            logger.info(
                "Refresh rejected",
                extra={"reason": "user_not_found", "user_id": claims.user_id},
            )
            raise

        _check_cancelled(cancel, "refresh")
        access_token, expires_at = self.issuer.issue_access_token(user.id)
        new_refresh_token = self.issuer.issue_refresh_token(user.id)
        return TokenPair(
            access_token=access_token,
            refresh_token=new_refresh_token,
            expires_at=expires_at,
            user_id=user.id,
            role=user.role,
        )

    def validate_bearer_token(self, token: str) -> TokenClaims:
        """Return claims for a valid token; raises InvalidTokenError otherwise."""
        return self.issuer.validate(token)
