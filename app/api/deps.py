"""Shared FastAPI dependencies: user store, token issuer, authenticator, bearer auth."""

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.database import get_db
from app.core.tokens import InvalidTokenError, TokenIssuer, build_token_issuer
from app.schemas.auth import TokenClaims
from app.services.auth import Authenticator
from app.services.user_store import SqlUserStore

logger = logging.getLogger(__name__)
security = HTTPBearer(auto_error=False)


@lru_cache
def get_token_issuer() -> TokenIssuer:
    """Process-wide issuer built once from settings."""
    return build_token_issuer(get_settings())


def get_user_store(db: Annotated[Session, Depends(get_db)]) -> SqlUserStore:
    return SqlUserStore(db)


def get_authenticator(
    store: Annotated[SqlUserStore, Depends(get_user_store)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> Authenticator:
    return Authenticator(store, issuer)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> TokenClaims:
    """Dependency: require a valid Bearer JWT and return its claims. Raises 401 if missing or invalid."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        claims = issuer.validate(credentials.credentials)
    except InvalidTokenError as e:
        logger.info("Bearer token rejected", extra={"reason": e.reason})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from e
    return claims
