"""User record store: the persistence contract the auth core depends on, and its SQLAlchemy implementation."""

import logging
from typing import Protocol

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.models import User

logger = logging.getLogger(__name__)


class UserNotFoundError(Exception):
    """Raised when no user matches the requested id or email."""

    def __init__(self, message: str = "User not found") -> None:
        self.message = message
        super().__init__(message)


class UserAlreadyExistsError(Exception):
    """Raised when inserting a user whose email is already registered."""

    def __init__(self, email: str) -> None:
        self.message = "A user with this email already exists."
        self.email = email
        super().__init__(self.message)


class UserStoreError(Exception):
    """Raised when the underlying database call fails."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class UserStore(Protocol):
    def find_by_id(self, user_id: int) -> User: ...

    def find_by_email(self, email: str) -> User: ...

    def insert(self, user: User) -> User: ...

    def update_credential(self, user_id: int, password_hash: str) -> User: ...

    def delete(self, user_id: int) -> None: ...

    def list_all(self) -> list[User]: ...


class SqlUserStore:
    """UserStore backed by a SQLAlchemy session (one per request)."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def _fail(self, operation: str, e: SQLAlchemyError, **context: object) -> UserStoreError:
        self.session.rollback()
        logger.error(
            "User store operation failed",
            extra={"operation": operation, "error": str(e)[:500], **context},
        )
        return UserStoreError(f"User store {operation} failed.", cause=e)

    def find_by_id(self, user_id: int) -> User:
        try:
            user = self.session.get(User, user_id)
        except SQLAlchemyError as e:
            raise self._fail("find_by_id", e, user_id=user_id) from e
        if user is None:
            raise UserNotFoundError()
        return user

    def find_by_email(self, email: str) -> User:
        try:
            user = self.session.query(User).filter(User.email == email).first()
        except SQLAlchemyError as e:
            raise self._fail("find_by_email", e) from e
        if user is None:
            raise UserNotFoundError()
        return user

    def insert(self, user: User) -> User:
        try:
            self.session.add(user)
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise UserAlreadyExistsError(user.email) from e
        except SQLAlchemyError as e:
            raise self._fail("insert", e) from e
        try:
            self.session.refresh(user)
        except SQLAlchemyError as e:
            raise self._fail("insert", e) from e
        logger.info("User created", extra={"user_id": user.id})
        return user

    def update_credential(self, user_id: int, password_hash: str) -> User:
        user = self.find_by_id(user_id)
        user.password_hash = password_hash
        try:
            self.session.commit()
            self.session.refresh(user)
        except SQLAlchemyError as e:
            raise self._fail("update_credential", e, user_id=user_id) from e
        logger.info("User password updated", extra={"user_id": user_id})
        return user

    def delete(self, user_id: int) -> None:
        user = self.find_by_id(user_id)
        try:
            self.session.delete(user)
            self.session.commit()
        except SQLAlchemyError as e:
            raise self._fail("delete", e, user_id=user_id) from e
        logger.info("User deleted", extra={"user_id": user_id})

    def list_all(self) -> list[User]:
        try:
            return self.session.query(User).order_by(User.id).all()
        except SQLAlchemyError as e:
            raise self._fail("list_all", e) from e
