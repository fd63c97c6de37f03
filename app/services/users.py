"""Account management: signup, password change, lookup and removal."""

import logging

from app.core.security import hash_password, verify_password
from app.models import User
from app.services.user_store import UserNotFoundError, UserStore

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "user"


def create_user(
    store: UserStore,
    name: str,
    email: str,
    password: str,
    role: str = DEFAULT_ROLE,
) -> User:
    """Hash the password and insert a new user. Raises UserAlreadyExistsError on duplicate email."""
    if not password:
        raise ValueError("Password must not be empty.")
    user = User(
        name=name.strip(),
        email=email.strip().lower(),
        password_hash=hash_password(password),
        role=role,
    )
    return store.insert(user)


def change_password(store: UserStore, user_id: int, new_password: str) -> User:
    """Replace the stored hash with a hash of new_password."""
    if not new_password:
        raise ValueError("Password must not be empty.")
    return store.update_credential(user_id, hash_password(new_password))


def check_password(store: UserStore, user_id: int, password: str) -> bool:
    """True if password matches the user's stored hash; False for unknown users."""
    try:
        user = store.find_by_id(user_id)
    except UserNotFoundError:
        logger.info("Password check for unknown user", extra={"user_id": user_id})
        return False
    return verify_password(password, user.password_hash)


def get_user(store: UserStore, user_id: int) -> User:
    return store.find_by_id(user_id)


def get_user_by_email(store: UserStore, email: str) -> User:
    return store.find_by_email(email.strip().lower())


def list_users(store: UserStore) -> list[User]:
    return store.list_all()


def delete_user(store: UserStore, user_id: int) -> None:
    store.delete(user_id)
