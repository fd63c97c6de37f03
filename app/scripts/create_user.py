"""
Create a user (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user NAME EMAIL PASSWORD [role]
Example:
  python -m app.scripts.create_user Admin admin@example.com your-secure-password admin
"""
import argparse
import logging
import sys

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.core.logging_config import configure_logging
from app.core.security import NAME_MAX_LEN, PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from app.services.user_store import SqlUserStore, UserAlreadyExistsError, UserStoreError
from app.services.users import create_user

logger = logging.getLogger("app.scripts.create_user")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an auth service user.")
    parser.add_argument("name", help=f"Display name (1-{NAME_MAX_LEN} chars)")
    parser.add_argument("email", help="Email (unique)")
    parser.add_argument(
        "password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)"
    )
    parser.add_argument("role", nargs="?", default="user")
    args = parser.parse_args(argv)

    configure_logging(get_settings())

    name = args.name.strip()
    if not name or len(name) > NAME_MAX_LEN:
        print("Invalid name length.", file=sys.stderr)
        return 1
    if "@" not in args.email:
        print("Invalid email.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1

    db = SessionLocal()
    try:
        user = create_user(SqlUserStore(db), name, args.email, args.password, role=args.role)
    except UserAlreadyExistsError as e:
        print(e.message, file=sys.stderr)
        return 1
    except UserStoreError as e:
        logger.error("Could not create user: %s", e.message)
        return 1
    finally:
        db.close()
    print(f"Created user {user.id} '{user.email}' with role '{user.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
