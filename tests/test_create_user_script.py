"""Tests for the create_user CLI (app.scripts.create_user)."""

import io
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import patch

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.security import verify_password
from app.models import Base, User
from app.scripts import create_user as script


class TestCreateUserScript(unittest.TestCase):
    def setUp(self) -> None:
        engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(engine)
        self.addCleanup(engine.dispose)
        self.session_factory = sessionmaker(bind=engine)
        for target, value in (
            ("app.scripts.create_user.SessionLocal", self.session_factory),
            ("app.scripts.create_user.configure_logging", lambda settings: None),
            ("app.core.security.BCRYPT_ROUNDS", 4),
        ):
            patcher = patch(target, value)
            patcher.start()
            self.addCleanup(patcher.stop)

    def run_script(self, *argv: str) -> tuple[int, str, str]:
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = script.main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_creates_admin(self) -> None:
        code, out, _ = self.run_script("Admin", "admin@b.com", "secret1", "admin")
        self.assertEqual(code, 0)
        self.assertIn("admin@b.com", out)
        db = self.session_factory()
        self.addCleanup(db.close)
        user = db.query(User).filter(User.email == "admin@b.com").one()
        self.assertEqual(user.role, "admin")
        self.assertTrue(verify_password("secret1", user.password_hash))

    def test_duplicate_email(self) -> None:
        self.assertEqual(self.run_script("Admin", "admin@b.com", "secret1")[0], 0)
        code, _, err = self.run_script("Other", "admin@b.com", "secret2")
        self.assertEqual(code, 1)
        self.assertIn("already exists", err)

    def test_invalid_input(self) -> None:
        self.assertEqual(self.run_script("  ", "admin@b.com", "secret1")[0], 1)
        self.assertEqual(self.run_script("Admin", "not-an-email", "secret1")[0], 1)
        self.assertEqual(self.run_script("Admin", "admin@b.com", "x" * 200)[0], 1)


if __name__ == "__main__":
    unittest.main()
