"""Unit tests for app.core.config.Settings validators and app.core.logging_config."""

import logging
import unittest

from pydantic import ValidationError

from app.core.config import Settings
from app.core.logging_config import HealthCheckFilter, get_logging_config


def _settings(**overrides: object) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestSettings(unittest.TestCase):
    def test_defaults(self) -> None:
        s = _settings()
        self.assertEqual(s.ACCESS_TOKEN_EXPIRE_MINUTES, 15)
        self.assertEqual(s.REFRESH_TOKEN_EXPIRE_DAYS, 7)
        self.assertEqual(s.JWT_ALGORITHM, "HS256")
        self.assertIsNone(s.JWT_KEY_ID)

    def test_sqlite_url_accepted(self) -> None:
        self.assertEqual(_settings(DATABASE_URL=" sqlite:// ").DATABASE_URL, "sqlite://")

    def test_unsupported_database_url(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(DATABASE_URL="mysql://localhost/auth")

    def test_asymmetric_algorithm_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(JWT_ALGORITHM="RS256")

    def test_algorithm_normalized(self) -> None:
        self.assertEqual(_settings(JWT_ALGORITHM="hs512").JWT_ALGORITHM, "HS512")

    def test_empty_secret_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(JWT_SECRET="   ")

    def test_blank_key_id_is_none(self) -> None:
        self.assertIsNone(_settings(JWT_KEY_ID="  ").JWT_KEY_ID)

    def test_verification_keys(self) -> None:
        s = _settings(JWT_VERIFICATION_KEYS={"v1": "old-secret"})
        self.assertEqual(s.JWT_VERIFICATION_KEYS["v1"].get_secret_value(), "old-secret")
        with self.assertRaises(ValidationError):
            _settings(JWT_VERIFICATION_KEYS={"v1": " "})

    def test_expiry_bounds(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(ACCESS_TOKEN_EXPIRE_MINUTES=0)
        with self.assertRaises(ValidationError):
            _settings(REFRESH_TOKEN_EXPIRE_DAYS=365)

    def test_log_level(self) -> None:
        self.assertEqual(_settings(LOG_LEVEL="debug").LOG_LEVEL, "DEBUG")
        with self.assertRaises(ValidationError):
            _settings(LOG_LEVEL="loud")


class TestLoggingConfig(unittest.TestCase):
    def test_stdout_only_by_default(self) -> None:
        config = get_logging_config(_settings())
        self.assertEqual(config["loggers"]["app"]["handlers"], ["default"])
        self.assertNotIn("file", config["handlers"])

    def test_file_handlers(self) -> None:
        config = get_logging_config(_settings(LOG_FILE="auth.log", LOG_ERROR_FILE="auth-error.log"))
        self.assertEqual(config["handlers"]["file"]["filename"], "auth.log")
        self.assertEqual(config["handlers"]["error_file"]["level"], "ERROR")
        self.assertEqual(config["loggers"]["app"]["handlers"], ["default", "file", "error_file"])

    def test_health_check_filter(self) -> None:
        health_filter = HealthCheckFilter()

        def record(name: str, msg: str) -> logging.LogRecord:
            return logging.LogRecord(name, logging.INFO, __file__, 1, msg, None, None)

        self.assertFalse(health_filter.filter(record("uvicorn.access", "GET /api/v1/health/ 200")))
        self.assertTrue(health_filter.filter(record("uvicorn.access", "POST /api/v1/login 200")))
        self.assertTrue(health_filter.filter(record("app.main", "GET /health")))


if __name__ == "__main__":
    unittest.main()
