"""Root test fixtures shared across all test types.

Database and HTTP client fixtures are in tests/integration/conftest.py.
"""

import os

# Set before any app imports: disables rate limiting, points at in-memory SQLite
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("AUTH_JWT_SECRET", "test-jwt-secret-with-at-least-32-characters")
os.environ.setdefault("AUTH_URL", "http://auth.test/auth/v1")
os.environ.setdefault("SESSION_COOKIE_SECURE", "false")
os.environ["RESEND_API_KEY"] = ""

# ruff: noqa: E402 - Imports must be after env var setup
from src.bale.core.config import get_settings

# Clear settings cache to ensure test environment variables are picked up
get_settings.cache_clear()
