"""Root pytest configuration.

Environment defaults must be in place before any ``libs`` module reads
settings, so they are set here rather than in ``tests/conftest.py``.
"""

import os

from dotenv import load_dotenv

# Load .env.test for local overrides (e.g. a Postgres DATABASE_URL)
env_test_path = os.path.join(os.path.dirname(__file__), ".env.test")
if os.path.exists(env_test_path):
    load_dotenv(env_test_path, override=True)

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./storefront-test.db")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("EMAIL_GATEWAY_URL", "")
