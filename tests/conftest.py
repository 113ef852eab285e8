"""Pytest configuration and fixtures."""

import os

import pytest

# Settings are read at import time by some modules
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-key")
os.environ.setdefault("ACADEMY_ENV", "test")


@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Set up test environment variables."""
    os.environ["SUPABASE_URL"] = "https://test.supabase.co"
    os.environ["SUPABASE_SERVICE_ROLE_KEY"] = "test-key"
    os.environ["ACADEMY_ENV"] = "test"
    os.environ.pop("CRON_SECRET", None)
    os.environ.pop("LOCAL_CONTENT_PATH", None)
    os.environ.pop("GITHUB_TOKEN", None)
