"""Pytest configuration and fixtures."""

import os

import pytest

from tests.fakes.fake_supabase import FakeSupabase

os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-key")
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("SERPER_API_KEY", "test-serper-key")
os.environ["WRITEFLOW_ENV"] = "test"

DB_MODULES_USING_GET_SUPABASE = (
    "app.db.books",
    "app.db.notes",
    "app.db.ideas",
    "app.db.conversations",
    "app.db.articles",
)


@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Set up test environment variables."""
    os.environ["SUPABASE_URL"] = "https://test.supabase.co"
    os.environ["SUPABASE_SERVICE_ROLE_KEY"] = "test-key"
    os.environ["OPENAI_API_KEY"] = "test-openai-key"
    os.environ["SERPER_API_KEY"] = "test-serper-key"
    os.environ["WRITEFLOW_ENV"] = "test"


@pytest.fixture
def fake_db(monkeypatch):
    """Route every app.db module to one in-memory store."""
    db = FakeSupabase()
    for module in DB_MODULES_USING_GET_SUPABASE:
        monkeypatch.setattr(f"{module}.get_supabase", lambda: db)
    monkeypatch.setattr("app.db.profiles.get_client", lambda: db)
    return db
