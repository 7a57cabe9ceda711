"""Shared fixtures."""

import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from leadsplit.storage import AgentDirectory, Database, ListStore
from leadsplit.website_api.config import Settings
from leadsplit.website_api.main import create_app

API_SECRET = "test-secret"
AUTH = {"X-API-Secret": API_SECRET}

AGENT_NAMES = ["Alice", "Bruno", "Chen", "Dana", "Eve"]


@pytest.fixture
def temp_data_dir():
    """Create temporary data directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def db(temp_data_dir):
    return Database(temp_data_dir / "leadsplit.db")


@pytest.fixture
def directory(db):
    return AgentDirectory(db)


@pytest.fixture
def list_store(db):
    return ListStore(db)


@pytest.fixture
def five_agents(directory):
    """Agents A..E created one second apart, in that order."""
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return [
        directory.create(
            name=name,
            email=f"{name.lower()}@example.com",
            mobile=f"55500000{i}",
            password_hash="x",
            created_at=start + timedelta(seconds=i),
        )
        for i, name in enumerate(AGENT_NAMES)
    ]


@pytest.fixture
def settings(temp_data_dir):
    return Settings(
        api_secret=API_SECRET,
        db_path=str(temp_data_dir / "api.db"),
        upload_dir=str(temp_data_dir / "uploads"),
        bcrypt_rounds=4,
    )


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def make_csv(temp_data_dir):
    """Write a CSV file from a header and rows, returning its path."""

    def _make(header, rows, name="leads.csv"):
        lines = [",".join(header)] + [",".join(str(v) for v in row) for row in rows]
        path = temp_data_dir / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _make
