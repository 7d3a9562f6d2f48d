import os
import tempfile

# Keep the app data dir (db + logs) out of the user's home during tests
os.environ.setdefault("PHOTOFIND_DATA_DIR", tempfile.mkdtemp(prefix="photofind-test-"))

import pytest

from photofind import config
from photofind.storage.sqlite_store import SQLiteStore


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    path = tmp_path / "photofind.db"
    monkeypatch.setattr(config, "DB_PATH", path)
    return path


@pytest.fixture
def store(db_path):
    return SQLiteStore()


@pytest.fixture
def client(db_path):
    from fastapi.testclient import TestClient

    from photofind.api.main import app

    with TestClient(app) as test_client:
        yield test_client
