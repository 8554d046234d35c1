from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from dentaldesk.adapters.sqlite.migrator import SQLiteMigrator
from dentaldesk.api.deps import Settings, get_rules, get_settings
from dentaldesk.api.main import app

SUPER_ADMIN_PASSWORD = "correct-horse-battery"


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings pointing at a migrated SQLite database under tmp_path."""
    s = Settings()
    s.data_dir = tmp_path / "data"
    s.data_dir.mkdir()
    s.db_path = str(s.data_dir / "test.db")
    s.secret_key = "test-secret-key"
    s.super_admin_password = SUPER_ADMIN_PASSWORD
    s.super_admin_password_hash = None
    s.resend_api_key = None
    s.twilio_account_sid = None
    s.twilio_auth_token = None

    SQLiteMigrator(s.db_path).run_migrations()
    return s


@pytest.fixture
def client(test_settings: Settings) -> Iterator[TestClient]:
    get_rules.cache_clear()
    app.dependency_overrides[get_settings] = lambda: test_settings
    yield TestClient(app)
    app.dependency_overrides.clear()
    get_rules.cache_clear()


@pytest.fixture
def admin_client(client: TestClient) -> TestClient:
    """Client holding a super admin session cookie."""
    response = client.post("/api/superadmin/login", json={"password": SUPER_ADMIN_PASSWORD})
    assert response.status_code == 200
    return client
