"""
Shared pytest fixtures for the SiteDesk test suite.

Every test gets its own data directory (SQLite file included) and a fresh
workspace registry, so no state leaks between tests.
"""
import os
import base64
import tempfile
import pytest

# Import-time data dir for app.py's module-level create_app(); each test
# then repoints paths.DATA_DIR at its own tmp dir.
os.environ.setdefault("SITEDESK_DATA_DIR", tempfile.mkdtemp(prefix="sitedesk-test-"))

from sitedesk.core import paths  # noqa: E402
from sitedesk.core.workspace import get_workspace, reset_workspaces  # noqa: E402


# ── Temp data directory (per-test isolation) ──────────────────────────────────

@pytest.fixture(autouse=True)
def temp_data_dir(tmp_path, monkeypatch):
    """Redirect the data dir to an isolated tmp directory."""
    data = str(tmp_path / "data")
    os.makedirs(data, exist_ok=True)
    monkeypatch.setattr(paths, "DATA_DIR", data)
    monkeypatch.setenv("SITEDESK_STORAGE_BACKEND", "sqlite")
    monkeypatch.delenv("SITEDESK_STORAGE_QUOTA_BYTES", raising=False)
    monkeypatch.delenv("SITEDESK_POLL_INTERVAL_MS", raising=False)
    reset_workspaces()
    yield data
    reset_workspaces()


@pytest.fixture
def memory_backend(monkeypatch):
    monkeypatch.setenv("SITEDESK_STORAGE_BACKEND", "memory")
    reset_workspaces()


@pytest.fixture
def ws():
    """The default workspace on the configured backend."""
    return get_workspace("default")


# ── Flask test client ─────────────────────────────────────────────────────────

def _basic_auth_header(user="sitedesk", pw="changeme"):
    creds = base64.b64encode(f"{user}:{pw}".encode()).decode()
    return {"Authorization": f"Basic {creds}"}


class AuthenticatedClient:
    """Wraps Flask test client to add Basic Auth (and tab/workspace) headers to every request."""
    def __init__(self, client, headers):
        self._client = client
        self._headers = headers

    def for_tab(self, tab_id, workspace_id=None):
        """Same client, identifying as another tab (optionally another workspace)."""
        headers = dict(self._headers, **{"X-Tab-Id": tab_id})
        if workspace_id:
            headers["X-Workspace-Id"] = workspace_id
        return AuthenticatedClient(self._client, headers)

    def _send(self, method, *args, **kwargs):
        headers = dict(self._headers)
        headers.update(kwargs.pop("headers", {}) or {})
        return getattr(self._client, method)(*args, headers=headers, **kwargs)

    def get(self, *args, **kwargs):
        return self._send("get", *args, **kwargs)

    def post(self, *args, **kwargs):
        return self._send("post", *args, **kwargs)

    def put(self, *args, **kwargs):
        return self._send("put", *args, **kwargs)

    def delete(self, *args, **kwargs):
        return self._send("delete", *args, **kwargs)


@pytest.fixture
def app(temp_data_dir, monkeypatch):
    """Create Flask app configured for testing."""
    monkeypatch.setenv("DASH_USER", "sitedesk")
    monkeypatch.setenv("DASH_PASS", "changeme")

    from app import create_app
    application = create_app()
    application.config["TESTING"] = True
    return application


@pytest.fixture
def client(app):
    """Authenticated Flask test client (HTTP Basic Auth on every request)."""
    with app.test_client() as c:
        yield AuthenticatedClient(c, _basic_auth_header())


@pytest.fixture
def anon_client(app):
    """Unauthenticated test client."""
    with app.test_client() as c:
        yield c


# ── Data helpers ──────────────────────────────────────────────────────────────

TINY_PNG = ("data:image/png;base64,"
            "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg==")


def _project_form(name="Lakeshire", **overrides):
    form = {
        "projectName": name,
        "address": "14 Lake Road, Pune",
        "isContractor": "no",
        "plannedStartDate": "2025-01-01",
        "plannedEndDate": "2025-12-31",
        "company": "ABC Construction Ltd",
        "projectManager": "John Doe",
    }
    form.update(overrides)
    return form


@pytest.fixture
def project_form():
    """Factory for a valid create-project form: project_form("Name", company=...)."""
    return _project_form


@pytest.fixture
def tiny_png():
    return TINY_PNG
