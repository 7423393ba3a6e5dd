"""
Shared test fixtures and configuration for pytest.
This file is automatically discovered by pytest.
"""

import pytest

from export_pr.config import reload_settings
from export_pr.core import RepoRef, ExportRow, UserFilter

ENV_VARS = (
    "EPR_SERVICE",
    "EPR_TOKEN",
    "EPR_CONFIG",
    "GITHUB_TOKEN",
    "GITLAB_TOKEN",
    "BITBUCKET_TOKEN",
    "DEBUG",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch, tmp_path):
    """Give every test settings untouched by the developer's environment."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("EPR_CONFIG", str(tmp_path / "absent.yaml"))
    monkeypatch.setattr("export_pr.config.settings.load_dotenv", lambda *a, **kw: False)

    yield reload_settings()

    reload_settings()


@pytest.fixture
def repo_ref():
    """Create a sample RepoRef for testing."""
    return RepoRef(owner="owner", name="repo")


@pytest.fixture
def sample_row():
    """Create a sample ExportRow for testing."""
    return ExportRow(
        repository="owner/repo",
        number=42,
        user="alice",
        title="Add feature, with comma",
        state="open",
        created="01/02/24 10:00:00",
        updated="01/03/24 11:30:00",
        url="https://github.com/owner/repo/pull/42",
    )


@pytest.fixture
def exclude_bob():
    """User filter dropping bob."""
    return UserFilter(exclude_users=frozenset({"bob"}))


@pytest.fixture
def only_alice():
    """User filter keeping only alice."""
    return UserFilter(include_users=frozenset({"alice"}))


# Pytest configuration hooks
def pytest_configure(config):
    """Configure pytest with custom settings."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers automatically."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
