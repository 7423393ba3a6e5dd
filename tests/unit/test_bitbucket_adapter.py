"""Tests for Bitbucket adapter."""

import pytest
import requests
from unittest.mock import Mock, patch

from export_pr.adapters.bitbucket import BitbucketAdapter, MISSING_AUTHOR
from export_pr.adapters.base import AdapterConfig
from export_pr.core import (
    PlatformType,
    PRState,
    RepoRef,
    UserFilter,
    APIError,
    DataError,
    NotFoundError,
    AccessPermissionError,
)
from utils import local_time, make_bitbucket_pr, make_bitbucket_page

PULLS_URL = "https://api.bitbucket.org/2.0/repositories/workspace/repo/pullrequests"


def make_adapter(token="", creators=""):
    return BitbucketAdapter(AdapterConfig(
        platform=PlatformType.BITBUCKET,
        base_url="https://api.bitbucket.org/2.0",
        token=token,
        user_filter=UserFilter.parse(creators),
    ))


@pytest.fixture
def repo():
    return RepoRef(owner="workspace", name="repo")


def error_response(status_code, body=None, reason="Error"):
    """Create a mock response whose raise_for_status fails."""
    response = Mock()
    response.status_code = status_code
    response.reason = reason
    if body is None:
        response.json.side_effect = ValueError("no JSON")
    else:
        response.json.return_value = body
    response.raise_for_status.side_effect = requests.HTTPError(
        f"{status_code} {reason}", response=response
    )
    return response


class TestBitbucketAdapterInit:
    """Test authentication setup."""

    def test_bearer_token(self):
        """Test plain tokens are sent as bearer tokens."""
        adapter = make_adapter(token="access-token")

        assert adapter.client.headers["Authorization"] == "Bearer access-token"
        assert adapter.client.auth is None

    def test_app_password(self):
        """Test 'user:password' tokens use basic auth."""
        adapter = make_adapter(token="someone:app:password")

        assert adapter.client.auth == ("someone", "app:password")
        assert "Authorization" not in adapter.client.headers

    def test_anonymous(self):
        """Test no credentials without a token."""
        adapter = make_adapter()

        assert adapter.client.auth is None
        assert "Authorization" not in adapter.client.headers


class TestBitbucketAdapterFetch:
    """Test pull request listing."""

    def test_fetch_single_page(self, repo):
        """Test rows built from one page."""
        adapter = make_adapter()
        with patch.object(adapter.client, "get", return_value=make_bitbucket_page([make_bitbucket_pr(5)])) as mock_get:
            rows = adapter.fetch(repo, PRState.OPEN)

        mock_get.assert_called_once_with(
            PULLS_URL,
            params={"state": "OPEN", "page": 1},
            timeout=30,
        )
        assert len(rows) == 1
        row = rows[0]
        assert row.repository == "workspace/repo"
        assert row.number == 5
        assert row.user == "alice"
        assert row.title == "PR 5"
        assert row.state == "OPEN"
        assert row.created == local_time(2024, 1, 1, 12, 0, 0)
        assert row.updated == local_time(2024, 1, 2, 8, 30, 0)
        assert row.url == "https://bitbucket.org/workspace/repo/pull-requests/5"

    def test_pagination_follows_next(self, repo):
        """Test pages are requested while a next link exists."""
        adapter = make_adapter()
        pages = [
            make_bitbucket_page([make_bitbucket_pr(1)], next_url=f"{PULLS_URL}?page=2"),
            make_bitbucket_page([make_bitbucket_pr(2)], next_url=f"{PULLS_URL}?page=3"),
            make_bitbucket_page([make_bitbucket_pr(3)]),
            make_bitbucket_page([make_bitbucket_pr(4)]),
        ]
        with patch.object(adapter.client, "get", side_effect=pages) as mock_get:
            rows = adapter.fetch(repo, PRState.ALL)

        assert mock_get.call_count == 3
        assert [c.kwargs["params"]["page"] for c in mock_get.call_args_list] == [1, 2, 3]
        assert [r.number for r in rows] == [1, 2, 3]

    @pytest.mark.parametrize("state,expected", [
        (PRState.OPEN, "OPEN"),
        (PRState.CLOSED, "CLOSED"),
        (PRState.MERGED, "MERGED"),
        (PRState.ALL, "ALL"),
    ])
    def test_state_upper_cased(self, repo, state, expected):
        """Test the state filter is always upper-cased."""
        adapter = make_adapter()
        with patch.object(adapter.client, "get", return_value=make_bitbucket_page([])) as mock_get:
            adapter.fetch(repo, state)

        assert mock_get.call_args.kwargs["params"]["state"] == expected

    def test_missing_author_is_kept(self, repo):
        """Test authorless PRs bypass the filter and show '-'."""
        adapter = make_adapter(creators="alice")
        page = make_bitbucket_page([
            make_bitbucket_pr(1, username=None),
            make_bitbucket_pr(2, username="bob"),
            make_bitbucket_pr(3, username="alice"),
        ])
        with patch.object(adapter.client, "get", return_value=page):
            rows = adapter.fetch(repo, PRState.OPEN)

        assert [(r.number, r.user) for r in rows] == [(1, MISSING_AUTHOR), (3, "alice")]
        assert MISSING_AUTHOR == "-"

    def test_missing_author_ignores_excludes(self, repo):
        """Test authorless PRs survive exclusions."""
        adapter = make_adapter(creators="!-")
        with patch.object(adapter.client, "get", return_value=make_bitbucket_page([make_bitbucket_pr(1, username=None)])):
            rows = adapter.fetch(repo, PRState.OPEN)

        assert rows[0].user == "-"

    def test_null_author(self, repo):
        """Test an explicit null author is treated as missing."""
        adapter = make_adapter()
        pr = make_bitbucket_pr(1, username=None, author=None)
        with patch.object(adapter.client, "get", return_value=make_bitbucket_page([pr])):
            rows = adapter.fetch(repo, PRState.OPEN)

        assert rows[0].user == "-"

    def test_nickname_fallback(self, repo):
        """Test accounts without username use their nickname."""
        adapter = make_adapter(creators="!nick")
        pr = make_bitbucket_pr(1, author={"nickname": "nick", "display_name": "Nick"})
        with patch.object(adapter.client, "get", return_value=make_bitbucket_page([pr])):
            rows = adapter.fetch(repo, PRState.OPEN)

        assert rows == []


class TestBitbucketAdapterErrors:
    """Test error translation."""

    def test_not_found(self, repo):
        """Test 404 becomes NotFoundError with Bitbucket's message."""
        adapter = make_adapter()
        response = error_response(404, {"type": "error", "error": {"message": "Repository not found"}})
        with patch.object(adapter.client, "get", return_value=response):
            with pytest.raises(NotFoundError, match="Repository not found"):
                adapter.fetch(repo, PRState.OPEN)

    def test_forbidden(self, repo):
        """Test 403 becomes AccessPermissionError."""
        adapter = make_adapter(token="bad")
        with patch.object(adapter.client, "get", return_value=error_response(403, reason="Forbidden")):
            with pytest.raises(AccessPermissionError) as exc_info:
                adapter.fetch(repo, PRState.OPEN)

        assert exc_info.value.status_code == 403

    def test_error_on_second_page(self, repo):
        """Test a failing page aborts the whole fetch."""
        adapter = make_adapter()
        pages = [
            make_bitbucket_page([make_bitbucket_pr(1)], next_url="next"),
            error_response(500, reason="Internal Server Error"),
        ]
        with patch.object(adapter.client, "get", side_effect=pages):
            with pytest.raises(APIError) as exc_info:
                adapter.fetch(repo, PRState.OPEN)

        assert exc_info.value.status_code == 500

    def test_network_error(self, repo):
        """Test transport failures become APIError."""
        adapter = make_adapter()
        with patch.object(adapter.client, "get", side_effect=requests.ConnectionError("refused")):
            with pytest.raises(APIError, match="Failed to reach Bitbucket"):
                adapter.fetch(repo, PRState.OPEN)

    def test_invalid_json(self, repo):
        """Test a non-JSON body is a data error."""
        adapter = make_adapter()
        response = make_bitbucket_page([])
        response.json.side_effect = ValueError("Expecting value")
        with patch.object(adapter.client, "get", return_value=response):
            with pytest.raises(DataError, match="Invalid JSON"):
                adapter.fetch(repo, PRState.OPEN)

    def test_malformed_pull_request(self, repo):
        """Test missing fields are a data error."""
        adapter = make_adapter()
        pr = make_bitbucket_pr(1)
        del pr["links"]
        with patch.object(adapter.client, "get", return_value=make_bitbucket_page([pr])):
            with pytest.raises(DataError, match="Malformed pull request"):
                adapter.fetch(repo, PRState.OPEN)

    def test_bad_timestamp(self, repo):
        """Test unparseable timestamps abort the fetch."""
        adapter = make_adapter()
        pr = make_bitbucket_pr(1, created_on="yesterday")
        with patch.object(adapter.client, "get", return_value=make_bitbucket_page([pr])):
            with pytest.raises(DataError, match="Unparseable timestamp"):
                adapter.fetch(repo, PRState.OPEN)
