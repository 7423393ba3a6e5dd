"""
Utility functions for testing.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from unittest.mock import Mock


def local_time(*args) -> str:
    """
    Expected display form of a UTC timestamp.

    Args:
        *args: datetime fields (year, month, day, ...)

    Returns:
        Local time rendered with %x %X
    """
    return datetime(*args, tzinfo=timezone.utc).astimezone().strftime("%x %X")


def make_github_pr(
    number: int = 1,
    login: str = "alice",
    title: str = "Test PR",
    state: str = "open",
    merged_at: Optional[datetime] = None,
) -> Mock:
    """Create a mock PyGithub pull request."""
    mock_pr = Mock()
    mock_pr.number = number
    mock_pr.title = title
    mock_pr.state = state
    mock_pr.created_at = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
    mock_pr.updated_at = datetime(2024, 1, 2, 8, 30, 0, tzinfo=timezone.utc)
    mock_pr.html_url = f"https://github.com/owner/repo/pull/{number}"
    mock_pr.merged_at = merged_at
    mock_pr.user = Mock()
    mock_pr.user.login = login
    return mock_pr


def make_github_repo(*pages: List[Mock]) -> Mock:
    """
    Create a mock PyGithub repository whose PR listing returns pages.

    Args:
        *pages: PR lists returned by successive get_page calls

    Returns:
        Mock repository
    """
    mock_repo = Mock()
    mock_repo.get_pulls.return_value.get_page.side_effect = list(pages)
    return mock_repo


def make_gitlab_mr(iid: int = 1, username: str = "alice", **kwargs) -> Mock:
    """Create a mock python-gitlab merge request."""
    mock_mr = Mock()
    mock_mr.iid = iid
    mock_mr.id = 1000 + iid
    mock_mr.author = {"username": username, "name": username.title()}
    mock_mr.title = kwargs.get("title", f"MR {iid}")
    mock_mr.state = kwargs.get("state", "opened")
    mock_mr.created_at = kwargs.get("created_at", "2024-01-01T12:00:00.000Z")
    mock_mr.updated_at = kwargs.get("updated_at", "2024-01-02T08:30:00.000Z")
    mock_mr.web_url = f"https://gitlab.com/group/project/-/merge_requests/{iid}"
    return mock_mr


def make_bitbucket_pr(pr_id: int = 1, username: Optional[str] = "alice", **kwargs) -> Dict[str, Any]:
    """
    Create a Bitbucket 2.0 pull request payload.

    Args:
        pr_id: Pull request id
        username: Author username; None for a PR without author
        **kwargs: Override default values

    Returns:
        Dictionary with PR data
    """
    data = {
        "id": pr_id,
        "title": f"PR {pr_id}",
        "state": "OPEN",
        "created_on": "2024-01-01T12:00:00.000000+00:00",
        "updated_on": "2024-01-02T08:30:00.000000+00:00",
        "links": {
            "html": {"href": f"https://bitbucket.org/workspace/repo/pull-requests/{pr_id}"},
        },
    }
    if username is not None:
        data["author"] = {"username": username, "display_name": username.title()}
    data.update(kwargs)
    return data


def make_bitbucket_page(values: List[Dict[str, Any]], next_url: Optional[str] = None) -> Mock:
    """Create a mock requests response carrying one page of PRs."""
    body = {"values": values, "pagelen": 10}
    if next_url:
        body["next"] = next_url
    response = Mock()
    response.status_code = 200
    response.json.return_value = body
    response.raise_for_status.return_value = None
    return response
