"""
Bitbucket Cloud adapter for listing pull requests.
"""
from typing import Any, Dict, List, Optional

import requests

from export_pr.utils import get_logger
from export_pr.core.models import PRState, RepoRef, ExportRow
from export_pr.core.helpers import format_timestamp
from export_pr.core.exceptions import error_for_status, APIError, DataError
from .base import BaseAdapter, AdapterConfig

logger = get_logger(__name__)

# Shown for pull requests whose author account no longer exists
MISSING_AUTHOR = "-"


class BitbucketAdapter(BaseAdapter):
    """
    Bitbucket-specific adapter implementation.

    Talks to the Bitbucket Cloud 2.0 REST API through a requests session.
    """

    library = "requests"

    def __init__(self, config: AdapterConfig):
        """
        Initialize Bitbucket adapter.

        Args:
            config: Adapter configuration. A token of the form
                'username:app_password' uses basic auth, any other
                non-empty token is sent as a bearer token.
        """
        super().__init__(config)

        self.client = requests.Session()
        self.client.headers["Accept"] = "application/json"

        if config.token:
            if ":" in config.token:
                username, password = config.token.split(":", 1)
                self.client.auth = (username, password)
            else:
                self.client.headers["Authorization"] = f"Bearer {config.token}"

        logger.debug("BitbucketAdapter initialized successfully")

    def fetch(self, repo: RepoRef, state: PRState) -> List[ExportRow]:
        """
        List pull requests of a Bitbucket repository.

        Requests page 1, 2, 3... for as long as the response carries a
        'next' link.

        Args:
            repo: Workspace and repository slug
            state: State filter, sent upper-cased

        Returns:
            List of ExportRow objects

        Raises:
            NotFoundError: If the repository doesn't exist
            APIError: For other API errors
            DataError: If a response isn't valid JSON
        """
        bb_state = state.value.upper()
        url = f"{self.config.base_url.rstrip('/')}/repositories/{repo.owner}/{repo.name}/pullrequests"

        logger.info(f"Listing {bb_state} PRs in {repo}")

        rows = []
        page = 1
        while True:
            data = self._get_page(url, bb_state, page)

            for pr in data.get("values", []):
                author = self._author_name(pr.get("author"))
                if author is not None and self.skip_user(author):
                    continue
                rows.append(self._convert_bitbucket_pr(repo, pr, author))

            if not data.get("next"):
                break
            page += 1

        logger.info(f"Found {len(rows)} pull requests in {repo}")
        return rows

    def _get_page(self, url: str, state: str, page: int) -> Dict[str, Any]:
        """Fetch one page of the pull request listing."""
        logger.debug(f"Fetching {url} page {page}")
        try:
            response = self.client.get(
                url,
                params={"state": state, "page": page},
                timeout=self.config.timeout,
            )
            response.raise_for_status()
        except requests.HTTPError as e:
            raise error_for_status(
                f"Failed to list PRs: {self._error_message(e.response)}",
                e.response.status_code if e.response is not None else None,
            )
        except requests.RequestException as e:
            raise APIError(f"Failed to reach Bitbucket: {e}")

        try:
            return response.json()
        except ValueError as e:
            raise DataError(f"Invalid JSON from {url}", details=str(e))

    @staticmethod
    def _error_message(response: Optional[requests.Response]) -> str:
        """Extract the message Bitbucket sent along with an error."""
        if response is None:
            return "no response"
        try:
            error = response.json().get("error", {})
            return error.get("message") or response.reason
        except (ValueError, AttributeError):
            return f"{response.status_code} {response.reason}"

    @staticmethod
    def _author_name(author: Optional[Dict[str, Any]]) -> Optional[str]:
        """Username of a PR author, None for deleted accounts."""
        if not author:
            return None
        return author.get("username") or author.get("nickname") or author.get("display_name")

    def _convert_bitbucket_pr(
        self,
        repo: RepoRef,
        pr: Dict[str, Any],
        author: Optional[str]
    ) -> ExportRow:
        """
        Convert a Bitbucket pull request payload to an export row.

        Args:
            repo: Repository the PR was listed from
            pr: Pull request JSON object
            author: Author name, None when the PR has no author

        Returns:
            ExportRow object
        """
        try:
            return ExportRow(
                repository=repo.full_name,
                number=pr["id"],
                user=author if author is not None else MISSING_AUTHOR,
                title=pr["title"],
                state=pr["state"],
                created=format_timestamp(pr["created_on"]),
                updated=format_timestamp(pr["updated_on"]),
                url=pr["links"]["html"]["href"],
            )
        except (KeyError, TypeError) as e:
            raise DataError(f"Malformed pull request in {repo}: missing {e}")
