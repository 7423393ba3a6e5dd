"""
GitHub adapter for listing pull requests.
"""
from typing import List, Tuple

import requests
from github import Auth, Github, GithubException
from github.PullRequest import PullRequest as GHPullRequest

from export_pr.utils import get_logger
from export_pr.core.models import PRState, RepoRef, ExportRow
from export_pr.core.helpers import format_timestamp
from export_pr.core.exceptions import error_for_status, APIError
from .base import BaseAdapter, AdapterConfig

logger = get_logger(__name__)


class GitHubAdapter(BaseAdapter):
    """
    GitHub-specific adapter implementation.

    Uses PyGithub library to interact with GitHub's REST API.
    """

    library = "PyGithub"

    def __init__(self, config: AdapterConfig):
        """
        Initialize GitHub adapter.

        Args:
            config: Adapter configuration, token may be empty for public repos
        """
        super().__init__(config)

        self.client = Github(
            auth=Auth.Token(config.token) if config.token else None,
            base_url=config.base_url,
            timeout=config.timeout,
            retry=None,
        )

        logger.debug("GitHubAdapter initialized successfully")

    def fetch(self, repo: RepoRef, state: PRState) -> List[ExportRow]:
        """
        List pull requests of a GitHub repository.

        Pages are requested one after another until GitHub returns an
        empty page.

        Args:
            repo: Repository to list
            state: State filter

        Returns:
            List of ExportRow objects

        Raises:
            NotFoundError: If the repository doesn't exist
            APIError: For other API errors
        """
        gh_state, merged_only = self._map_state(state)

        try:
            logger.info(f"Listing {state.value} PRs in {repo}")

            gh_repo = self.client.get_repo(repo.full_name)
            pulls = gh_repo.get_pulls(state=gh_state)

            rows = []
            page = 0
            while True:
                items = pulls.get_page(page)
                if not items:
                    break

                logger.debug(f"Page {page} of {repo}: {len(items)} PRs")
                for gh_pr in items:
                    if merged_only and gh_pr.merged_at is None:
                        continue
                    if self.skip_user(gh_pr.user.login):
                        continue
                    rows.append(self._convert_github_pr(repo, gh_pr))
                page += 1

            logger.info(f"Found {len(rows)} pull requests in {repo}")
            return rows

        except GithubException as e:
            raise error_for_status(
                f"Failed to list PRs of {repo}: {self._error_message(e)}",
                e.status,
            )
        except requests.RequestException as e:
            raise APIError(f"Failed to reach GitHub: {e}")

    @staticmethod
    def _map_state(state: PRState) -> Tuple[str, bool]:
        """
        Map a state filter to GitHub's list state.

        GitHub can't list merged PRs directly, so 'merged' lists closed
        PRs and keeps the merged ones.

        Returns:
            Tuple of (GitHub state, merged-only flag)
        """
        if state == PRState.MERGED:
            return "closed", True
        return state.value, False

    @staticmethod
    def _error_message(e: GithubException) -> str:
        """Extract the message GitHub sent along with an error."""
        data = getattr(e, 'data', None)
        if isinstance(data, dict):
            return data.get('message', str(e))
        return str(e)

    def _convert_github_pr(self, repo: RepoRef, gh_pr: GHPullRequest) -> ExportRow:
        """
        Convert GitHub PR object to an export row.

        Args:
            repo: Repository the PR was listed from
            gh_pr: GitHub pull request object

        Returns:
            ExportRow object
        """
        return ExportRow(
            repository=repo.full_name,
            number=gh_pr.number,
            user=gh_pr.user.login,
            title=gh_pr.title,
            state=gh_pr.state,
            created=format_timestamp(gh_pr.created_at),
            updated=format_timestamp(gh_pr.updated_at),
            url=gh_pr.html_url,
        )
