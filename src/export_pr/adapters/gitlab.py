"""
GitLab adapter for listing merge requests.
"""
from typing import Any, List

import gitlab
import requests
from gitlab.exceptions import GitlabError

from export_pr.utils import get_logger
from export_pr.core.models import PRState, RepoRef, ExportRow
from export_pr.core.helpers import format_timestamp
from export_pr.core.exceptions import error_for_status, APIError
from .base import BaseAdapter, AdapterConfig

logger = get_logger(__name__)

# GitLab calls open merge requests 'opened'
STATE_MAP = {
    PRState.OPEN: "opened",
}


class GitLabAdapter(BaseAdapter):
    """
    GitLab-specific adapter implementation.

    Uses python-gitlab, whose list iterator follows the pagination
    links of the REST API. Rate limited (429) and transient errors are
    reported, not retried.
    """

    library = "python-gitlab"

    def __init__(self, config: AdapterConfig):
        """
        Initialize GitLab adapter.

        Args:
            config: Adapter configuration; base_url is the instance root,
                e.g. https://gitlab.com
        """
        super().__init__(config)

        self.client = gitlab.Gitlab(
            url=config.base_url,
            private_token=config.token or None,
            timeout=config.timeout,
            retry_transient_errors=False,
        )

        logger.debug("GitLabAdapter initialized successfully")

    def fetch(self, repo: RepoRef, state: PRState) -> List[ExportRow]:
        """
        List merge requests of a GitLab project.

        Args:
            repo: Project path ('group/project', subgroups allowed in owner)
            state: State filter

        Returns:
            List of ExportRow objects

        Raises:
            NotFoundError: If the project doesn't exist
            APIError: For other API errors
        """
        gl_state = STATE_MAP.get(state, state.value)

        try:
            logger.info(f"Listing {gl_state} MRs in {repo}")

            project = self.client.projects.get(repo.full_name, lazy=True)

            rows = []
            for mr in project.mergerequests.list(
                state=gl_state,
                iterator=True,
                obey_rate_limit=False,
            ):
                if self.skip_user(mr.author["username"]):
                    continue
                rows.append(self._convert_gitlab_mr(repo, mr))

            logger.info(f"Found {len(rows)} merge requests in {repo}")
            return rows

        except GitlabError as e:
            raise error_for_status(
                f"Failed to list MRs of {repo}: {e.error_message}",
                e.response_code,
            )
        except requests.RequestException as e:
            raise APIError(f"Failed to reach GitLab: {e}")

    def _convert_gitlab_mr(self, repo: RepoRef, mr: Any) -> ExportRow:
        """
        Convert a python-gitlab merge request to an export row.

        The number is the project-scoped iid shown in the web UI, not the
        instance-wide id.
        """
        return ExportRow(
            repository=repo.full_name,
            number=mr.iid,
            user=mr.author["username"],
            title=mr.title,
            state=mr.state,
            created=format_timestamp(mr.created_at),
            updated=format_timestamp(mr.updated_at),
            url=mr.web_url,
        )
