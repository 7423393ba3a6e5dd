"""
Core data models for export-pr.
"""
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Tuple, Union
from enum import Enum

from export_pr.utils import get_logger

logger = get_logger(__name__)


class PlatformType(Enum):
    """Supported code hosting platforms."""
    GITHUB = "github"
    GITLAB = "gitlab"
    BITBUCKET = "bitbucket"


class PRState(Enum):
    """Pull request state filters accepted on the command line."""
    OPEN = "open"
    CLOSED = "closed"
    ALL = "all"
    MERGED = "merged"


@dataclass(frozen=True)
class RepoRef:
    """
    Reference to a hosted repository.

    Attributes:
        owner: Account, group or workspace owning the repository
            (may contain '/' for GitLab subgroups)
        name: Repository name
    """
    owner: str
    name: str

    @property
    def full_name(self) -> str:
        """Repository in 'owner/name' form."""
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name


@dataclass(frozen=True)
class ExportRow:
    """
    One exported pull/merge request.

    Attributes:
        repository: Repository the request belongs to ('owner/name')
        number: Provider-native request number (GitHub number,
            GitLab iid, Bitbucket id)
        user: Author name
        title: Request title
        state: Provider state string
        created: Formatted creation time
        updated: Formatted last update time
        url: Link to the request in the web UI
    """
    repository: str
    number: int
    user: str
    title: str
    state: str
    created: str
    updated: str
    url: str

    HEADER = (
        "Repository",
        "Number",
        "User",
        "Title",
        "State",
        "Created",
        "Updated",
        "URL",
    )

    @classmethod
    def header(cls, include_repository: bool = True) -> List[str]:
        """Column names, optionally without the Repository column."""
        columns = list(cls.HEADER)
        return columns if include_repository else columns[1:]

    def as_list(self, include_repository: bool = True) -> List[Union[str, int]]:
        """Row values in column order."""
        values = [
            self.repository,
            self.number,
            self.user,
            self.title,
            self.state,
            self.created,
            self.updated,
            self.url,
        ]
        return values if include_repository else values[1:]


@dataclass(frozen=True)
class UserFilter:
    """
    Author filter built from the --creator option.

    A user is skipped when listed in ``exclude_users``, or when
    ``include_users`` is non-empty and does not list them. Exclusion
    is checked first, so it wins when a user appears in both sets.
    """
    exclude_users: FrozenSet[str] = field(default_factory=frozenset)
    include_users: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def from_creators(cls, creators: Iterable[str]) -> "UserFilter":
        """
        Build a filter from creator entries.

        Args:
            creators: Usernames; a leading '!' marks an exclusion

        Returns:
            UserFilter instance
        """
        excludes = set()
        includes = set()
        for entry in creators:
            entry = entry.strip()
            if not entry:
                continue
            if entry.startswith("!"):
                excludes.add(entry[1:])
            else:
                includes.add(entry)

        logger.debug(f"User filter: exclude={sorted(excludes)}, include={sorted(includes)}")
        return cls(exclude_users=frozenset(excludes), include_users=frozenset(includes))

    @classmethod
    def parse(cls, value: str) -> "UserFilter":
        """Build a filter from a comma-separated --creator value."""
        return cls.from_creators(value.split(",") if value else [])

    def should_skip(self, username: str) -> bool:
        """Check whether requests by this user are left out."""
        if username in self.exclude_users:
            return True
        return bool(self.include_users) and username not in self.include_users

    @property
    def is_empty(self) -> bool:
        """True when the filter lets every user through."""
        return not self.exclude_users and not self.include_users


@dataclass(frozen=True)
class RunConfig:
    """Everything a single export run needs, resolved once at startup."""
    provider: PlatformType
    state: PRState
    token: str
    user_filter: UserFilter
    repositories: Tuple[RepoRef, ...]

    @property
    def include_repository(self) -> bool:
        """Repository column is only emitted for multi-repository runs."""
        return len(self.repositories) > 1
