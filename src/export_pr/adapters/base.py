"""
Base adapter interface for code hosting platforms.
"""
from abc import ABC, abstractmethod
from importlib import metadata
from typing import List, Optional
from dataclasses import dataclass, field

from export_pr.core.models import (
    PlatformType,
    PRState,
    RepoRef,
    ExportRow,
    UserFilter,
)
from export_pr.utils import get_logger

logger = get_logger(__name__)


@dataclass
class AdapterConfig:
    """Configuration for adapter instances."""
    platform: PlatformType
    base_url: str
    token: str = ""
    timeout: int = 30
    user_filter: UserFilter = field(default_factory=UserFilter)


class BaseAdapter(ABC):
    """
    Base adapter interface for code hosting platforms.

    Each adapter owns one authenticated service client, created in
    ``__init__`` and reused for every repository of a run.
    """

    # Distribution name of the client library, reported by --version
    library: str = ""

    def __init__(self, config: AdapterConfig):
        """
        Initialize the adapter.

        Args:
            config: Adapter configuration
        """
        self.config = config
        self.logger = get_logger(f"{__name__}.{self.__class__.__name__}")
        self.logger.debug(f"Initializing {self.__class__.__name__}")

    @abstractmethod
    def fetch(self, repo: RepoRef, state: PRState) -> List[ExportRow]:
        """
        Fetch the pull requests of a repository as export rows.

        Requests whose author is rejected by the user filter are left out.

        Args:
            repo: Repository to list
            state: State filter

        Returns:
            ExportRow objects in the order the platform returns them

        Raises:
            NotFoundError: If the repository doesn't exist
            AccessPermissionError: If authentication fails
            APIError: For other API errors
            DataError: If a response can't be interpreted
        """
        pass

    @property
    def user_filter(self) -> UserFilter:
        """User filter applied to every fetched request."""
        return self.config.user_filter

    def skip_user(self, username: str) -> bool:
        """Check the user filter and log skipped authors."""
        if self.user_filter.should_skip(username):
            self.logger.debug(f"Skipping request by {username}")
            return True
        return False

    @classmethod
    def library_version(cls) -> Optional[str]:
        """Installed version of the client library, if known."""
        if not cls.library:
            return None
        try:
            return metadata.version(cls.library)
        except metadata.PackageNotFoundError:
            return None

    def __repr__(self) -> str:
        """String representation of adapter."""
        return (
            f"{self.__class__.__name__}("
            f"platform={self.config.platform.value}, "
            f"base_url={self.config.base_url})"
        )
