"""Core functionality for export-pr."""

from .models import (
    PlatformType,
    PRState,
    RepoRef,
    ExportRow,
    UserFilter,
    RunConfig,
)

from .exceptions import (
    ExportPRError,
    ConfigurationError,
    DataError,
    APIError,
    NotFoundError,
    AccessPermissionError,
)

from .helpers import (
    parse_repository,
    parse_repositories,
    format_timestamp,
)

__all__ = [
    # Enums
    "PlatformType",
    "PRState",
    # Models
    "RepoRef",
    "ExportRow",
    "UserFilter",
    "RunConfig",
    # Exceptions
    "ExportPRError",
    "ConfigurationError",
    "DataError",
    "APIError",
    "NotFoundError",
    "AccessPermissionError",
    # Helpers
    "parse_repository",
    "parse_repositories",
    "format_timestamp",
]
