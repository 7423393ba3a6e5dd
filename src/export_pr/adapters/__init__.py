"""Adapter modules for code hosting platforms."""

from .base import (
    BaseAdapter,
    AdapterConfig,
)
from .factory import AdapterFactory
from .github import GitHubAdapter
from .gitlab import GitLabAdapter
from .bitbucket import BitbucketAdapter

__all__ = [
    "BaseAdapter",
    "AdapterConfig",
    "AdapterFactory",
    "GitHubAdapter",
    "GitLabAdapter",
    "BitbucketAdapter",
]
