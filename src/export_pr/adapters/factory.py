"""
Factory for creating platform-specific adapters.
"""
from typing import Dict, Optional, Type, Union

from export_pr.utils import get_logger
from export_pr.config import get_settings
from export_pr.core.models import PlatformType, UserFilter
from export_pr.core.exceptions import ConfigurationError
from .base import BaseAdapter, AdapterConfig

logger = get_logger(__name__)


class AdapterFactory:
    """Factory for creating platform adapters."""

    _adapters: Dict[PlatformType, Type[BaseAdapter]] = {}  # Registry of available adapters

    @classmethod
    def register_adapter(cls, platform: PlatformType, adapter_class: type):
        """
        Register an adapter class for a platform.

        Args:
            platform: Platform type
            adapter_class: Adapter class to register
        """
        cls._adapters[platform] = adapter_class
        logger.debug(f"Registered adapter for {platform.value}: {adapter_class.__name__}")

    @classmethod
    def resolve_platform(cls, platform: Union[PlatformType, str]) -> PlatformType:
        """
        Turn a provider name into a registered PlatformType.

        Raises:
            ConfigurationError: If the provider is unknown or has no adapter
        """
        if not isinstance(platform, PlatformType):
            try:
                platform = PlatformType(str(platform).strip().lower())
            except ValueError:
                available = ", ".join(cls.list_available_platforms())
                raise ConfigurationError(
                    f"Unknown provider: '{platform}'. "
                    f"Available providers: {available}"
                )

        if platform not in cls._adapters:
            available = ", ".join(cls.list_available_platforms())
            raise ConfigurationError(
                f"Unsupported provider: {platform.value}. "
                f"Available providers: {available}"
            )
        return platform

    @classmethod
    def create_adapter(
        cls,
        platform: Union[PlatformType, str],
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        user_filter: Optional[UserFilter] = None,
        **kwargs
    ) -> BaseAdapter:
        """
        Create an adapter instance for the specified platform.

        Args:
            platform: Platform type or provider name
            token: Authentication token (resolved from settings if not provided)
            base_url: Platform base URL (uses settings if not provided)
            user_filter: Author filter applied while fetching
            **kwargs: Additional configuration options (timeout)

        Returns:
            Configured adapter instance

        Raises:
            ConfigurationError: If the platform is not supported
        """
        platform = cls.resolve_platform(platform)

        settings = get_settings()
        provider_settings = settings.provider_config(platform.value)

        if base_url is None:
            base_url = provider_settings.api_base_url

        if token is None:
            token = settings.resolve_token(platform.value)

        if not token:
            logger.debug(f"No token for {platform.value}, using anonymous access")

        config = AdapterConfig(
            platform=platform,
            base_url=base_url,
            token=token,
            timeout=kwargs.get('timeout', provider_settings.timeout),
            user_filter=user_filter or UserFilter(),
        )

        adapter_class = cls._adapters[platform]
        adapter = adapter_class(config)

        logger.info(f"Created {platform.value} adapter")
        return adapter

    @classmethod
    def list_available_platforms(cls) -> list[str]:
        """Get list of available platforms."""
        return [platform.value for platform in cls._adapters.keys()]

    @classmethod
    def library_versions(cls) -> Dict[str, Optional[str]]:
        """Client library versions of the registered adapters."""
        return {
            adapter.library: adapter.library_version()
            for adapter in cls._adapters.values()
            if adapter.library
        }


def _auto_register_adapters():
    """Auto-register available adapters."""
    from .github import GitHubAdapter
    from .gitlab import GitLabAdapter
    from .bitbucket import BitbucketAdapter

    AdapterFactory.register_adapter(PlatformType.GITHUB, GitHubAdapter)
    AdapterFactory.register_adapter(PlatformType.GITLAB, GitLabAdapter)
    AdapterFactory.register_adapter(PlatformType.BITBUCKET, BitbucketAdapter)


# Register adapters on module import
_auto_register_adapters()
