"""
Configuration management for export-pr.
"""
import os
from pathlib import Path
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field
import yaml
from dotenv import load_dotenv

DEFAULT_CONFIG_PATH = "~/.config/export-pr/config.yaml"

PROVIDERS = ("github", "gitlab", "bitbucket")

# Conventional per-provider token variables, consulted after the settings file
PROVIDER_TOKEN_ENV = {
    "github": "GITHUB_TOKEN",
    "gitlab": "GITLAB_TOKEN",
    "bitbucket": "BITBUCKET_TOKEN",
}


@dataclass
class AppConfig:
    """Application-level configuration."""
    name: str = "export-pr"
    version: str = "0.1.0"
    provider: str = "github"
    debug: bool = False
    log_level: str = "WARNING"


@dataclass
class ProviderConfig:
    """Connection settings for one hosting platform."""
    api_base_url: str
    token: Optional[str] = None
    timeout: int = 30


@dataclass
class LoggingConfig:
    """Logging configuration."""
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[str] = None
    max_size_mb: int = 10
    backup_count: int = 5


@dataclass
class Settings:
    """Main configuration class."""
    app: AppConfig = field(default_factory=AppConfig)
    github: ProviderConfig = field(
        default_factory=lambda: ProviderConfig(api_base_url="https://api.github.com")
    )
    gitlab: ProviderConfig = field(
        default_factory=lambda: ProviderConfig(api_base_url="https://gitlab.com")
    )
    bitbucket: ProviderConfig = field(
        default_factory=lambda: ProviderConfig(api_base_url="https://api.bitbucket.org/2.0")
    )
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    # Tokens from GITHUB_TOKEN, GITLAB_TOKEN and BITBUCKET_TOKEN by provider
    env_tokens: Dict[str, str] = field(default_factory=dict, repr=False)
    epr_token: Optional[str] = field(default=None, repr=False)

    @classmethod
    def load_from_file(cls, config_path: Optional[str] = None) -> "Settings":
        """Load settings from YAML file and environment variables."""
        # Load environment variables
        load_dotenv()

        # Determine config file path
        if config_path is None:
            config_path = os.getenv("EPR_CONFIG", DEFAULT_CONFIG_PATH)

        config_path = Path(config_path).expanduser()

        # Load YAML config if it exists
        config_data = {}
        if config_path.exists():
            with open(config_path, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f) or {}

        settings = cls()

        if config_data:
            settings._update_from_dict(config_data)

        settings._update_from_env()

        return settings

    def _update_from_dict(self, data: Dict[str, Any]) -> None:
        """Update settings from dictionary."""
        if "app" in data:
            self._update_dataclass(self.app, data["app"])
        for name in PROVIDERS:
            if name in data:
                self._update_dataclass(self.provider_config(name), data[name])
        if "logging" in data:
            self._update_dataclass(self.logging, data["logging"])

    def _update_from_env(self) -> None:
        """Update settings from environment variables"""
        service = os.getenv("EPR_SERVICE", "").strip()
        if service:
            self.app.provider = service

        token = os.getenv("EPR_TOKEN", "").strip()
        if token:
            self.epr_token = token

        for name, variable in PROVIDER_TOKEN_ENV.items():
            value = os.getenv(variable, "").strip()
            if value:
                self.env_tokens[name] = value

        # Debug mode
        if os.getenv("DEBUG"):
            self.app.debug = os.getenv("DEBUG").lower() in ("true", "1", "yes")

        # Log level
        if os.getenv("LOG_LEVEL"):
            self.app.log_level = os.getenv("LOG_LEVEL")

    @staticmethod
    def _update_dataclass(instance: Any, data: Dict[str, Any]) -> None:
        """Update a dataclass instance with dictionary data."""
        for key, value in data.items():
            if hasattr(instance, key):
                setattr(instance, key, value)

    def provider_config(self, provider: str) -> ProviderConfig:
        """
        Get the connection settings of a provider.

        Args:
            provider: Provider name (github, gitlab, bitbucket)

        Raises:
            KeyError: If the provider is unknown
        """
        if provider not in PROVIDERS:
            raise KeyError(provider)
        return getattr(self, provider)

    def resolve_token(self, provider: str, explicit: Optional[str] = None) -> str:
        """
        Find the API token for a provider.

        Lookup order: explicit value, EPR_TOKEN, the provider's token in
        the settings file, the provider's conventional environment
        variable. Blank values are skipped.

        Args:
            provider: Provider name
            explicit: Token given on the command line

        Returns:
            Token string, empty when none is configured
        """
        candidates = [
            explicit,
            self.epr_token,
            self.provider_config(provider).token,
            self.env_tokens.get(provider),
        ]
        for candidate in candidates:
            if candidate and str(candidate).strip():
                return str(candidate).strip()
        return ""

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if self.app.provider not in PROVIDERS:
            errors.append(f"Provider must be one of: {list(PROVIDERS)}")

        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if str(self.app.log_level).upper() not in valid_levels:
            errors.append(f"Log level must be one of: {valid_levels}")

        for name in PROVIDERS:
            if not self.provider_config(name).api_base_url:
                errors.append(f"{name}.api_base_url must not be empty")

        return errors


# Global settings instance
_settings: Optional[Settings] = None


def get_settings(config_path: Optional[str] = None, reload: bool = False) -> Settings:
    """Get the global settings instance."""
    global _settings

    if _settings is None or reload:
        _settings = Settings.load_from_file(config_path)

    return _settings


def reload_settings(config_path: Optional[str] = None) -> Settings:
    """Reload settings from file."""
    return get_settings(config_path, reload=True)
