"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List, Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator


class DefaultsConfig(BaseModel):
    """Default settings for slot generation."""
    service_duration_minutes: int = 60
    days_forward: int = 14

    @field_validator("service_duration_minutes", "days_forward")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Ensure durations and horizons are positive."""
        if value <= 0:
            raise ValueError(f"Value must be greater than zero, got {value}")
        return value


class StoreConfig(BaseModel):
    """Document store connection settings."""
    base_url: str = ""
    api_key: str = ""
    timeout_seconds: int = 30
    mock_data_file: Optional[Path] = None  # Seed data for --mock

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("timeout_seconds must be greater than zero")
        return value


class ProviderAlias(BaseModel):
    """Short name for a stylist id."""
    name: str  # Used as alias
    provider_id: str


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: Optional[str] = None  # None: local timezone of this machine
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    providers: List[ProviderAlias] = Field(default_factory=list)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: Optional[str]) -> Optional[str]:
        """Ensure the timezone is a known IANA name."""
        if value is None:
            return value
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("providers")
    @classmethod
    def validate_providers(cls, value: List[ProviderAlias]) -> List[ProviderAlias]:
        """Ensure provider aliases are unique."""
        seen_names: set[str] = set()
        for provider in value:
            name_key = provider.name.lower()
            if name_key in seen_names:
                raise ValueError(f"Duplicate provider name detected: {provider.name}")
            seen_names.add(name_key)
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)

    def find_provider_by_name(self, name: str) -> ProviderAlias | None:
        """Find a provider by its alias."""
        for provider in self.providers:
            if provider.name.lower() == name.lower():
                return provider
        return None

    def resolve_provider(self, identifier: str) -> str:
        """
        Resolve an alias to a provider id.

        Identifiers that are not configured aliases are taken as provider
        ids as they are.
        """
        provider = self.find_provider_by_name(identifier)
        if provider:
            return provider.provider_id
        return identifier


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
