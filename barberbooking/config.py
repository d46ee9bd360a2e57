"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List, Literal, Optional

import yaml
from pydantic import (
    BaseModel,
    Field,
    ValidationError as PydanticValidationError,
    field_validator,
    model_validator,
)

from .domain.exceptions import ConfigError


class BookingConfig(BaseModel):
    """Rules applied to incoming booking requests."""
    max_days_ahead: int = 365
    default_country_code: str = "+45"
    request_timeout_seconds: float = 10.0

    @field_validator("max_days_ahead")
    @classmethod
    def validate_horizon(cls, value: int) -> int:
        """Ensure the booking horizon is at least today."""
        if value < 0:
            raise ValueError("max_days_ahead must not be negative")
        return value

    @field_validator("default_country_code")
    @classmethod
    def validate_country_code(cls, value: str) -> str:
        """Country codes look like '+45'."""
        value = value.strip()
        if not value.startswith("+") or not value[1:].isdigit():
            raise ValueError(f"default_country_code must look like '+45', got '{value}'")
        return value

    @field_validator("request_timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("request_timeout_seconds must be greater than zero")
        return value


class NotificationConfig(BaseModel):
    """Settings for the booking notification edge function."""
    enabled: bool = True
    function_name: str = "send-booking-notification"


class Service(BaseModel):
    """Services catalog entry."""
    id: str
    name: str
    name_da: Optional[str] = None
    description: str = ""
    price: float = 0  # 0 means "contact for pricing"
    category: Literal["men", "women"] = "men"
    duration: Optional[str] = None
    featured: bool = False
    is_active: bool = True

    def display_name(self, language: str = "en") -> str:
        """Get the name in the requested language, falling back to English."""
        if language == "da" and self.name_da:
            return self.name_da
        return self.name

    def display_price(self) -> str:
        if self.price > 0:
            return f"{self.price:g} kr"
        return "Contact for pricing"


class AppConfig(BaseModel):
    """Application configuration."""
    supabase_url: str = ""
    supabase_key: str = ""
    timezone: str = "Europe/Copenhagen"
    booking: BookingConfig = Field(default_factory=BookingConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
    services: List[Service] = Field(default_factory=list)

    @field_validator("supabase_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("services")
    @classmethod
    def validate_services(cls, value: List[Service]) -> List[Service]:
        """Ensure catalog ids are unique."""
        seen_ids: set[str] = set()
        for service in value:
            if service.id in seen_ids:
                raise ValueError(f"Duplicate service id detected: {service.id}")
            seen_ids.add(service.id)
        return value

    @model_validator(mode="after")
    def validate_supabase_pair(self) -> "AppConfig":
        """URL and key are configured together or not at all."""
        if bool(self.supabase_url) != bool(self.supabase_key):
            raise ValueError("supabase_url and supabase_key must be set together")
        return self

    @property
    def has_backend(self) -> bool:
        """Whether a hosted backend is configured."""
        return bool(self.supabase_url and self.supabase_key)

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            ConfigError: If the file is missing or its content is invalid
        """
        if not config_path.exists():
            raise ConfigError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigError("Config file must contain a mapping at the root level.")

        try:
            return cls(**data)
        except PydanticValidationError as exc:
            raise ConfigError(f"Invalid configuration in {config_path}: {exc}") from exc

    def active_services(self) -> List[Service]:
        """Catalog entries shown to customers."""
        return [service for service in self.services if service.is_active]

    def find_service(self, service_id: str) -> Service | None:
        """Find an active service by its id."""
        for service in self.active_services():
            if service.id == service_id:
                return service
        return None

    def service_name(self, service_id: Optional[str], language: str = "en") -> str:
        """
        Resolve a service reference to a display name.

        Unknown or missing references fall back to a readable form of the id,
        e.g. ``beard_trim`` -> ``Beard Trim``, or ``General Cut`` when empty.
        """
        if not service_id:
            return "General Cut"

        service = self.find_service(service_id)
        if service:
            return service.display_name(language)

        return service_id.replace("_", " ").title()


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
