"""Snippet configuration powered by ``pydantic-settings``."""

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleCloudSettings(BaseSettings):
    """Project level configuration shared by every snippet."""

    project_id: Optional[str] = Field(default=None, description="Google Cloud project identifier")
    application_name: str = Field(
        default="cloud-snippets", description="Application name reported to discovery based clients"
    )

    model_config = SettingsConfigDict(env_prefix="GOOGLE_CLOUD_", env_file=".env", extra="ignore")


class DlpSettings(BaseSettings):
    """Configuration for the Cloud DLP de-identification snippets."""

    location: str = Field(default="global", description="Processing location used in the request parent")
    info_type: str = Field(
        default="US_SOCIAL_SECURITY_NUMBER", description="Info type the inspector searches for"
    )
    surrogate_info_type: str = Field(
        default="SSN_TOKEN", description="Surrogate info type prepended to encrypted tokens"
    )
    api_endpoint: Optional[str] = Field(default=None, description="Regional DLP endpoint override")
    timeout_seconds: Optional[float] = Field(default=None, description="Per call deadline in seconds")

    model_config = SettingsConfigDict(env_prefix="DLP_", env_file=".env", extra="ignore")


class HealthcareSettings(BaseSettings):
    """Configuration for the Cloud Healthcare FHIR store snippets."""

    api_version: str = Field(default="v1", description="Healthcare API discovery version")
    timeout_seconds: float = Field(default=60.0, description="HTTP connect and read timeout")
    discovery_url: Optional[str] = Field(default=None, description="Discovery document URL override")
    policy_role: str = Field(
        default="roles/healthcare.fhirResourceReader", description="Role granted by the default policy"
    )
    policy_members: list[str] = Field(
        default_factory=lambda: ["domain:google.com"], description="Principals granted by the default policy"
    )

    model_config = SettingsConfigDict(env_prefix="HEALTHCARE_", env_file=".env", extra="ignore")


class LoggingSettings(BaseSettings):
    """Logging configuration for snippet entry points."""

    level: str = Field(
        default="info",
        description="Logging verbosity level (e.g. debug, info, warning).",
        validation_alias=AliasChoices("SNIPPETS_LOG_LEVEL", "LOG_LEVEL"),
    )
    service_name: str = Field(
        default="cloud-snippets",
        description="Identifier attached to every structured log entry.",
        validation_alias=AliasChoices("SNIPPETS_SERVICE_NAME", "SERVICE_NAME"),
    )

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


class RetrySettings(BaseSettings):
    """Opt-in retry behaviour; the default performs a single attempt."""

    attempts: int = Field(default=1, description="Total attempts including the first call")
    initial_delay: float = Field(default=0.5, description="Initial backoff delay in seconds")
    max_delay: float = Field(default=8.0, description="Upper bound for the backoff delay")

    model_config = SettingsConfigDict(env_prefix="SNIPPETS_RETRY_", env_file=".env", extra="ignore")


class Settings(BaseSettings):
    """Top-level settings namespace."""

    google_cloud: GoogleCloudSettings = Field(default_factory=GoogleCloudSettings)
    dlp: DlpSettings = Field(default_factory=DlpSettings)
    healthcare: HealthcareSettings = Field(default_factory=HealthcareSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)

    model_config = SettingsConfigDict(env_file=".env", env_nested_delimiter="__", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance for snippet use."""

    return Settings()


def resolve_settings(settings: Optional[Settings] = None) -> Settings:
    """Return ``settings`` when provided, otherwise the cached instance."""

    return settings if settings is not None else get_settings()


__all__ = [
    "GoogleCloudSettings",
    "DlpSettings",
    "HealthcareSettings",
    "LoggingSettings",
    "RetrySettings",
    "Settings",
    "get_settings",
    "resolve_settings",
]
