"""Centralized configuration for record-search using Pydantic Settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Search defaults loaded from ``RECORD_SEARCH_*`` environment variables.

    Values here only supply defaults; arguments passed to a search call
    always take precedence.
    """

    model_config = SettingsConfigDict(
        env_prefix="RECORD_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    # Search defaults
    max_results: int = Field(default=50, ge=0, description="Maximum number of ranked records returned")
    case_sensitive: bool = Field(default=False, description="Match the query without case folding")
    include_collections: bool = Field(default=True, description="Search list/tuple-of-string fields")
    include_nested: bool = Field(default=True, description="Search structure fields one level down")

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")

    # Tracing
    tracing_enabled: bool = Field(default=False, description="Wrap search calls in OpenTelemetry spans")
    service_name: str = Field(default="record-search", description="OpenTelemetry service.name resource attribute")

    def get_log_level(self) -> str:
        """Return the log level normalized for the logging module."""
        return self.log_level.strip().upper() or "INFO"
