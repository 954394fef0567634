"""Configuration management using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from grammarkit.core.constants import GrammarKitConstants


class Settings(BaseSettings):
    """Process-wide settings loaded from environment variables.

    These cover the ambient behaviour of the tool (logging, network access,
    the auxiliary bill-of-materials set, the Java launcher). Per-build values
    such as tool versions live on ``GrammarKitExtension`` instead.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GRAMMARKIT_",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # Version lookup
    latest_release_url: str = Field(
        default=GrammarKitConstants.GRAMMAR_KIT_LATEST_RELEASE_URL,
        description="URL redirecting to the latest Grammar-Kit release tag",
    )
    http_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Timeout in seconds for the latest-release lookup",
    )

    # Auxiliary bill-of-materials set (used only when no IntelliJ release is set)
    bom_coordinate: str = Field(
        default=GrammarKitConstants.BOM_COORDINATE,
        description="Coordinate added to the bom set; empty disables the set",
    )
    bom_exclude_group: str | None = Field(
        default=GrammarKitConstants.BOM_EXCLUDE_GROUP,
        description="Group excluded from the bom set",
    )
    bom_exclude_module: str | None = Field(
        default=GrammarKitConstants.BOM_EXCLUDE_MODULE,
        description="Module excluded from the bom set",
    )

    # Generator execution
    java_home: str | None = Field(
        default=None,
        description="JDK used to launch generators (falls back to PATH)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings instance loaded from environment.

    Example:
        >>> settings = get_settings()
        >>> settings.log_level
        'INFO'
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
