"""
Prompt Pages Core Configuration - Settings management via Pydantic.

Provides centralized configuration via environment variables with
sensible defaults.
"""

import logging
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Most kickstarters a single page may select.
SELECTION_CAP = 50

# Longest custom kickstarter question, matching the longest default question.
MAX_QUESTION_LENGTH = 89


class PromptPagesSettings(BaseSettings):
    """
    Prompt page engine settings.

    All settings can be configured via environment variables with the
    PROMPTPAGES_ prefix.

    Example:
        export PROMPTPAGES_ENV=production
        export PROMPTPAGES_APP_BASE_URL=https://app.example.com
        export PROMPTPAGES_KICKSTARTER_SELECTION_CAP=25
    """

    model_config = SettingsConfigDict(
        env_prefix="PROMPTPAGES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment
    env: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level when debug is off",
    )

    # Public URLs
    app_base_url: str = Field(
        default="https://app.promptreviews.app",
        description="Base URL that embed links point back to",
    )
    asset_base_url: str = Field(
        default="https://app.promptreviews.app",
        description="Host serving the emoji and branding images",
    )
    branding_url: str = Field(
        default="https://promptreviews.app",
        description="Marketing site used by the attribution link",
    )
    brand_name: str = Field(
        default="Prompt Reviews",
        description="Product name shown in attribution text",
    )

    # Kickstarters
    kickstarter_selection_cap: int = Field(
        default=SELECTION_CAP,
        ge=1,
        description="Maximum kickstarters selectable on one page",
    )
    kickstarter_max_length: int = Field(
        default=MAX_QUESTION_LENGTH,
        ge=1,
        description="Maximum characters in a custom kickstarter question",
    )

    # Embed widget defaults
    default_emoji_size: str = Field(default="sm", description="Emoji size tier")
    default_header_size: str = Field(default="md", description="Header size tier")
    default_header_color: str = Field(default="#374151", description="Header text colour")

    # AI assistance
    default_review_generator: Literal["local_stub", "openai"] = Field(
        default="local_stub",
        description="Review generator provider key",
    )
    openai_api_key: Optional[str] = Field(
        default=None,
        description="OpenAI API key for review generation",
    )
    openai_model: str = Field(
        default="gpt-4o-mini",
        description="OpenAI chat model used for review generation",
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"


@lru_cache()
def get_settings() -> PromptPagesSettings:
    """
    Get cached settings instance.

    Returns:
        PromptPagesSettings instance (cached)
    """
    return PromptPagesSettings()


def setup_logging(settings: Optional[PromptPagesSettings] = None) -> None:
    """Configure root logging from settings."""
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
