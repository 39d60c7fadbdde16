"""Application settings powered by Pydantic BaseSettings."""

from typing import Annotated

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.stories.constants import (
    DEFAULT_IDS_TTL_SECONDS,
    DEFAULT_ITEM_TTL_SECONDS,
    DEFAULT_STORY_COUNT,
    MAX_STORY_COUNT,
)
from src.upstream.constants import (
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    HACKER_NEWS_BASE_URL,
)


class AppSettings(BaseSettings):
    """Centralized environment configuration.

    Every field can be set through a ``BEST_STORIES_``-prefixed environment
    variable or a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="BEST_STORIES_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Upstream
    upstream_base_url: Annotated[str, Field(min_length=1)] = HACKER_NEWS_BASE_URL
    upstream_timeout_seconds: Annotated[float, Field(ge=1.0, le=300.0)] = (
        DEFAULT_TIMEOUT_SECONDS
    )
    user_agent: Annotated[str, Field(min_length=1, max_length=500)] = (
        DEFAULT_USER_AGENT
    )

    # Cache
    ids_ttl_seconds: Annotated[float, Field(gt=0)] = DEFAULT_IDS_TTL_SECONDS
    item_ttl_seconds: Annotated[float, Field(gt=0)] = DEFAULT_ITEM_TTL_SECONDS

    # Request bounds
    default_stories: Annotated[int, Field(ge=1)] = DEFAULT_STORY_COUNT
    max_stories: Annotated[int, Field(ge=1)] = MAX_STORY_COUNT

    # API
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Observability
    log_level: str = "INFO"
    json_logs: bool = True

    def validate_story_count(self, n: int) -> str | None:
        """Check a requested story count against the configured bounds.

        Args:
            n: Requested count.

        Returns:
            An error message, or None if ``n`` is acceptable.
        """
        if n <= 0:
            return "Parameter 'n' must be greater than zero"
        if n > self.max_stories:
            return f"Parameter 'n' cannot be greater than {self.max_stories}"
        return None

    @model_validator(mode="after")
    def validate_story_bounds(self) -> "AppSettings":
        """Ensure the default story count is within the maximum."""
        if self.default_stories > self.max_stories:
            msg = (
                f"default_stories ({self.default_stories}) cannot exceed "
                f"max_stories ({self.max_stories})"
            )
            raise ValueError(msg)
        return self


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
