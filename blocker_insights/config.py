"""Application configuration using pydantic-settings pattern."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Blocker Insights"
    app_version: str = "0.1.0"
    app_env: str = Field(default="development")
    log_level: str = Field(default="INFO")

    # Content platform (Contentstack)
    contentstack_api_key: str | None = Field(default=None)
    contentstack_delivery_token: str | None = Field(default=None)
    contentstack_management_token: str | None = Field(default=None)
    contentstack_environment: str = Field(default="development")
    contentstack_region: str = Field(default="us")
    contentstack_timeout_seconds: float = Field(default=10.0, gt=0)

    # Anthropic (LLM for report insights)
    anthropic_api_key: str | None = Field(default=None)
    anthropic_model: str = Field(default="claude-sonnet-4-5")
    generation_temperature: float = Field(default=0.7, ge=0.0, le=1.0)
    generation_max_tokens: int = Field(default=2000, gt=0)
    generation_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout for a single generation call; expiry triggers fallback",
    )

    # Report pipeline limits
    individual_blocker_limit: int = Field(default=100, gt=0)
    team_blocker_limit: int = Field(default=500, gt=0)
    recent_report_limit: int = Field(default=10, gt=0)
    stats_blocker_limit: int = Field(default=1000, gt=0)

    # Slack (manager notifications)
    slack_bot_token: str | None = Field(default=None)

    # Scheduled team reports
    report_schedule_enabled: bool = Field(default=True)
    report_schedule_day_of_week: str = Field(default="mon")
    report_schedule_hour: int = Field(default=8, ge=0, le=23)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
