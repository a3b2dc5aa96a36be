import os
from pathlib import Path

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_database_url() -> str:
    """Get database URL, using absolute path for SQLite to avoid path resolution issues.

    SQLite is only meant for local development. Set DATABASE_URL to a
    PostgreSQL connection string anywhere data must survive a rebuild.
    """
    db_url = os.getenv("DATABASE_URL", "")
    if db_url:
        logger.info(f"Using DATABASE_URL from environment: {db_url}")
        return db_url

    db_path = Path(__file__).parent.parent.parent / "fitplan.db"
    abs_path = db_path.resolve()
    db_url = f"sqlite:///{abs_path}"
    logger.warning(
        f"⚠️ Using SQLite database (LOCAL DEV ONLY): {db_url}\n"
        "⚠️ Set DATABASE_URL environment variable to use PostgreSQL in production."
    )
    return db_url


class Settings(BaseSettings):
    database_url: str = Field(
        default_factory=get_database_url,
        validation_alias="DATABASE_URL",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="LOG_FILE")
    log_json: bool = Field(default=False, validation_alias="LOG_JSON")
    auth_secret_key: str = Field(default="", validation_alias="AUTH_SECRET_KEY")
    auth_algorithm: str = Field(default="HS256", validation_alias="AUTH_ALGORITHM")
    used_item_retention_weeks: int = Field(
        default=8,
        validation_alias="USED_ITEM_RETENTION_WEEKS",
        description="Weeks of used-item history kept per user (0 keeps everything)",
    )
    recommendation_seed: int | None = Field(
        default=None,
        validation_alias="RECOMMENDATION_SEED",
        description="Seed for candidate sampling; unset means system randomness",
    )
    recommendation_preview_size: int = Field(
        default=3,
        validation_alias="RECOMMENDATION_PREVIEW_SIZE",
        description="Number of workouts and diets returned by the recommendation preview",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid LOG_LEVEL '{value}'. Valid levels are: {', '.join(valid_levels)}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("auth_secret_key")
    @classmethod
    def validate_auth_secret_key(cls, value: str) -> str:
        """Warn when the identity provider's signing key is not configured.

        Without it every authenticated endpoint rejects requests with 401.
        """
        if not value:
            logger.warning(
                "⚠️ AUTH_SECRET_KEY is not set. Bearer tokens cannot be verified and "
                "authenticated endpoints will reject every request."
            )
        return value

    @field_validator("used_item_retention_weeks", "recommendation_preview_size")
    @classmethod
    def validate_non_negative(cls, value: int) -> int:
        """Reject negative counts."""
        if value < 0:
            raise ValueError("must be zero or positive")
        return value


settings = Settings()
