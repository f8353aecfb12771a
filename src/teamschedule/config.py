"""Team schedule configuration loaded from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class TeamScheduleConfig(BaseSettings):
    """Team schedule configuration loaded from environment variables.

    Settings are loaded from environment variables with sensible defaults.
    For local development, create a .env file in the project root.
    """

    # Storage
    storage_dir: str = Field(
        default="data/storage",
        description="Directory holding one JSON file per storage key",
    )
    schedules_key: str = Field(
        default="universitySchedules",
        description="Storage key for the admitted schedule collection",
    )
    colors_key: str = Field(
        default="courseColors",
        description="Storage key for the course color map (owned by the UI layer)",
    )
    write_retry_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts for a storage write before giving up",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "TEAMSCHEDULE_",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Singleton pattern
_config: TeamScheduleConfig | None = None


def get_config() -> TeamScheduleConfig:
    """Get the team schedule configuration singleton.

    Returns:
        TeamScheduleConfig: Configuration instance
    """
    global _config
    if _config is None:
        _config = TeamScheduleConfig()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() re-reads env."""
    global _config
    _config = None
