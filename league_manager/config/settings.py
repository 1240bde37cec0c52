import logging
from typing import List, Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_INITIAL_TEAMS: List[str] = [
    "青森A60",
    "青森B60",
    "八戸A60",
    "八戸B60",
    "七戸60",
    "BonSagesse",
]


class LeagueSettings(BaseSettings):
    """League settings loaded from environment variables or .env file."""

    # Storage Configuration
    storage_path: str = Field(
        "league_manager_data.json",
        description="JSON file holding the persisted {teams, matches} blob.",
    )

    # Roster Limits
    min_teams: int = Field(2, ge=2, description="Teams may not be removed below this.")
    max_teams: int = Field(9, ge=2, description="Teams may not be added above this.")
    initial_teams: List[str] = Field(
        default_factory=lambda: list(DEFAULT_INITIAL_TEAMS),
        description="Roster used for a fresh league and by 'reset order'.",
    )

    # Logging Configuration
    log_level: str = Field(
        "INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."
    )
    log_file: Optional[str] = Field(
        None, description="Optional path of a rotating log file."
    )

    model_config = SettingsConfigDict(
        env_prefix="LEAGUE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def check_team_bounds(self) -> "LeagueSettings":
        if self.min_teams > self.max_teams:
            raise ValueError(
                f"min_teams ({self.min_teams}) must not exceed max_teams ({self.max_teams})"
            )
        return self


def load_settings() -> LeagueSettings:
    """Loads and validates league settings."""
    try:
        settings = LeagueSettings()
        log_level_upper = settings.log_level.upper()
        # Validate log_level even if loaded from .env
        if log_level_upper not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            logging.warning(
                f"Invalid LOG_LEVEL '{settings.log_level}' found in .env or default. Using INFO."
            )
            settings.log_level = "INFO"
        else:
            settings.log_level = log_level_upper
        return settings
    except Exception as e:
        logging.exception(f"Error loading league settings: {e}")
        raise SystemExit("Failed to load league settings. Exiting.")


settings: LeagueSettings = load_settings()
