"""Central configuration for the breed-picker suggestion engine.

This module uses Pydantic Settings for validation and env management.
"""
from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class RecentBackend(str, Enum):
    """Persistence backend for recent selections."""
    MEMORY = "memory"
    JSON = "json"
    SQL = "sql"


class MatchingSettings(BaseSettings):
    """Fuzzy matcher weights (exact match is always 100)."""
    model_config = SettingsConfigDict(env_prefix="MATCHING_", extra="ignore")

    prefix_score: float = Field(default=90, gt=0, lt=100, description="Name starts with query")
    word_prefix_score: float = Field(default=80, gt=0, lt=100, description="Token is a prefix of a word")
    word_substring_score: float = Field(default=60, gt=0, lt=100, description="Token is inside a word")
    subsequence_score: float = Field(default=50, gt=0, lt=100, description="Ceiling for scattered hits")
    order_bonus: float = Field(default=10, ge=0, le=50, description="Multi-word tokens in query order")
    strong_threshold: float = Field(default=70, gt=0, lt=100, description="Scores above are strong matches")

    @model_validator(mode="after")
    def check_ordering(self) -> MatchingSettings:
        ordered = (
            0
            < self.subsequence_score
            < self.word_substring_score
            <= self.strong_threshold
            < self.word_prefix_score
            < self.prefix_score
            < 100
        )
        if not ordered:
            raise ValueError(
                "matching weights must satisfy subsequence < word_substring <= "
                "strong_threshold < word_prefix < prefix < 100"
            )
        return self


class RankingSettings(BaseSettings):
    """Suggestion ranking defaults."""
    model_config = SettingsConfigDict(env_prefix="RANKING_", extra="ignore")

    limit: int = Field(default=10, ge=0, description="0 means no cap")
    min_score: float = Field(default=5.0, ge=0.0, le=100.0)
    include_recent: bool = Field(default=True)
    recent_bonus: float = Field(default=5, ge=0, le=50)


class RecentSettings(BaseSettings):
    """Recent-selection store configuration."""
    model_config = SettingsConfigDict(env_prefix="RECENT_", extra="ignore")

    capacity: int = Field(default=5, ge=1, le=100)
    backend: RecentBackend = Field(default=RecentBackend.MEMORY)
    json_path: str = Field(default="recent_selections.json")
    db_url: str = Field(default="sqlite:///recent_selections.db")
    namespace_prefix: str = Field(default="breed-recent")


class DebounceSettings(BaseSettings):
    """Keystroke debounce configuration."""
    model_config = SettingsConfigDict(env_prefix="DEBOUNCE_", extra="ignore")

    wait_ms: int = Field(default=100, ge=0, le=10_000)


class LoggingSettings(BaseSettings):
    """Logging configuration."""
    model_config = SettingsConfigDict(env_prefix="LOG_", extra="ignore")

    level: str = Field(default="INFO")
    format: Literal["json", "text"] = Field(default="json")
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Main application settings."""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Environment = Field(default=Environment.DEVELOPMENT)
    debug: bool = Field(default=False)
    app_name: str = Field(default="Breed Picker Suggestions")
    version: str = Field(default="0.1.0")

    # Sub-configs
    matching: MatchingSettings = Field(default_factory=MatchingSettings)
    ranking: RankingSettings = Field(default_factory=RankingSettings)
    recent: RecentSettings = Field(default_factory=RecentSettings)
    debounce: DebounceSettings = Field(default_factory=DebounceSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @model_validator(mode="after")
    def check_recent_bonus(self) -> Settings:
        # Only an exact match may ever reach 100.
        best_partial = max(
            self.matching.prefix_score,
            self.matching.word_prefix_score + self.matching.order_bonus,
        )
        if best_partial + self.ranking.recent_bonus >= 100:
            raise ValueError("recent_bonus would let a non-exact match reach 100")
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()


settings = get_settings()
