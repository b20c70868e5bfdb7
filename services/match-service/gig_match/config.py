from functools import lru_cache
from typing import Annotated, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DIRECTORY_URL = "http://profile-service:8000"
ORACLE_BASE_URL = "http://localhost:3000"


class MatchSettings(BaseSettings):
    """
    Everything the matching pipeline needs from the outside world.
    Built once at startup and handed to the orchestrator and its clients.
    Each field can be set from a MATCH_<FIELD> environment variable.
    """

    model_config = SettingsConfigDict(
        env_prefix="MATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    directory_url: str = DIRECTORY_URL
    http_timeout_seconds: float = Field(default=2.0, gt=0)

    oracle_enabled: bool = True
    oracle_base_url: str = ORACLE_BASE_URL
    oracle_path: str = "/api/match"
    oracle_timeout_seconds: float = Field(default=20.0, gt=0)
    oracle_max_candidates: int = Field(default=20, gt=0)
    oracle_bio_max_chars: int = Field(default=200, ge=0)

    max_distance_km: float = Field(default=30.0, gt=0)
    max_results: int = Field(default=5, gt=0)
    max_reasons: int = Field(default=3, gt=0)

    currency_symbol: str = "£"
    # Locations that never earn the fallback location bonus. Kept for parity
    # with the product's existing scoring; pending product review.
    # Comma-separated in the environment.
    excluded_bonus_locations: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["Colombia", "Ethiopia"]
    )

    log_level: str = "INFO"

    @field_validator("excluded_bonus_locations", mode="before")
    @classmethod
    def _split_locations(cls, v):
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @property
    def oracle_url(self) -> str:
        return f"{self.oracle_base_url.rstrip('/')}{self.oracle_path}"


@lru_cache()
def get_settings() -> MatchSettings:
    return MatchSettings()
