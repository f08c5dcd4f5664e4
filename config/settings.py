"""Application configuration using Pydantic settings."""

import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Lattice pricer
    lattice_steps_per_year: int = Field(
        default=365,
        gt=0,
        description="Tree steps per year of expiry before clamping",
    )
    lattice_min_steps: int = Field(default=100, gt=0, description="Minimum tree steps")
    lattice_max_steps: int = Field(default=1000, gt=0, description="Maximum tree steps")

    # Volatility sweep
    sample_count: int = Field(default=30, gt=0, description="Perturbed snapshots per decision")
    vol_sweep_start: float = Field(default=0.95, gt=0, description="Volatility multiplier of the first sample")
    vol_sweep_step: float = Field(default=0.01, description="Multiplier increment between samples")
    reference_sample_index: int = Field(
        default=14,
        ge=0,
        description="Sample whose price is used for the edge",
    )
    sweep_workers: int = Field(default=1, ge=1, description="Threads used for the sweep")

    # Significance test
    significance_level: float = Field(default=0.05, gt=0, lt=1, description="p-value cutoff")
    critical_value: float = Field(default=1.96, gt=0, description="Normal critical value for the 95% CI")

    # Decision thresholds
    base_edge_threshold: float = Field(
        default=0.02,
        ge=0,
        description="Edge threshold at the reference volatility",
    )
    reference_volatility: float = Field(
        default=0.20,
        gt=0,
        description="Volatility at which the edge threshold equals base_edge_threshold",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    @model_validator(mode="after")
    def check_ranges(self) -> "Settings":
        if self.lattice_min_steps > self.lattice_max_steps:
            raise ValueError("lattice_min_steps must not exceed lattice_max_steps")
        if self.reference_sample_index >= self.sample_count:
            raise ValueError("reference_sample_index must be below sample_count")
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Application settings

    Example:
        >>> settings = get_settings()
        >>> settings.sample_count
        30
    """
    return Settings()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for an entry point.

    Args:
        level: Logging level name (default: settings.log_level)
    """
    level = level or get_settings().log_level
    logging.basicConfig(level=getattr(logging, level.upper()), format=LOG_FORMAT)
