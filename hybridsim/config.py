# hybridsim/config.py

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class KernelConfig(BaseSettings):
    """Configuration for the hybridsim kernel."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="HYBRIDSIM_", extra="ignore")

    # Run window
    start_time: float = 0.0
    stop_time: float = 5.0

    # State event localization (max width of the bracket around a crossing)
    accuracy: float = Field(default=0.01, gt=0)
    max_bisection_iterations: int = Field(default=100, ge=1)

    # Integration
    time_step: float = Field(default=0.01, gt=0)
    tolerance: float = Field(default=1e-4, gt=0)
    min_step: float = Field(default=1e-15, gt=0)

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"


# Global config instance
config = KernelConfig()
