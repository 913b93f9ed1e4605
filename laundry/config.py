from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LaundrySettings(BaseSettings):
    environment: str = Field("development", description="Deployment label shown by /health")
    laundry_name: str = Field("Laundry ICP", description="Name on the shop's revenue account")
    laundry_location: str = Field("Jakarta, Indonesia")
    storage_backend: Literal["memory", "sqlite"] = Field(
        "memory",
        description="'sqlite' keeps customers, transactions and revenue across restarts.",
    )
    database_path: Path = Field(Path("data/laundry.db"))
    log_level: str = Field("INFO")
    host: str = Field("0.0.0.0")
    port: int = Field(8000, ge=1, le=65535)

    model_config = SettingsConfigDict(
        env_prefix="LAUNDRY_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> LaundrySettings:
    return LaundrySettings()
