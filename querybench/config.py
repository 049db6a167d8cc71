"""
Application settings.

Values come from environment variables prefixed with ``QUERYBENCH_`` (or a
local ``.env`` file). Attribute names stay upper-case so call sites read
``settings.POSTGRES_HOST``.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Harness settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_prefix="QUERYBENCH_",
        env_file=".env",
        extra="ignore",
    )

    # Postgres (benchmark target)
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DATABASE: str = "querybench"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_CONNECT_TIMEOUT: float = 60.0
    POSTGRES_COMMAND_TIMEOUT: Optional[float] = None

    # Run loop
    BENCH_WARMUP_ITERATIONS: int = Field(0, ge=0)
    BENCH_INCLUDE_PAYLOAD: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_FILE: Optional[str] = None
    APP_DEBUG: bool = False

    @property
    def postgres_dsn(self) -> str:
        """DSN without the password, for log lines."""
        return (
            f"postgresql://{self.POSTGRES_USER}@{self.POSTGRES_HOST}:"
            f"{self.POSTGRES_PORT}/{self.POSTGRES_DATABASE}"
        )


settings = Settings()
