"""
Frontend configuration.

Loads frontend-specific environment variables only.
Safely ignores the chat service variables sharing the same prefix.
"""

from pydantic_settings import BaseSettings
from pydantic import ConfigDict, Field


class Settings(BaseSettings):
    """
    Frontend application settings.

    Environment variables must be prefixed with:
        SAHAYAK_

    Example:
        SAHAYAK_PORT=8080
    """

    TITLE: str = "Sahayak"
    HOST: str = "0.0.0.0"
    PORT: int = Field(default=8080, gt=0, lt=65536)

    # Signs the per-browser storage cookie (app.storage.user)
    STORAGE_SECRET: str = Field(
        default="dev-secret",
        min_length=1,
    )

    model_config = ConfigDict(
        env_file=".env",
        env_prefix="SAHAYAK_",
        extra="ignore",
    )


settings = Settings()
