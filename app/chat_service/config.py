"""
Application configuration.

Centralized environment-based settings using Pydantic v2.
"""

from typing import Optional

from pydantic_settings import BaseSettings
from pydantic import ConfigDict, Field


class Settings(BaseSettings):
    # --------------------
    # Gemini
    # --------------------
    GEMINI_API_URL: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Base URL of the generative-language REST API",
        min_length=1,
    )
    GEMINI_MODEL: str = "gemini-flash-latest"

    # No key ships with the code; it must be provisioned here or by the user.
    GEMINI_API_KEY: Optional[str] = None

    REQUEST_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0)

    # --------------------
    # Speech
    # --------------------
    SPEECH_LOCALE: str = "en-US"
    SPEECH_RATE: float = 0.9
    SPEECH_PITCH: float = 1.0
    SPEECH_TOGGLE_REVEAL_SECONDS: float = Field(default=5.0, gt=0)

    model_config = ConfigDict(
        env_file=".env",
        env_prefix="SAHAYAK_",
        extra="ignore",
    )


settings = Settings()
