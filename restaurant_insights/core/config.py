"""
Application Configuration

Loads environment variables and provides typed settings
for the application. Uses python-dotenv to load from .env file.

The pipelines never read the environment themselves: the route layer
builds a NarrativeConfig from these values and passes it in.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from restaurant_insights.core.errors import ConfigurationError

# Load .env file from the project root
_env_path = Path(__file__).resolve().parent.parent.parent / ".env"
load_dotenv(dotenv_path=_env_path)

# --- App Settings ---
PROJECT_NAME = "Restaurant Insights"

# Comma-separated list; "*" allows any origin
CORS_ALLOW_ORIGINS: list[str] = [
    origin.strip()
    for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")
    if origin.strip()
]

# --- Gemini (narrative analysis) ---
GOOGLE_GEMINI_API_KEY: str = os.getenv("GOOGLE_GEMINI_API_KEY", "")
GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-1.5-pro")
GEMINI_API_BASE_URL: str = os.getenv(
    "GEMINI_API_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
)
GEMINI_TIMEOUT_SECONDS: float = float(os.getenv("GEMINI_TIMEOUT_SECONDS", "60"))


class NarrativeConfig(BaseModel):
    """Settings for the external text-generation call."""

    api_key: str = ""
    model: str = "gemini-1.5-pro"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    timeout_seconds: float = Field(default=60.0, gt=0)
    temperature: float = 0.3
    top_k: int = 40
    top_p: float = 0.8
    max_output_tokens: int = 4096

    def require_api_key(self) -> str:
        """Return the API key, or raise ConfigurationError if it is empty."""
        if not self.api_key:
            raise ConfigurationError("GOOGLE_GEMINI_API_KEY not configured")
        return self.api_key


def is_gemini_configured() -> bool:
    """Check if the Gemini API key is available without raising exceptions."""
    return bool(GOOGLE_GEMINI_API_KEY)


def get_narrative_config() -> NarrativeConfig:
    """
    Build the NarrativeConfig from the loaded environment.

    Used as a FastAPI dependency so tests can override it with
    app.dependency_overrides. Does not validate the API key: the
    pipelines check it first thing so the failure lands in the
    regular error envelope.
    """
    return NarrativeConfig(
        api_key=GOOGLE_GEMINI_API_KEY,
        model=GEMINI_MODEL,
        base_url=GEMINI_API_BASE_URL,
        timeout_seconds=GEMINI_TIMEOUT_SECONDS,
    )
