"""
Settings for Agri Advisor (Pydantic Settings).

Everything configurable goes through here; the rest of the code receives a
Settings instance instead of reading os.environ.

Usage:
    from agri_advisor.config import get_settings
    settings = get_settings()
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Read from environment variables / .env."""

    # --- API ---
    APP_NAME: str = "Agri Advisor"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    ALLOWED_ORIGINS: list[str] = ["*"]

    # --- Database ---
    DATABASE_URL: str = "sqlite:///./agri_advisor.db"

    # --- Geocoding (OpenCage) ---
    GEO_API_KEY: str = ""
    GEO_BASE_URL: str = "https://api.opencagedata.com"
    GEOCODER_TIMEOUT: float = 10.0

    # --- Weather (WeatherAPI.com) ---
    WEATHER_API_KEY: str = ""
    WEATHER_BASE_URL: str = "https://api.weatherapi.com"
    WEATHER_TIMEOUT: float = 10.0

    # --- LLM (Google Generative Language) ---
    GEMINI_API_KEY: str = ""
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com"
    GEMINI_MODEL: str = "gemini-1.5-flash-latest"
    LLM_TIMEOUT: float = 30.0

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    return Settings()
