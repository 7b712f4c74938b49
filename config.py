"""
Configuration management using environment variables.

Loads environment variables from .env and .env.local files.
.env.local takes precedence over .env for local development overrides.
"""

from pathlib import Path
from dotenv import load_dotenv
import os

# Get the project root directory
PROJECT_ROOT = Path(__file__).parent

# Load .env file first (base configuration)
env_file = PROJECT_ROOT / ".env"
if env_file.exists():
    load_dotenv(env_file)

# Load .env.local file second (local overrides, takes precedence)
env_local_file = PROJECT_ROOT / ".env.local"
if env_local_file.exists():
    load_dotenv(env_local_file, override=True)


class Settings:
    """
    Application settings loaded from environment variables.

    Access settings like: settings.DEFAULT_CITY
    """

    # Database configuration (can be overridden via env vars)
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        f"sqlite:///{PROJECT_ROOT / 'data' / 'hushmap.db'}"
    )

    # Fill an empty database with the sample cities on startup
    SEED_DATABASE: bool = os.getenv("SEED_DATABASE", "True").lower() == "true"

    # Application settings
    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    CORS_ORIGINS: list = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    ]

    # Token verification (tokens are issued elsewhere)
    SECRET_KEY: str = os.getenv("SECRET_KEY", "change-this-secret-key-in-production")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")

    # Noise data settings
    DEFAULT_CITY: str = os.getenv("DEFAULT_CITY", "coimbatore")
    REPORT_SEARCH_RADIUS_KM: float = float(os.getenv("REPORT_SEARCH_RADIUS_KM", "5"))
    ZONE_SEARCH_RADIUS_KM: float = float(os.getenv("ZONE_SEARCH_RADIUS_KM", "10"))


# Create a settings instance
settings = Settings()
