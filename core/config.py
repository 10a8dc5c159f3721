from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path

# Resolve the project root .env file (core/../.env)
_THIS_DIR = Path(__file__).resolve().parent          # core/
_PROJECT_ROOT = _THIS_DIR.parent                     # project root
_ENV_FILE = _PROJECT_ROOT / ".env"

class Settings(BaseSettings):
    # Server config
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8000
    ENVIRONMENT: str = "development"

    # Frontend config
    FRONTEND_URL: str = "http://localhost:3000"

    # Supabase
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""

    # Direct Postgres connection (runbooks that need DDL)
    DATABASE_URL: str = ""

    # JWT Auth
    JWT_SECRET: str = "medads-dev-secret-key-change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRATION_HOURS: int = 24

    # Redis config (for rate limiting)
    REDIS_URL: str = "redis://localhost:6379"

    # Ads API as seen by the widgets
    ADS_API_URL: str = "http://localhost:8000/api"
    ADS_API_TIMEOUT: float = 10.0

    # Click endpoint rate limit: N clicks per window (seconds) per client
    ADS_CLICK_RATE_LIMIT: int = 30
    ADS_CLICK_RATE_WINDOW: int = 60

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()
