from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional

class Settings(BaseSettings):
    PROJECT_NAME: str = "Recipe Sharing API"
    ROOT_PATH: str = ""
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"  # development, testing, production
    SECRET_KEY: str = "your-super-secret-key"  # Default for dev, override in prod
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    ALGORITHM: str = "HS256"

    FIRST_SUPERUSER_USERNAME: str = "admin"
    FIRST_SUPERUSER_EMAIL: str = "admin@example.com"
    FIRST_SUPERUSER_PASSWORD: str = "admin123"

    # Database
    DATABASE_URL: str = "sqlite:///./recipes.db"

    # Logging
    LOGGING_CONFIG: str = "logging.ini"

    # Password reset
    RESET_CODE_EXPIRE_MINUTES: int = 60
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    EMAIL_FROM: str = "noreply@example.com"

    # Rate limits for unauthenticated endpoints
    AUTH_RATE_LIMIT: str = "10/minute"

    # CORS
    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000"
    ]

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env")

settings = Settings()
