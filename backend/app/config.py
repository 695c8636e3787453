"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = "sqlite:///./workout_planner.db"
    DATABASE_ECHO: bool = False

    # Identity provider (Auth0 tenant)
    AUTH_ISSUER: str = ""  # e.g. https://your-tenant.auth0.com/
    AUTH_AUDIENCE: str = "https://api.workoutplanner.local"
    AUTH_JWKS_URL: Optional[str] = None
    AUTH_JWKS_CACHE_SECONDS: int = 60 * 60

    # JWT verification. RS256 verifies provider tokens against the JWKS,
    # HS256 verifies locally signed development tokens.
    JWT_ALGORITHM: str = "RS256"
    JWT_SECRET_KEY: str = "your-secret-key-change-in-production"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Rate limiting (fixed window per client identity)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_REQUESTS: int = 120
    RATE_LIMIT_WINDOW_SECONDS: int = 60

    # Pagination
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    # Frontend URL for CORS
    FRONTEND_URL: str = "http://localhost:3000"

    LOG_LEVEL: str = "INFO"

    # Load the default exercise catalog into an empty table on startup
    SEED_EXERCISES: bool = True

    @property
    def jwks_url(self) -> str:
        if self.AUTH_JWKS_URL:
            return self.AUTH_JWKS_URL
        issuer = self.AUTH_ISSUER if self.AUTH_ISSUER.endswith("/") else f"{self.AUTH_ISSUER}/"
        return f"{issuer}.well-known/jwks.json"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Create a global settings instance for direct import
settings = get_settings()
