"""Application configuration."""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    
    # Database
    DATABASE_URL: str = "postgresql+asyncpg://leadgen:leadgen123@db:5432/leadgen_admin"
    
    # API
    API_PREFIX: str = "/api"
    CORS_ORIGINS: List[str] = ["*"]
    
    # Integrations
    # Reject enabling an integration whose credentials are incomplete
    STRICT_ENABLE_TOGGLE: bool = False
    
    # Leads
    LEADS_PAGE_SIZE_MAX: int = 100
    
    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
