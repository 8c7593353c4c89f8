# ============================================================================
# FILE: vibeshare/config.py
# ============================================================================
from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    """Application configuration using Pydantic BaseSettings"""
    
    # App settings
    APP_NAME: str = "VibeShare API"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    API_PREFIX: str = "/api"
    PORT: int = 3000
    
    # Database
    DATABASE_URL: str = "sqlite:///./vibeshare.db"  # Change to PostgreSQL in production
    
    # Search cache ("memory" or "redis")
    SEARCH_CACHE_BACKEND: str = "memory"
    REDIS_URL: str = "redis://localhost:6379/0"
    SEARCH_CACHE_TTL_SECONDS: int = 300
    
    # Security
    SECRET_KEY: str = "your-secret-key-change-this-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    REFRESH_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 30
    
    # OAuth (Google)
    GOOGLE_CLIENT_ID: str = ""
    GOOGLE_CLIENT_SECRET: str = ""
    
    # YouTube Data API (optional thumbnail enrichment)
    YOUTUBE_API_KEY: str = ""
    YOUTUBE_API_TIMEOUT_SECONDS: float = 3.0
    
    # Notifications
    NOTIFICATION_TTL_DAYS: int = 5
    NOTIFICATION_SWEEP_INTERVAL_SECONDS: int = 3600  # 0 disables the scheduled sweep
    
    # Object storage for uploaded images
    MEDIA_ROOT: str = "./media"
    MEDIA_URL: str = "/media"
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024
    
    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8080"]
    
    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
