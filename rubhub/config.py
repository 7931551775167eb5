"""
Configuration management for The Rub Hub provider directory
"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "The Rub Hub"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Database - one connection string, reused against both databases
    DATABASE_URL: str = ""
    LEGACY_DATABASE: str = "rubhub_legacy"
    TARGET_DATABASE: str = "rubhub"

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()
