# app/config.py

from __future__ import annotations
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    PROJECT_NAME: str = "Job Board API"

    # --- Core ---
    SECRET_KEY: str = Field("change-me-to-a-long-random-signing-key", description="JWT signing key")
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(60, ge=5, le=60 * 24)
    DEBUG: bool = False  # echoes SQL when True

    # --- Database ---
    DATABASE_URL: str = Field("sqlite:///./jobboard.db")

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = False

    # --- Listing ---
    DEFAULT_PAGE_SIZE: int = Field(10, ge=1)
    MAX_PAGE_SIZE: int = Field(100, ge=1)

    # Role claim that unlocks moderation and taxonomy endpoints
    ADMIN_ROLE: str = "admin"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
