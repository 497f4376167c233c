"""
Configuration management for the Member Service
"""
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """Member Service configuration loaded from environment variables"""

    # Server Configuration
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None
    GREETING: str = "Hello Technigo!"

    # Database Configuration
    DATABASE_URL: str = Field(
        default="sqlite:///./members.db",
        validation_alias=AliasChoices("DATABASE_URL", "MONGO_URL"),
    )
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10

    # Membership
    MEMBER_DISCOUNT: float = 0.1

    # Any valid token may delete any account unless this is enabled
    REQUIRE_DELETE_OWNERSHIP: bool = False

    # CORS Configuration
    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )
