"""
Configuration settings for the application
"""

import os
from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings"""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./events.db")

    # Security
    ADMIN_TOKEN: str = os.getenv("ADMIN_TOKEN", "admin_token_123")
    # Comma separated chat ids allowed to publish events, e.g. "123456789,987654321"
    ADMINS: str = os.getenv("ADMINS", "")

    # Time
    LOCAL_TIMEZONE: str = os.getenv("LOCAL_TIMEZONE", "Europe/Lisbon")
    DEFAULT_USER_TIMEZONE: str = os.getenv("DEFAULT_USER_TIMEZONE", "Europe/Lisbon")

    # Listings
    UPCOMING_LIMIT: int = 5

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS
    ALLOW_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    class Config:
        env_file = ".env"

    @property
    def admin_ids(self) -> List[int]:
        ids = []
        for part in self.ADMINS.split(","):
            part = part.strip()
            if part.isdigit():
                ids.append(int(part))
        return ids

settings = Settings()
