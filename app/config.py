"""
Application Configuration
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Database
    database_url: Optional[str] = None

    # Environment
    environment: str = "development"

    # Logging
    log_level: str = "INFO"
    service_name: str = "travel-assist-matcher"

    # Matching Engine Configuration
    match_default_max_results: int = 10  # Results per match listing
    match_max_results_limit: int = 50  # Largest max_results accepted over HTTP

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
