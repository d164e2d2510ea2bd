"""
Search Service Configuration

Service-specific configuration for the weighted search API.
Inherits infrastructure settings.
"""

import os

from weighted_search.core.infrastructure_config import InfrastructureSettings


class Settings(InfrastructureSettings):
    """Search service configuration"""

    # Application
    APP_NAME: str = "Weighted Search"
    APP_VERSION: str = "1.0.0"

    # Search Settings
    # Locale used when the caller does not pass one (the site language)
    DEFAULT_LOCALE: str = os.getenv("DEFAULT_LOCALE", "en")
    MAX_QUERY_LEN: int = int(os.getenv("MAX_QUERY_LEN", "200"))

    # Security
    CORS_ORIGINS: list[str] = (
        os.getenv("CORS_ORIGINS", "").split(",") if os.getenv("CORS_ORIGINS") else []
    )

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))
    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"


settings = Settings()
