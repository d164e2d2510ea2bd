"""
Weighted search storage settings.

Where the record store and keyword index live, and which deployment the
process runs in. Read once from the environment at import time.
"""

import os
from enum import Enum
from pathlib import Path


class Environment(str, Enum):
    """Deployment the search service runs in"""

    PRODUCTION = "production"
    DEVELOPMENT = "development"
    TEST = "test"


_ENVIRONMENT_CHOICES = ", ".join(f"'{e.value}'" for e in Environment)


def _get_environment() -> Environment:
    """Read ENVIRONMENT; the search store refuses to guess its deployment."""
    env_value = os.getenv("ENVIRONMENT")
    if env_value is None:
        raise RuntimeError(
            "ENVIRONMENT is required to choose the search index store "
            f"(one of {_ENVIRONMENT_CHOICES})."
        )
    try:
        return Environment(env_value.lower())
    except ValueError:
        raise RuntimeError(
            f"Invalid ENVIRONMENT value for weighted search: '{env_value}'. "
            f"Expected one of {_ENVIRONMENT_CHOICES}."
        )


class InfrastructureSettings:
    """Record store and keyword index location"""

    # Repository root; the local SQLite index sits in data/ below it
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent.parent
    DATA_DIR: Path = BASE_DIR / "data"

    # Records, fields and the searchindex table share one database.
    # DATABASE_URL selects PostgreSQL and is mandatory in production.
    DATABASE_URL: str | None = os.getenv("DATABASE_URL")
    # SQLite file used when DATABASE_URL is unset
    DB_PATH: str = os.getenv("SEARCH_DB", str(DATA_DIR / "weighted_search.db"))

    ENVIRONMENT: Environment = _get_environment()


settings = InfrastructureSettings()
