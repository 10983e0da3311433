"""
Environment-driven settings via pydantic-settings.

Keys are read case-insensitively from the process environment, optionally
seeded from a local .env file. get_settings() is cached: one instance per
process.
"""
import logging
import os
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from schemas import IdentityRecord, build

logger = logging.getLogger(__name__)

ENV_FILE = ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        case_sensitive=False,
        env_ignore_empty=True,
        extra="ignore",
    )

    # Identity
    name: str = ""
    bluesky: str = ""
    email: str = ""
    github: str = ""
    whatsapp: str = ""
    facebook: str = ""
    phone: str = ""
    base_url: str = ""

    # Server
    port: int = 8080

    # Observability
    log_level: str = "INFO"
    log_format: str = "text"


@lru_cache
def get_settings() -> Settings:
    return Settings()


def warn_if_env_file_missing(path: str = ENV_FILE) -> bool:
    """Log a warning when the optional .env file is absent."""
    if os.path.exists(path):
        return False
    logger.warning(f"No {path} file found, using process environment only")
    return True


def load_record(settings: Settings) -> IdentityRecord:
    """Map settings onto identity fields; raises ConfigValidationError."""
    return build({
        "display_name": settings.name,
        "canonical_url": settings.base_url,
        "email": settings.email,
        "phone": settings.phone,
        "bluesky": settings.bluesky,
        "github": settings.github,
        "whatsapp": settings.whatsapp,
        "facebook": settings.facebook,
    })
