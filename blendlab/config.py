"""Application settings and logging setup."""

import logging
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_DATA_DIR = Path(__file__).parent / "data" / "reference"


class Settings(BaseSettings):
    """Blend-Lab settings.

    Every value can be overridden with a ``BLENDLAB_`` prefixed environment
    variable, e.g. ``BLENDLAB_DEFAULT_CATEGORY=5A``.
    """

    model_config = SettingsConfigDict(env_prefix="BLENDLAB_")

    app_name: str = "Blend-Lab"
    data_dir: Path = Field(default=DEFAULT_DATA_DIR)  # reference table JSON files
    default_category: str = "4"  # IFRA category used when a request names none
    log_level: str = "INFO"
    company_name: str = "Artisan Perfume Formulator"  # batch sheet header
    api_host: str = "0.0.0.0"
    api_port: int = 8000


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create the process-wide settings.

    Returns:
        The cached Settings instance.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def configure_logging(level: Optional[str] = None) -> None:
    """Install a basic log format for the ``blendlab`` loggers.

    Args:
        level: Log level name. Defaults to the configured ``log_level``.
    """
    level_name = (level or get_settings().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
