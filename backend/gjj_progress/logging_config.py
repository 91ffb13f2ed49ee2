from logging.config import dictConfig
from typing import Optional

from .config import get_settings

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure process logging; the level falls back to the GJJ_LOG_LEVEL setting."""
    resolved = (level or get_settings().log_level).upper()

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": DEFAULT_LOG_FORMAT,
                },
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "loggers": {
                "gjj_progress": {
                    "handlers": ["default"],
                    "level": resolved,
                    "propagate": False,
                },
            },
        }
    )
