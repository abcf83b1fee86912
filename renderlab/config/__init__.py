from .settings import (
    get_settings,
    Settings,
)  # initialize the settings for e.g. environment variables
from .logging_config import configure_logging, get_api_logger, get_service_logger

__all__ = [
    "get_settings",
    "Settings",
    "configure_logging",
    "get_api_logger",
    "get_service_logger",
]
