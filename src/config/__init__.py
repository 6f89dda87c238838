"""Configuration module."""

from src.config.logging import configure_logging, get_logger
from src.config.settings import (
    APISettings,
    DocumentSettings,
    IdentitySettings,
    PdfSettings,
    Settings,
    StorageSettings,
    get_settings,
    reset_settings,
)

__all__ = [
    "Settings",
    "APISettings",
    "DocumentSettings",
    "IdentitySettings",
    "PdfSettings",
    "StorageSettings",
    "get_settings",
    "reset_settings",
    "configure_logging",
    "get_logger",
]
