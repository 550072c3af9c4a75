# ABOUTME: Configuration package initialization
# ABOUTME: Exports configuration classes and logging utilities for the client

from crpt_api.config.settings import CrptSettings, get_settings
from crpt_api.config.logging import (
    LoggerConfig,
    LoggingSettings,
    build_logger_config,
    setup_logging,
    get_logger,
    configure_logging,
    configure_for_production,
    configure_for_development,
)

__all__ = [
    "CrptSettings",
    "get_settings",
    "LoggerConfig",
    "LoggingSettings",
    "build_logger_config",
    "setup_logging",
    "get_logger",
    "configure_logging",
    "configure_for_production",
    "configure_for_development",
]
