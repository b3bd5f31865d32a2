"""Logging configuration for the decision core."""

import logging

from .config import Settings, settings as default_settings


def configure_logging(config: Settings | None = None) -> logging.Logger:
    """Configure root logging from settings.

    Args:
        config: Settings to read the level and format from. Defaults to the
            global settings instance.

    Returns:
        The ``action_core`` package logger
    """
    config = config or default_settings
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    logging.basicConfig(level=level, format=config.log_format)

    package_logger = logging.getLogger("action_core")
    package_logger.setLevel(logging.DEBUG if config.debug else level)
    return package_logger
