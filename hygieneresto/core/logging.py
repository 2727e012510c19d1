"""Loguru configuration shared by the backend and the session client."""

import sys

from loguru import logger

from hygieneresto.core.config import Settings

__all__ = ["configure_logging", "logger"]


def configure_logging(settings: Settings) -> None:
    """Install the loguru sinks described by the settings.

    Removes the default sink, adds a stderr sink at ``log_level`` and, when
    ``log_to_file`` is enabled, a rotating file sink.

    Args:
        settings: Application settings holding the logging configuration
    """
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level.upper(), enqueue=False)

    if settings.log_to_file:
        logger.add(
            settings.log_file_path,
            level=settings.log_level.upper(),
            rotation=settings.log_rotation,
            retention=settings.log_retention,
            enqueue=True,
        )

    logger.debug(
        f"Logging configured (level={settings.log_level}, file={settings.log_to_file})"
    )
