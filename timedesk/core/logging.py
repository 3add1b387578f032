"""Logging configuration."""
import logging

from timedesk.config import settings


def setup_logging() -> None:
    """Configure the root logger from settings."""
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
