import sys

from loguru import logger

from app.core.config import get_settings


def configure_logging() -> None:
    """Replace loguru's default sink with a stdout sink at the configured level."""
    settings = get_settings()
    logger.remove()
    logger.add(
        sys.stdout,
        level=settings.log_level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}",
    )
