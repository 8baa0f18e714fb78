import sys

from loguru import logger


def configure_logging(level: str = "WARNING") -> None:
    """Route loguru output to stderr at ``level``, dropping the default sink."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )
