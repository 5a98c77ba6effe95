import sys

from loguru import logger

_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> <level>{level: <8}</level> <cyan>{name}</cyan>: {message}"


def setup_logging(level: str = "WARNING") -> None:
    """Replace loguru's default sink with a stderr sink at ``level``. Call once, early."""
    logger.remove()
    logger.add(sys.stderr, level=level, format=_FORMAT, backtrace=False, diagnose=False)
