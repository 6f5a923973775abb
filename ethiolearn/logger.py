"""
Logging setup for EthioLearn
"""
import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)

# Remove default handler
logger.remove()
_handler_id = logger.add(sys.stderr, format=LOG_FORMAT, level="INFO", colorize=True)


def configure(level: str = "INFO") -> None:
    """Replace the console handler with one at the given level."""
    global _handler_id
    logger.remove(_handler_id)
    _handler_id = logger.add(sys.stderr, format=LOG_FORMAT, level=level, colorize=True)


def get_logger(name: str):
    """Get a logger instance with a specific name"""
    return logger.bind(name=name)
