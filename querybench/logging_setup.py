"""Process-wide logging configuration for the command-line driver."""

import logging

from querybench.config import Settings


def configure_logging(settings: Settings) -> None:
    """Configure root logging from settings.

    Only the driver calls this; library code just uses module loggers.
    """
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    if settings.APP_DEBUG:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format=settings.LOG_FORMAT,
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(settings.LOG_FILE)
            if settings.LOG_FILE
            else logging.NullHandler(),
        ],
    )

    # asyncpg logs connection chatter at DEBUG; keep benchmark output readable
    logging.getLogger("asyncpg").setLevel(logging.WARNING)
