"""
Logging setup.

Configures loguru logger for the ledger.
Sets up log rotation and retention policies.
"""

from loguru import logger

from taskminer.config.settings import settings


def setup_logging(
    log_file: str | None = None, level: str | None = None
) -> int:
    """
    Configure logger with file rotation.

    Returns:
        Handler id of the added file sink
    """
    handler_id = logger.add(
        log_file or settings.log_file,
        rotation="1 day",
        retention="7 days",
        level=level or settings.log_level,
        encoding="utf-8",
    )

    logger.info(
        "Logging configured",
        extra={"environment": settings.environment},
    )
    return handler_id
