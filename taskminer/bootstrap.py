"""
Ledger initialization and shutdown.

Wires logging, the database engine and the gateway for the hosting runtime.
"""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncEngine

from taskminer.config.settings import settings
from taskminer.database import create_engine, create_session_maker, init_models
from taskminer.log_setup import setup_logging
from taskminer.services.ledger_gateway import LedgerGateway


async def init_ledger(
    create_tables: bool = False,
) -> tuple[AsyncEngine, LedgerGateway]:
    """
    Initialize the ledger.

    Args:
        create_tables: Create tables from metadata (development only,
            production schema is managed by alembic)

    Returns:
        Tuple of (engine, gateway)
    """
    setup_logging()

    engine = create_engine()
    if create_tables:
        await init_models(engine)

    gateway = LedgerGateway(create_session_maker(engine))

    logger.info(
        "Ledger initialized",
        extra={
            "environment": settings.environment,
            "timeout": gateway.timeout,
            "max_retries": gateway.max_retries,
        },
    )
    return engine, gateway


async def shutdown_ledger(engine: AsyncEngine) -> None:
    """Close database connections."""
    logger.info("Graceful shutdown initiated...")
    try:
        await engine.dispose()
        logger.info("Database connections closed")
    except Exception as e:
        logger.warning(f"Error closing database: {e}")
