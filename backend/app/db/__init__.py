import logging

from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)


async def init_models(engine: AsyncEngine, drop_existing: bool = False) -> None:
    """Create all tables (IF NOT EXISTS). drop_existing is for local resets only."""
    # Registers every model on Base.metadata
    import backend.app.models  # noqa: F401
    from backend.app.db.base import Base

    try:
        async with engine.begin() as conn:
            if drop_existing:
                await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
        logger.info("database tables ready")
    except Exception:
        logger.exception("failed to create database tables")
        raise
