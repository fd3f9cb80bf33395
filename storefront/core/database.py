from sqlmodel import SQLModel
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy import event
from storefront.core.config import settings
import structlog

logger = structlog.get_logger()


def _engine_options() -> dict:
    options = {
        "echo": settings.log_level == "DEBUG",
        "future": True,
    }
    # SQLite drivers use single-connection pools that reject sizing arguments
    if not settings.database_url.startswith("sqlite"):
        options["pool_size"] = settings.db_pool_size
        options["max_overflow"] = settings.db_max_overflow
    return options


engine: AsyncEngine = create_async_engine(settings.database_url, **_engine_options())


if engine.dialect.name == "postgresql":
    @event.listens_for(engine.sync_engine, "connect")
    def set_search_path(dbapi_connection, connection_record):
        logger.info("Setting search path", schema=settings.db_schema)
        cursor = dbapi_connection.cursor()
        cursor.execute(f"SET search_path TO {settings.db_schema}")
        cursor.close()


async_session_maker = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


async def get_async_session() -> AsyncSession:
    """FastAPI dependency for getting database session"""
    async with async_session_maker() as session:
        try:
            yield session
        except Exception as e:
            await session.rollback()
            logger.error("Database session error", error_type=type(e).__name__, error=str(e))
            raise
        finally:
            await session.close()


async def create_db_and_tables():
    # Importing the models registers their tables on SQLModel.metadata
    import storefront.models  # noqa: F401

    logger.info("Creating database tables", dialect=engine.dialect.name)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def close_db():
    await engine.dispose()
