"""Engine, session factory and schema bootstrap."""
import logging
from typing import Any, AsyncIterator, Dict

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from timedesk.config import settings
from timedesk.core.security import ROLE_PERMISSIONS

logger = logging.getLogger(__name__)


def engine_options(url: str) -> Dict[str, Any]:
    """Pool settings for a database URL; SQLite shares one connection."""
    options: Dict[str, Any] = {"echo": settings.DATABASE_ECHO, "pool_pre_ping": True}
    if url.startswith("sqlite"):
        options["poolclass"] = StaticPool
    else:
        options.update(pool_size=10, max_overflow=20)
    return options


def build_engine(url: str = settings.DATABASE_URL) -> AsyncEngine:
    return create_async_engine(url, **engine_options(url))


def build_sessionmaker(bind: AsyncEngine) -> async_sessionmaker:
    # Committed objects keep their loaded attributes.
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False, autoflush=False)


engine = build_engine()
AsyncSessionLocal = build_sessionmaker(engine)

Base = declarative_base()


async def get_db() -> AsyncIterator[AsyncSession]:
    """Request-scoped session; uncommitted work is rolled back on errors."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except SQLAlchemyError:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create tables, then make sure default roles and the admin exist."""
    import timedesk.models  # noqa: F401  (registers tables on Base.metadata)
    from timedesk.services.bootstrap_service import ensure_default_admin, ensure_roles

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as session:
        role_map = await ensure_roles(session, role_names=ROLE_PERMISSIONS.keys())
        await ensure_default_admin(session, role_map=role_map)
    logger.info("Database schema and default accounts are ready")


async def close_db() -> None:
    await engine.dispose()
