"""
Async engine and session maker for the visitor access store.

The engine is created lazily from DATABASE_URL so that importing storage
modules never opens a connection.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from visitor_access.core.config import get_database_echo, get_database_url
from visitor_access.core.logger import visitor_access_logger as logger
from visitor_access.storage.base import Base

_engine: AsyncEngine | None = None
_session_maker: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        _engine = create_async_engine(get_database_url(), echo=get_database_echo())
    return _engine


def _get_session_maker() -> async_sessionmaker[AsyncSession]:
    global _session_maker
    if _session_maker is None:
        _session_maker = async_sessionmaker(
            get_engine(), class_=AsyncSession, expire_on_commit=False
        )
    return _session_maker


def a_session_maker(**kwargs) -> AsyncSession:
    """Open a new async session, forwarding keyword arguments to the session maker."""
    return _get_session_maker()(**kwargs)


async def init_db() -> None:
    """Create the invitation and access log tables if they do not exist."""
    # Register the models on Base.metadata
    from visitor_access.storage import access_log, invitation  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info('Database initialized', extra={'url': get_engine().url.render_as_string()})


async def dispose_engine() -> None:
    global _engine, _session_maker
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_maker = None
