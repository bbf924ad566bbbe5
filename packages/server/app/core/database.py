"""
Database connection and session management.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from app.core.config import Settings
from app.core.errors import InternalError

log = structlog.get_logger()


class Database:
    """Owns the async engine and session factory for one application instance."""

    def __init__(self, settings: Settings):
        url = make_url(settings.database_url)
        engine_kwargs = {"echo": settings.debug, "future": True}
        if url.get_backend_name() == "sqlite":
            # one shared connection so in-memory databases survive across sessions
            engine_kwargs["poolclass"] = StaticPool
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        self.engine = create_async_engine(url, **engine_kwargs)
        self.session_factory = sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_all(self) -> None:
        """Create all tables from model metadata (schema migrations are not managed here)."""
        import app.models  # noqa: F401  (populate metadata)

        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    async def ping(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except SQLAlchemyError:
            log.warning("store.unreachable")
            return False
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    db: Database = request.app.state.db
    async with db.session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def atomic(session: AsyncSession):
    """All-or-nothing unit of work: commit on success, roll back on any failure.

    Store errors other than unique-key violations surface as ``InternalError``;
    ``IntegrityError`` is re-raised so callers can map it to a domain error.
    """
    try:
        yield session
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise
    except SQLAlchemyError as exc:
        await session.rollback()
        log.error("store.error", error=type(exc).__name__)
        raise InternalError() from exc
    except Exception:
        await session.rollback()
        raise
