"""
TipMate Backend — Database Connection Management
==================================================

What:  Declarative base for ORM models and the `DatabaseConnector`, which owns
       the one shared async engine of a running process.
How:   The connector establishes its engine lazily on the first `connect()`
       call. Concurrent first callers share a single in-flight attempt; a
       failed attempt is forgotten so the next call starts a fresh one.
Who:   Created by the app factory (main.py), stored on `app.state.connector`
       and handed to route handlers through FastAPI's dependency injection.
When:  Engine is created on first use; sessions are created per request.

Connector lifecycle:
    uninitialized ──connect()──▶ connecting ──success──▶ connected
          ▲                          │
          └────────failure───────────┘

    connected     → connect() returns the cached engine immediately
    connecting    → connect() awaits the attempt already in flight
    uninitialized → connect() starts a new attempt

Operations never queue while the connector is not connected: `session()`
raises DatabaseError straight away instead of waiting for a connection.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Callable, Dict, Optional

from sqlalchemy import MetaData, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from tipmate.config import Settings, settings as default_settings
from tipmate.exceptions import DatabaseError

logger = logging.getLogger(__name__)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Models register their tables on `Base.metadata`; see
    `tipmate.models.register_models()`.
    """
    pass


EngineFactory = Callable[..., AsyncEngine]


class DatabaseConnector:
    """
    Owns the process-wide async engine and hands out sessions.

    State:
        _engine:   the live engine once connected, else None
        _pending:  the in-flight connection task while connecting, else None

    Args:
        url:            SQLAlchemy async URL
        metadata:       registered table metadata (created on connect when
                        `create_schema` is set)
        create_schema:  run `metadata.create_all` after the first successful probe
        engine_factory: callable building the engine (create_async_engine)
        config:         settings used for pool sizing and SQL echo
    """

    UNINITIALIZED = "uninitialized"
    CONNECTING = "connecting"
    CONNECTED = "connected"

    def __init__(
        self,
        url: Optional[str] = None,
        metadata: Optional[MetaData] = None,
        create_schema: Optional[bool] = None,
        engine_factory: EngineFactory = create_async_engine,
        config: Optional[Settings] = None,
    ):
        self.config = config or default_settings
        self.url = url or self.config.database_url
        self.metadata = metadata
        self.create_schema = (
            self.config.db_create_schema if create_schema is None else create_schema
        )
        self._engine_factory = engine_factory
        self._engine: Optional[AsyncEngine] = None
        self._pending: Optional["asyncio.Task[AsyncEngine]"] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        # bumped by dispose() so attempts started earlier are discarded
        self._generation = 0

    @property
    def state(self) -> str:
        if self._engine is not None:
            return self.CONNECTED
        if self._pending is not None:
            return self.CONNECTING
        return self.UNINITIALIZED

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @property
    def engine(self) -> Optional[AsyncEngine]:
        return self._engine

    def _engine_options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {"echo": self.config.log_level == "DEBUG"}
        # SQLite pools reject sizing arguments
        if not self.is_sqlite:
            options.update(
                pool_size=self.config.db_pool_size,
                max_overflow=self.config.db_max_overflow,
                pool_pre_ping=self.config.db_pool_pre_ping,
                pool_recycle=3600,
            )
        return options

    async def connect(self) -> AsyncEngine:
        """
        Return the live engine, establishing it on first use.

        Safe to call concurrently and repeatedly. Only one connection attempt
        is ever in flight; every caller that arrives while it runs awaits the
        same attempt. On failure the attempt is discarded so a later call
        retries.

        Raises:
            DatabaseError: the connection attempt failed, or dispose() ran
                while it was in flight
        """
        if self._engine is not None:
            return self._engine

        if self._pending is None:
            logger.info("Connecting to database...")
            self._pending = asyncio.ensure_future(self._open())
        pending = self._pending
        generation = self._generation

        try:
            # shield: a cancelled caller must not cancel the shared attempt
            engine = await asyncio.shield(pending)
        except Exception:
            if self._pending is pending:
                self._pending = None
            raise

        if generation != self._generation:
            # dispose() ran while this attempt was in flight
            if engine is not self._engine:
                await engine.dispose()
            raise DatabaseError(
                message="Database connection was closed",
                context={"state": self.state},
            )

        if self._engine is None:
            self._engine = engine
            self._session_factory = async_sessionmaker(
                engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
            logger.info("Database connection established")
        if self._pending is pending:
            self._pending = None
        return self._engine

    async def _open(self) -> AsyncEngine:
        """Build the engine, probe it with SELECT 1 and create tables if asked."""
        engine: Optional[AsyncEngine] = None
        try:
            engine = self._engine_factory(self.url, **self._engine_options())
            async with engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
                if self.create_schema and self.metadata is not None:
                    await conn.run_sync(self.metadata.create_all)
            return engine
        except Exception as e:
            logger.error("Database connection failed: %s", str(e))
            if engine is not None:
                await engine.dispose()
            raise DatabaseError(
                message="Could not connect to the database",
                context={"error_type": type(e).__name__},
            ) from e

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Provide a transactional session on the live engine.

        Commits when the block exits normally, rolls back and re-raises on
        any exception, always closes.

        Raises:
            DatabaseError: called before `connect()` has completed
        """
        if self._session_factory is None:
            raise DatabaseError(
                message="Database is not connected",
                context={"state": self.state},
            )

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def dispose(self) -> None:
        """Close all pooled connections and return to the uninitialized state."""
        engine = self._engine
        self._engine = None
        self._generation += 1
        self._session_factory = None
        self._pending = None
        if engine is not None:
            await engine.dispose()
            logger.info("Database connection closed")
