"""SQLAlchemy async engine, session factory and table models."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Callable, Optional

import structlog
from sqlalchemy import BigInteger, DateTime, Float, Index, Integer, String
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ton_tracker.config import Settings


class Base(DeclarativeBase):
    pass


class WalletModel(Base):
    """Tracked wallet row (one per subscriber and address)."""

    __tablename__ = "wallets"
    __table_args__ = (
        Index("idx_wallets_user_id", "user_id"),
        Index("idx_wallets_address_raw", "address_raw"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    address_raw: Mapped[str] = mapped_column(String(128), nullable=False)
    address_display: Mapped[str] = mapped_column(String(128), nullable=False)
    min_amount_ton: Mapped[float | None] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )


class ProcessedEventModel(Base):
    """Deduplication ledger row. The composite primary key is the idempotency key."""

    __tablename__ = "processed_events"

    wallet_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    event_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    processed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )


class Database:
    """Owns the async engine and session factory.

    The engine is created lazily by SQLAlchemy (no connection until first use);
    call init() once at startup to create tables and dispose() at shutdown.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        url: Optional[str] = None,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._url = url or settings.storage.database_url
        self._engine: AsyncEngine = create_async_engine(
            self._url,
            echo=settings.storage.echo,
            pool_pre_ping=True,
        )
        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self._logger = get_logger(logger_name or self.__class__.__name__)

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    def session(self) -> AsyncSession:
        """Return a new session (use as async context manager)."""
        return self._session_factory()

    async def init(self) -> None:
        """Create all tables if missing."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        self._logger.info("database_initialized", database_backend=self._engine.dialect.name)

    async def dispose(self) -> None:
        """Release all pooled connections."""
        await self._engine.dispose()
