# -*- coding: utf-8 -*-
"""SQL processed-event ledger. insert_if_absent is one constraint-checked INSERT."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ton_tracker.exceptions import StorageError
from ton_tracker.persistence.database import Database, ProcessedEventModel
from ton_tracker.persistence.repositories.interfaces.processed_event_repository import (
    IProcessedEventRepository,
)


class SqlProcessedEventRepository(IProcessedEventRepository):
    """SQLAlchemy implementation of IProcessedEventRepository."""

    def __init__(self, database: Database) -> None:
        self._db = database

    async def insert_if_absent(self, wallet_id: int, event_id: str) -> bool:
        """Insert (wallet_id, event_id); a primary-key violation means "already processed".

        Raises:
            StorageError: On any database failure other than the key conflict.
        """
        async with self._db.session() as session:
            try:
                session.add(ProcessedEventModel(wallet_id=wallet_id, event_id=event_id.strip()))
                await session.commit()
                return True
            except IntegrityError:
                await session.rollback()
                return False
            except SQLAlchemyError as e:
                await session.rollback()
                raise StorageError(f"insert_if_absent failed: {e}", cause=e) from e

    async def contains(self, wallet_id: int, event_id: str) -> bool:
        async with self._db.session() as session:
            try:
                result = await session.execute(
                    select(ProcessedEventModel.wallet_id).where(
                        ProcessedEventModel.wallet_id == wallet_id,
                        ProcessedEventModel.event_id == event_id.strip(),
                    )
                )
            except SQLAlchemyError as e:
                raise StorageError(f"contains failed: {e}", cause=e) from e
            return result.first() is not None
