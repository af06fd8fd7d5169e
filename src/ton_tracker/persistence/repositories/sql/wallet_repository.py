# -*- coding: utf-8 -*-
"""SQL wallet repository."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from ton_tracker.exceptions import StorageError
from ton_tracker.models.wallet import TrackedWallet
from ton_tracker.persistence.database import Database, ProcessedEventModel, WalletModel
from ton_tracker.persistence.repositories.interfaces.wallet_repository import (
    IWalletRepository,
)


def _to_domain(row: WalletModel) -> TrackedWallet:
    return TrackedWallet(
        id=row.id,
        user_id=row.user_id,
        name=row.name,
        address_raw=row.address_raw,
        address_display=row.address_display,
        min_amount_ton=row.min_amount_ton,
        created_at=row.created_at,
    )


class SqlWalletRepository(IWalletRepository):
    """SQLAlchemy implementation of IWalletRepository."""

    def __init__(self, database: Database) -> None:
        self._db = database

    async def list_all(self) -> list[TrackedWallet]:
        async with self._db.session() as session:
            try:
                result = await session.execute(select(WalletModel).order_by(WalletModel.id))
            except SQLAlchemyError as e:
                raise StorageError(f"list_all failed: {e}", cause=e) from e
            return [_to_domain(row) for row in result.scalars().all()]

    async def list_by_address_raw(self, address_raw: str) -> list[TrackedWallet]:
        async with self._db.session() as session:
            try:
                result = await session.execute(
                    select(WalletModel)
                    .where(WalletModel.address_raw == address_raw.strip())
                    .order_by(WalletModel.id)
                )
            except SQLAlchemyError as e:
                raise StorageError(f"list_by_address_raw failed: {e}", cause=e) from e
            return [_to_domain(row) for row in result.scalars().all()]

    async def add(
        self,
        *,
        user_id: int,
        address_raw: str,
        address_display: str | None = None,
        name: str = "",
    ) -> TrackedWallet:
        address_raw = address_raw.strip()
        if not address_raw:
            raise ValueError("address_raw must be non-empty")
        async with self._db.session() as session:
            row = WalletModel(
                user_id=user_id,
                name=name.strip(),
                address_raw=address_raw,
                address_display=(address_display or address_raw).strip(),
            )
            try:
                session.add(row)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise StorageError(f"add wallet failed: {e}", cause=e) from e
            return _to_domain(row)

    async def remove(self, wallet_id: int) -> bool:
        async with self._db.session() as session:
            try:
                result = await session.execute(delete(WalletModel).where(WalletModel.id == wallet_id))
                await session.execute(
                    delete(ProcessedEventModel).where(ProcessedEventModel.wallet_id == wallet_id)
                )
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise StorageError(f"remove wallet failed: {e}", cause=e) from e
            return bool(result.rowcount)

    async def set_min_amount(self, wallet_id: int, amount: float | None) -> TrackedWallet | None:
        async with self._db.session() as session:
            try:
                row = await session.get(WalletModel, wallet_id)
                if row is None:
                    return None
                row.min_amount_ton = amount
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise StorageError(f"set_min_amount failed: {e}", cause=e) from e
            return _to_domain(row)
