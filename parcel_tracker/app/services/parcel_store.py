"""
Parcel store: the data-access layer over the `parcel` table.

Every method issues a single statement against the session handed in by the
caller. The store never opens or closes that session; writes are committed
before returning, failures are rolled back and re-raised as StorageError.
"""

import logging
from typing import List, Union
from sqlalchemy import select, update, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from parcel_tracker.app.core.exceptions import (
    ParcelNotFoundError,
    StorageError,
    InvalidParcelStatusError,
)
from parcel_tracker.app.models.parcel import Parcel
from parcel_tracker.app.models.parcel_enums import ParcelStatus
from parcel_tracker.app.schemas.parcel import ParcelCreate, ParcelRecord, MAX_ROW_ID

logger = logging.getLogger(__name__)

# OverflowError comes straight from the driver for out-of-range integers
DRIVER_ERRORS = (SQLAlchemyError, OverflowError)


def fits_row_id(value: int) -> bool:
    """True when the value can be stored in a 64-bit INTEGER column."""
    return -MAX_ROW_ID - 1 <= value <= MAX_ROW_ID


def coerce_status(value: Union[ParcelStatus, str]) -> ParcelStatus:
    """Turn a raw status value into a ParcelStatus or raise InvalidParcelStatusError."""
    if isinstance(value, ParcelStatus):
        return value
    try:
        return ParcelStatus(value)
    except ValueError:
        raise InvalidParcelStatusError(value) from None


class ParcelStore:
    """Reads and writes parcels through an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, parcel: ParcelCreate) -> int:
        """Insert a parcel and return the number assigned to it."""
        row = Parcel(
            client=parcel.client,
            status=coerce_status(parcel.status),
            address=parcel.address,
            created_at=parcel.created_at,
        )
        try:
            self.db.add(row)
            await self.db.flush()
            number = row.number
            await self.db.commit()
        except DRIVER_ERRORS as exc:
            await self.db.rollback()
            raise StorageError("add", str(exc)) from exc

        logger.debug("Added parcel %s for client %s", number, parcel.client)
        return number

    async def get(self, number: int) -> ParcelRecord:
        """Return the parcel with the given number or raise ParcelNotFoundError."""
        if not fits_row_id(number):
            raise ParcelNotFoundError(number)

        query = (
            select(Parcel)
            .where(Parcel.number == number)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.db.execute(query)
        except DRIVER_ERRORS as exc:
            await self.db.rollback()
            raise StorageError("get", str(exc)) from exc

        row = result.scalar_one_or_none()
        if row is None:
            raise ParcelNotFoundError(number)
        return ParcelRecord.model_validate(row)

    async def set_address(self, number: int, address: str) -> None:
        await self._update(number, "set_address", address=address)

    async def set_status(self, number: int, status: Union[ParcelStatus, str]) -> None:
        """Set any known status; transitions are not checked here."""
        await self._update(number, "set_status", status=coerce_status(status))

    async def delete(self, number: int) -> None:
        """Remove the parcel. Deleting a missing number is not an error."""
        if not fits_row_id(number):
            return

        try:
            result = await self.db.execute(delete(Parcel).where(Parcel.number == number))
            await self.db.commit()
        except DRIVER_ERRORS as exc:
            await self.db.rollback()
            raise StorageError("delete", str(exc)) from exc

        logger.debug("Deleted parcel %s (%s row(s))", number, result.rowcount)

    async def get_by_client(self, client: int) -> List[ParcelRecord]:
        """All parcels owned by the client, ordered by number."""
        if not fits_row_id(client):
            return []

        query = (
            select(Parcel)
            .where(Parcel.client == client)
            .order_by(Parcel.number)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.db.execute(query)
        except DRIVER_ERRORS as exc:
            await self.db.rollback()
            raise StorageError("get_by_client", str(exc)) from exc

        return [ParcelRecord.model_validate(row) for row in result.scalars().all()]

    async def _update(self, number: int, operation: str, **values) -> None:
        if not fits_row_id(number):
            raise ParcelNotFoundError(number)

        try:
            result = await self.db.execute(
                update(Parcel).where(Parcel.number == number).values(**values)
            )
            if result.rowcount == 0:
                await self.db.rollback()
                raise ParcelNotFoundError(number)
            await self.db.commit()
        except DRIVER_ERRORS as exc:
            await self.db.rollback()
            raise StorageError(operation, str(exc)) from exc

        logger.debug("Parcel %s %s: %s", number, operation, values)
