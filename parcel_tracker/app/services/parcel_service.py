"""
Parcel lifecycle service.

Applies the tracker's business rules on top of ParcelStore:
- new parcels start as REGISTERED with the current UTC time
- status only moves forward: REGISTERED → SENT → DELIVERED
- address changes and deletion are allowed only while REGISTERED
"""

import logging
from typing import List, Optional
from parcel_tracker.app.core.exceptions import InvalidParcelStateError
from parcel_tracker.app.models.parcel_enums import ParcelStatus
from parcel_tracker.app.schemas.parcel import ParcelCreate, ParcelRecord, format_created_at
from parcel_tracker.app.services.parcel_store import ParcelStore

logger = logging.getLogger(__name__)

NEXT_STATUS = {
    ParcelStatus.REGISTERED: ParcelStatus.SENT,
    ParcelStatus.SENT: ParcelStatus.DELIVERED,
}


def next_status_of(status: ParcelStatus) -> Optional[ParcelStatus]:
    """Status following `status`, or None when it is terminal."""
    return NEXT_STATUS.get(status)


class ParcelService:
    """
    Parcel lifecycle operations on top of a ParcelStore.

    Errors from the store (not found, storage failures) propagate unchanged;
    rule violations raise InvalidParcelStateError.
    """

    def __init__(self, store: ParcelStore):
        self.store = store

    async def register(self, client: int, address: str) -> ParcelRecord:
        """Store a new REGISTERED parcel stamped with the current UTC time."""
        parcel = ParcelCreate(
            client=client,
            status=ParcelStatus.REGISTERED,
            address=address,
            created_at=format_created_at(),
        )
        number = await self.store.add(parcel)

        logger.info(
            "Parcel %s registered: client %s, address %s, created %s",
            number, client, address, parcel.created_at
        )
        return ParcelRecord(number=number, **parcel.model_dump())

    async def client_parcels(self, client: int) -> List[ParcelRecord]:
        """All parcels of the client; empty when it has none."""
        parcels = await self.store.get_by_client(client)
        logger.info("Client %s has %d parcel(s)", client, len(parcels))
        return parcels

    async def get(self, number: int) -> ParcelRecord:
        """Look up one parcel by number."""
        return await self.store.get(number)

    async def next_status(self, number: int) -> ParcelRecord:
        """Advance the parcel one step; a delivered parcel is returned unchanged."""
        parcel = await self.store.get(number)
        new_status = next_status_of(parcel.status)
        if new_status is None:
            logger.info("Parcel %s is already %s", number, parcel.status.value)
            return parcel

        await self.store.set_status(number, new_status)
        logger.info("Parcel %s status: %s → %s", number, parcel.status.value, new_status.value)
        return parcel.model_copy(update={"status": new_status})

    async def change_address(self, number: int, address: str) -> ParcelRecord:
        """
        Change the delivery address of a parcel that has not been sent.

        Raises:
            ParcelNotFoundError: no parcel with this number
            InvalidParcelStateError: the parcel is no longer REGISTERED
        """
        parcel = await self.store.get(number)
        self._require_registered(parcel, "change address of")

        await self.store.set_address(number, address)
        logger.info("Parcel %s address changed to %s", number, address)
        return parcel.model_copy(update={"address": address})

    async def delete(self, number: int) -> None:
        """Delete a parcel that is still REGISTERED."""
        parcel = await self.store.get(number)
        self._require_registered(parcel, "delete")

        await self.store.delete(number)
        logger.info("Parcel %s deleted", number)

    @staticmethod
    def _require_registered(parcel: ParcelRecord, action: str) -> None:
        if parcel.status != ParcelStatus.REGISTERED:
            raise InvalidParcelStateError(parcel.number, parcel.status.value, action)
