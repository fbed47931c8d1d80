"""
Parcel API Endpoints.

Exposes the parcel lifecycle over HTTP. Errors raised by the service and the
store are rendered by the global AppException handler.
"""

from typing import List
from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from parcel_tracker.app.db.session import get_db
from parcel_tracker.app.schemas.parcel import ParcelRecord, ParcelRegister, AddressUpdate, MAX_ROW_ID
from parcel_tracker.app.services.parcel_service import ParcelService
from parcel_tracker.app.services.parcel_store import ParcelStore

router = APIRouter(tags=["Parcels"])


def get_parcel_service(db: AsyncSession = Depends(get_db)) -> ParcelService:
    return ParcelService(ParcelStore(db))


@router.post("/parcels", response_model=ParcelRecord, status_code=status.HTTP_201_CREATED)
async def register_parcel(
    parcel_data: ParcelRegister,
    service: ParcelService = Depends(get_parcel_service)
):
    """Register a new parcel for a client. It starts in status 'registered'."""
    return await service.register(parcel_data.client, parcel_data.address)


@router.get("/parcels/{number}", response_model=ParcelRecord)
async def get_parcel(
    number: int = Path(..., ge=0, le=MAX_ROW_ID, description="Parcel number"),
    service: ParcelService = Depends(get_parcel_service)
):
    return await service.get(number)


@router.patch("/parcels/{number}/address", response_model=ParcelRecord)
async def change_parcel_address(
    address_data: AddressUpdate,
    number: int = Path(..., ge=0, le=MAX_ROW_ID, description="Parcel number"),
    service: ParcelService = Depends(get_parcel_service)
):
    """
    Change the delivery address.

    Only parcels still in status 'registered' can be re-addressed.
    """
    return await service.change_address(number, address_data.address)


@router.post("/parcels/{number}/next-status", response_model=ParcelRecord)
async def advance_parcel_status(
    number: int = Path(..., ge=0, le=MAX_ROW_ID, description="Parcel number"),
    service: ParcelService = Depends(get_parcel_service)
):
    """Move the parcel to its next status (registered → sent → delivered)."""
    return await service.next_status(number)


@router.delete("/parcels/{number}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_parcel(
    number: int = Path(..., ge=0, le=MAX_ROW_ID, description="Parcel number"),
    service: ParcelService = Depends(get_parcel_service)
):
    """Delete a parcel that has not been sent yet."""
    await service.delete(number)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/clients/{client}/parcels", response_model=List[ParcelRecord])
async def list_client_parcels(
    client: int = Path(..., ge=0, le=MAX_ROW_ID, description="Client identifier"),
    service: ParcelService = Depends(get_parcel_service)
):
    return await service.client_parcels(client)
