"""
Parcel Pydantic schemas.

Value objects passed to and returned from the parcel store, plus the request
bodies accepted by the HTTP API.
"""

from datetime import datetime, timezone
from pydantic import BaseModel, Field, field_validator
from parcel_tracker.app.models.parcel_enums import ParcelStatus

CREATED_AT_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Largest value an SQLite INTEGER column can hold
MAX_ROW_ID = 2**63 - 1


def format_created_at(moment: datetime = None) -> str:
    """Render a timestamp as UTC RFC 3339 text (defaults to now)."""
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).strftime(CREATED_AT_FORMAT)


class ParcelCreate(BaseModel):
    """A parcel before it has been stored, so without a number."""
    client: int = Field(..., ge=0, le=MAX_ROW_ID, description="Owning client identifier")
    status: ParcelStatus = Field(default=ParcelStatus.REGISTERED)
    address: str = Field(..., description="Delivery address")
    created_at: str = Field(..., description="Creation time, RFC 3339 in UTC")

    @field_validator("created_at")
    @classmethod
    def validate_created_at(cls, value: str) -> str:
        try:
            datetime.strptime(value, CREATED_AT_FORMAT)
        except ValueError as exc:
            raise ValueError("created_at must look like 2024-01-01T00:00:00Z (UTC)") from exc
        return value


class ParcelRecord(ParcelCreate):
    """A stored parcel."""
    number: int

    class Config:
        from_attributes = True


class ParcelRegister(BaseModel):
    """Schema for registering a new parcel."""
    client: int = Field(..., ge=0, le=MAX_ROW_ID, description="Owning client identifier")
    address: str = Field(..., min_length=1, description="Delivery address")


class AddressUpdate(BaseModel):
    """Schema for changing a parcel's address."""
    address: str = Field(..., min_length=1)
