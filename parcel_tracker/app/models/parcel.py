"""
Parcel database model.

One row per tracked parcel; the client is a plain integer, not a foreign key.
"""

from sqlalchemy import Column, Integer, String, Text, Enum
from parcel_tracker.app.db.session import Base
from parcel_tracker.app.models.parcel_enums import ParcelStatus


class Parcel(Base):
    """
    Parcel row.

    `number` is assigned by the database and never reused, `created_at` keeps
    the RFC 3339 text supplied on insert.
    """
    __tablename__ = "parcel"
    __table_args__ = {"sqlite_autoincrement": True}

    number = Column(Integer, primary_key=True, autoincrement=True)
    client = Column(Integer, nullable=False, index=True)

    # Stored as the lowercase value ("registered"), not the member name
    status = Column(
        Enum(
            ParcelStatus,
            native_enum=False,
            length=16,
            values_callable=lambda statuses: [s.value for s in statuses],
            validate_strings=True,
        ),
        default=ParcelStatus.REGISTERED,
        nullable=False,
    )
    address = Column(Text, nullable=False)
    created_at = Column(String(32), nullable=False)

    def __repr__(self):
        return f"<Parcel(number={self.number}, client={self.client}, status='{self.status.value}')>"
