"""
Table domain model.

A table is created once by the table-creation operation and only read
afterwards; the booking path bumps its ``booking_version`` to serialise
concurrent reservations of the same table.
"""

from decimal import Decimal
from typing import Annotated, Any, Optional
from uuid import uuid4

from pydantic import BaseModel, Field


class Table(BaseModel):
    """Restaurant table as stored in the tables store."""

    id: Annotated[str, Field(
        min_length=1,
        description='Opaque table identifier',
        examples=['1', '550e8400-e29b-41d4-a716-446655440000']
    )]

    number: Annotated[int, Field(
        description='Table number shown to guests',
        examples=[5]
    )]

    places: Annotated[int, Field(
        description='Seating capacity',
        examples=[4]
    )]

    is_vip: Annotated[bool, Field(
        description='Whether the table is a premium table'
    )]

    min_order: Annotated[float, Field(
        default=0,
        ge=0,
        description='Minimum order amount for the table'
    )] = 0

    booking_version: Annotated[int, Field(
        default=0,
        ge=0,
        description='Counter bumped by every reservation written for this table'
    )] = 0

    @classmethod
    def create(
        cls,
        number: int,
        places: int,
        is_vip: bool,
        min_order: Optional[float] = None,
        table_id: Optional[str] = None,
    ) -> 'Table':
        """Create a new table, generating an id when none is supplied."""
        return cls(
            id=table_id or str(uuid4()),
            number=number,
            places=places,
            is_vip=is_vip,
            min_order=min_order if min_order is not None else 0,
        )

    @property
    def display_id(self) -> int | str:
        """Table id rendered as a number when it is numeric."""
        return int(self.id) if self.id.isascii() and self.id.isdigit() else self.id

    def to_dict(self) -> dict:
        """
        Convert the table to a DynamoDB item.

        The booking version is owned by the reservation write and is left out.
        """
        return {
            'id': self.id,
            'number': self.number,
            'places': self.places,
            'isVip': self.is_vip,
            'minOrder': Decimal(str(self.min_order)),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'Table':
        """Create a Table from a DynamoDB item."""
        return cls(
            id=str(data['id']),
            number=int(data['number']),
            places=int(data['places']),
            is_vip=bool(data['isVip']),
            min_order=float(data.get('minOrder') or 0),
            booking_version=int(data.get('bookingVersion') or 0),
        )
