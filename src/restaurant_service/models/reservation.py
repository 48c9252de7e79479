"""
Reservation domain model.

Reservations are written once by the booking operation and never updated.
Item attribute names match the reservations store layout, where the slot
start is kept under ``time``.
"""

from datetime import datetime, time, timezone
from typing import Annotated, Any, Optional
from uuid import uuid4

from pydantic import BaseModel, Field


class Reservation(BaseModel):
    """Booking of one table for one time slot on one date."""

    id: Annotated[str, Field(
        description='Unique identifier for the reservation',
        examples=['550e8400-e29b-41d4-a716-446655440000']
    )]

    table_id: Annotated[str, Field(
        description='Identifier of the reserved table'
    )]

    table_number: Annotated[int, Field(
        description='Number of the reserved table, copied at booking time',
        examples=[5]
    )]

    client_name: Annotated[Optional[str], Field(
        default=None,
        description='Name the booking was made for'
    )] = None

    phone_number: Annotated[Optional[str], Field(
        default=None,
        description='Contact phone number'
    )] = None

    username: Annotated[str, Field(
        description='User pool username of the caller who booked'
    )]

    date: Annotated[str, Field(
        description='Reservation date (YYYY-MM-DD)',
        examples=['2024-06-01']
    )]

    slot_time_start: Annotated[str, Field(
        description='Slot start (HH:MM)',
        examples=['18:00']
    )]

    slot_time_end: Annotated[str, Field(
        description='Slot end (HH:MM)',
        examples=['19:00']
    )]

    created_at: Annotated[str, Field(
        description='ISO timestamp when the reservation was created'
    )]

    @classmethod
    def create(
        cls,
        table_id: str,
        table_number: int,
        username: str,
        date: str,
        slot_time_start: str,
        slot_time_end: str,
        client_name: Optional[str] = None,
        phone_number: Optional[str] = None,
    ) -> 'Reservation':
        """Create a new reservation with generated id and creation timestamp."""
        return cls(
            id=str(uuid4()),
            table_id=table_id,
            table_number=table_number,
            client_name=client_name,
            phone_number=phone_number,
            username=username,
            date=date,
            slot_time_start=slot_time_start,
            slot_time_end=slot_time_end,
            created_at=datetime.now(timezone.utc).isoformat(),
        )

    @property
    def start(self) -> time:
        return time.fromisoformat(self.slot_time_start)

    @property
    def end(self) -> time:
        return time.fromisoformat(self.slot_time_end)

    def to_dict(self) -> dict:
        """Convert the reservation to a DynamoDB item."""
        item = {
            'id': self.id,
            'tableId': self.table_id,
            'tableNumber': self.table_number,
            'username': self.username,
            'date': self.date,
            'time': self.slot_time_start,
            'slotTimeEnd': self.slot_time_end,
            'createdAt': self.created_at,
        }
        # Optional contact fields are only written when set
        if self.client_name is not None:
            item['clientName'] = self.client_name
        if self.phone_number is not None:
            item['phoneNumber'] = self.phone_number
        return item

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'Reservation':
        """Create a Reservation from a DynamoDB item."""
        return cls(
            id=data['id'],
            table_id=str(data['tableId']),
            table_number=int(data['tableNumber']),
            client_name=data.get('clientName'),
            phone_number=data.get('phoneNumber'),
            username=data['username'],
            date=data['date'],
            slot_time_start=data['time'],
            slot_time_end=data['slotTimeEnd'],
            created_at=data['createdAt'],
        )
