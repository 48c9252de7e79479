"""
Output models for API responses using Pydantic.

Response bodies are serialized with ``by_alias=True`` so field names on the
wire stay camelCase.
"""

from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field

from restaurant_service.models.reservation import Reservation
from restaurant_service.models.table import Table


class ResponseModel(BaseModel):
    """Base for camelCase JSON response bodies."""

    model_config = ConfigDict(populate_by_name=True)


class MessageOutput(ResponseModel):
    """Response carrying a single human-readable message."""

    message: Annotated[str, Field(examples=['User created successfully.'])]


class SigninOutput(ResponseModel):
    """Response model for successful sign-in."""

    id_token: Annotated[str, Field(alias='idToken', description='Cognito id token')]


class TableOutput(ResponseModel):
    """Public view of a restaurant table."""

    id: Annotated[int | str, Field(description='Table id, numeric when possible', examples=[1])]
    number: Annotated[int, Field(examples=[5])]
    places: Annotated[int, Field(examples=[4])]
    is_vip: Annotated[bool, Field(alias='isVip')]
    min_order: Annotated[float, Field(alias='minOrder', examples=[0])]

    @classmethod
    def from_table(cls, table: Table) -> 'TableOutput':
        return cls(
            id=table.display_id,
            number=table.number,
            places=table.places,
            is_vip=table.is_vip,
            min_order=table.min_order,
        )


class TablesOutput(ResponseModel):
    """Response model for listing tables."""

    tables: list[TableOutput]


class CreateTableOutput(ResponseModel):
    """Response model for table creation; echoes the id as supplied."""

    id: Annotated[int | str, Field(examples=[1])]


class ReservationOutput(ResponseModel):
    """Public view of a reservation."""

    table_number: Annotated[int, Field(alias='tableNumber', examples=[5])]
    client_name: Annotated[Optional[str], Field(alias='clientName')] = None
    phone_number: Annotated[Optional[str], Field(alias='phoneNumber')] = None
    date: Annotated[str, Field(examples=['2024-06-01'])]
    slot_time_start: Annotated[str, Field(alias='slotTimeStart', examples=['18:00'])]
    slot_time_end: Annotated[str, Field(alias='slotTimeEnd', examples=['19:00'])]

    @classmethod
    def from_reservation(cls, reservation: Reservation) -> 'ReservationOutput':
        return cls(
            table_number=reservation.table_number,
            client_name=reservation.client_name,
            phone_number=reservation.phone_number,
            date=reservation.date,
            slot_time_start=reservation.slot_time_start,
            slot_time_end=reservation.slot_time_end,
        )


class ReservationsOutput(ResponseModel):
    """Response model for listing reservations."""

    reservations: list[ReservationOutput]


class CreateReservationOutput(ResponseModel):
    """Response model for a successful booking."""

    reservation_id: Annotated[str, Field(alias='reservationId')]
    message: Annotated[str, Field(
        default='Reservation created successfully'
    )] = 'Reservation created successfully'
