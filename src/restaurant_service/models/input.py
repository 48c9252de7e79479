"""
Input models for request validation using Pydantic.

All request models run in strict mode: a value of the wrong JSON type is a
validation failure, never coerced.
"""

import re
from datetime import date, time
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

EMAIL_PATTERN = re.compile(r'^[\w.%+-]+@[\w.-]+\.[a-zA-Z]{2,}$')
PASSWORD_PATTERN = re.compile(r'^(?=.*[A-Za-z])(?=.*\d)(?=.*[$%^*\-_])[A-Za-z\d$%^*\-_]{12,}$')
SLOT_TIME_PATTERN = r'^([01]\d|2[0-3]):[0-5]\d$'


class RequestModel(BaseModel):
    """Base for camelCase JSON request bodies."""

    model_config = ConfigDict(strict=True)


class SignupRequest(RequestModel):
    """Request model for registering a new user."""

    first_name: Annotated[str, Field(alias='firstName', min_length=1, examples=['Jane'])]
    last_name: Annotated[str, Field(alias='lastName', min_length=1, examples=['Doe'])]
    email: Annotated[str, Field(min_length=1, examples=['jane.doe@example.com'])]
    password: Annotated[str, Field(min_length=1, examples=['Str0ngPassw0rd$'])]

    @field_validator('email')
    @classmethod
    def validate_email_format(cls, v: str) -> str:
        if not EMAIL_PATTERN.match(v):
            raise ValueError('Invalid email format.')
        return v

    @field_validator('password')
    @classmethod
    def validate_password_format(cls, v: str) -> str:
        """Require 12+ characters with a letter, a digit and one of $%^*-_."""
        if not PASSWORD_PATTERN.match(v):
            raise ValueError('Invalid password format.')
        return v


class SigninRequest(RequestModel):
    """Request model for exchanging credentials for an id token."""

    email: Annotated[str, Field(min_length=1)]
    password: Annotated[str, Field(min_length=1)]


class CreateTableRequest(RequestModel):
    """Request model for creating a restaurant table."""

    id: Annotated[Optional[int | str], Field(
        default=None,
        description='Table id; generated when omitted',
        examples=[1]
    )] = None

    number: Annotated[int, Field(description='Table number', examples=[5])]
    places: Annotated[int, Field(description='Seating capacity', examples=[4])]
    is_vip: Annotated[bool, Field(alias='isVip', description='Premium table flag')]

    min_order: Annotated[Optional[float], Field(
        default=None,
        alias='minOrder',
        ge=0,
        description='Minimum order amount',
        examples=[0, 250.0]
    )] = None

    @field_validator('number', 'places')
    @classmethod
    def validate_positive(cls, v: int) -> int:
        # We don't use Field(gt=0) because pydantic exports it incorrectly to OpenAPI doc
        if v <= 0:
            raise ValueError('must be greater than 0')
        return v


class CreateReservationRequest(RequestModel):
    """Request model for booking a table."""

    table_number: Annotated[int, Field(alias='tableNumber', examples=[5])]

    date: Annotated[str, Field(
        description='Reservation date (YYYY-MM-DD)',
        examples=['2024-06-01']
    )]

    slot_time_start: Annotated[str, Field(
        alias='slotTimeStart',
        pattern=SLOT_TIME_PATTERN,
        description='Slot start, 24h HH:MM',
        examples=['18:00']
    )]

    slot_time_end: Annotated[str, Field(
        alias='slotTimeEnd',
        pattern=SLOT_TIME_PATTERN,
        description='Slot end, 24h HH:MM',
        examples=['19:00']
    )]

    client_name: Annotated[Optional[str], Field(
        default=None,
        alias='clientName',
        max_length=100,
        examples=['Jane Doe']
    )] = None

    phone_number: Annotated[Optional[str], Field(
        default=None,
        alias='phoneNumber',
        max_length=30,
        examples=['+380501234567']
    )] = None

    @field_validator('table_number')
    @classmethod
    def validate_table_number(cls, v: int) -> int:
        if v <= 0:
            raise ValueError('tableNumber must be greater than 0')
        return v

    @field_validator('date')
    @classmethod
    def validate_date(cls, v: str) -> str:
        try:
            parsed = date.fromisoformat(v)
        except ValueError:
            raise ValueError('date must be an ISO calendar date (YYYY-MM-DD)')
        if parsed.isoformat() != v:
            raise ValueError('date must be an ISO calendar date (YYYY-MM-DD)')
        return v

    @property
    def start(self) -> time:
        return time.fromisoformat(self.slot_time_start)

    @property
    def end(self) -> time:
        return time.fromisoformat(self.slot_time_end)
