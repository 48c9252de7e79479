"""
Service Models Package

This package contains the Pydantic models used throughout the service:
request validation models, response models and the table/reservation
domain models.
"""

from .input import CreateReservationRequest, CreateTableRequest, SigninRequest, SignupRequest
from .output import (
    CreateReservationOutput,
    CreateTableOutput,
    MessageOutput,
    ReservationOutput,
    ReservationsOutput,
    SigninOutput,
    TableOutput,
    TablesOutput,
)
from .reservation import Reservation
from .table import Table

__all__ = [
    # Input models
    "CreateReservationRequest",
    "CreateTableRequest",
    "SigninRequest",
    "SignupRequest",

    # Output models
    "CreateReservationOutput",
    "CreateTableOutput",
    "MessageOutput",
    "ReservationOutput",
    "ReservationsOutput",
    "SigninOutput",
    "TableOutput",
    "TablesOutput",

    # Domain models
    "Reservation",
    "Table",
]
