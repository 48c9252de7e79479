"""
Data Access Layer (DAL) for the restaurant booking service.

This module provides the data access layer interfaces and the factory used
by the Lambda entry point to build the concrete DynamoDB implementation.
"""

from abc import ABC, abstractmethod
from typing import Optional, Protocol, runtime_checkable

from restaurant_service.handlers.utils.errors import ErrorContext
from restaurant_service.models.reservation import Reservation
from restaurant_service.models.table import Table


@runtime_checkable
class DalHandler(Protocol):
    """Protocol defining the booking data access interface."""

    def list_tables(self, context: Optional[ErrorContext] = None) -> list[Table]:
        """List every table."""
        ...

    def get_table_by_id(self, table_id: str, context: Optional[ErrorContext] = None) -> Table | None:
        """Retrieve a table by its id."""
        ...

    def find_tables_by_number(self, number: int, context: Optional[ErrorContext] = None) -> list[Table]:
        """List the tables carrying the given number, in store order."""
        ...

    def create_table_in_db(self, table: Table, context: Optional[ErrorContext] = None) -> Table:
        """Store a new table."""
        ...

    def list_reservations(self, username: str | None = None, context: Optional[ErrorContext] = None) -> list[Reservation]:
        """List reservations, optionally only those made by one user."""
        ...

    def list_reservations_for_table(self, table_id: str, date: str, context: Optional[ErrorContext] = None) -> list[Reservation]:
        """List the reservations of a table on a date."""
        ...

    def create_reservation_in_db(
        self,
        reservation: Reservation,
        expected_booking_version: int,
        context: Optional[ErrorContext] = None,
    ) -> Reservation:
        """Store a reservation if the table has not been booked since it was read."""
        ...


class BaseDalHandler(ABC):
    """Abstract base class for booking data access implementations."""

    @abstractmethod
    def list_tables(self, context: Optional[ErrorContext] = None) -> list[Table]:
        pass

    @abstractmethod
    def get_table_by_id(self, table_id: str, context: Optional[ErrorContext] = None) -> Table | None:
        pass

    @abstractmethod
    def find_tables_by_number(self, number: int, context: Optional[ErrorContext] = None) -> list[Table]:
        pass

    @abstractmethod
    def create_table_in_db(self, table: Table, context: Optional[ErrorContext] = None) -> Table:
        pass

    @abstractmethod
    def list_reservations(self, username: str | None = None, context: Optional[ErrorContext] = None) -> list[Reservation]:
        pass

    @abstractmethod
    def list_reservations_for_table(self, table_id: str, date: str, context: Optional[ErrorContext] = None) -> list[Reservation]:
        pass

    @abstractmethod
    def create_reservation_in_db(
        self,
        reservation: Reservation,
        expected_booking_version: int,
        context: Optional[ErrorContext] = None,
    ) -> Reservation:
        pass


def get_dal_handler(
    tables_table_name: str,
    reservations_table_name: str,
    region_name: str | None = None,
    endpoint_url: str | None = None,
) -> DalHandler:
    """
    Factory function to get the booking DAL handler.

    Args:
        tables_table_name: Name of the tables table
        reservations_table_name: Name of the reservations table
        region_name: AWS region name
        endpoint_url: DynamoDB endpoint override (for local testing)

    Returns:
        DAL handler instance
    """
    # Import here to avoid circular imports
    from restaurant_service.dal.db_handler import DynamoDbHandler

    return DynamoDbHandler(
        tables_table_name=tables_table_name,
        reservations_table_name=reservations_table_name,
        region_name=region_name,
        endpoint_url=endpoint_url,
    )


__all__ = [
    'DalHandler',
    'BaseDalHandler',
    'get_dal_handler'
]
