"""
Business Logic Layer for reservations.

Booking resolves the table by number, checks the requested slot against the
table's reservations for the date, and writes the reservation only if no
conflict exists.
"""

from typing import Optional

from aws_lambda_powertools.metrics import MetricUnit

from restaurant_service.dal import DalHandler
from restaurant_service.dal.dynamodb_handler import ConditionalCheckFailedError
from restaurant_service.handlers.utils.errors import (
    BackendUnavailableError,
    ErrorContext,
    SlotConflictError,
    TableNotFoundError,
)
from restaurant_service.handlers.utils.observability import logger, metrics, tracer
from restaurant_service.logic.conflict_checker import find_conflict
from restaurant_service.models.input import CreateReservationRequest
from restaurant_service.models.output import CreateReservationOutput, ReservationOutput, ReservationsOutput
from restaurant_service.models.reservation import Reservation
from restaurant_service.models.table import Table

# Write attempts per booking while other bookings keep bumping the table version
MAX_BOOKING_ATTEMPTS = 3


class ReservationService:
    """Business logic service for reservations."""

    def __init__(self, dal: DalHandler):
        """
        Initialize reservation service.

        Args:
            dal: Booking data access handler
        """
        self.dal = dal

    @tracer.capture_method
    def _resolve_table(self, table_number: int, context: ErrorContext) -> Table:
        """
        Resolve a table number to a table.

        Raises:
            TableNotFoundError: If no table carries the number
        """
        tables = self.dal.find_tables_by_number(table_number, context=context)
        if not tables:
            raise TableNotFoundError(table_number=table_number, context=context)

        if len(tables) > 1:
            # TODO: enforce unique table numbers in create_table once existing duplicates are cleaned up
            logger.warning("Several tables share a number, using the first match", extra={
                "table_number": table_number,
                "table_ids": [table.id for table in tables],
            })

        return tables[0]

    @tracer.capture_method
    def create_reservation(
        self,
        request: CreateReservationRequest,
        username: str,
        context: ErrorContext,
    ) -> CreateReservationOutput:
        """
        Book a table for a time slot.

        The conflict check and the write are bound by the table's booking
        version. When another booking lands in between, the table and its
        reservations for the date are read again and the check is repeated,
        so a concurrent booking only causes a conflict if it actually
        overlaps the requested slot.

        Args:
            request: Validated booking request
            username: Caller's user pool username
            context: Error context for tracing

        Returns:
            Id of the new reservation

        Raises:
            TableNotFoundError: If the table number does not exist
            SlotConflictError: If the slot overlaps an existing reservation
            BackendUnavailableError: If the table stays contended for every attempt
            DALError: If a store call fails
        """
        logger.info("Creating reservation", extra={
            "table_number": request.table_number,
            "date": request.date,
            "slot_time_start": request.slot_time_start,
            "slot_time_end": request.slot_time_end,
            "request_id": context.request_id,
        })

        for attempt in range(1, MAX_BOOKING_ATTEMPTS + 1):
            table = self._resolve_table(request.table_number, context)
            self._check_slot_free(table, request, context)

            reservation = Reservation.create(
                table_id=table.id,
                table_number=table.number,
                username=username,
                date=request.date,
                slot_time_start=request.slot_time_start,
                slot_time_end=request.slot_time_end,
                client_name=request.client_name,
                phone_number=request.phone_number,
            )

            try:
                self.dal.create_reservation_in_db(
                    reservation,
                    expected_booking_version=table.booking_version,
                    context=context,
                )
            except ConditionalCheckFailedError as e:
                # Another booking for this table landed between our read and write
                metrics.add_metric(name="ConcurrentBookingRetry", unit=MetricUnit.Count, value=1)
                logger.warning("Concurrent booking detected, checking the slot again", extra={
                    "table_id": table.id,
                    "date": request.date,
                    "attempt": attempt,
                    "reasons": e.reasons,
                })
                continue

            metrics.add_metric(name="ReservationCreated", unit=MetricUnit.Count, value=1)
            tracer.put_annotation("reservation_id", reservation.id)

            return CreateReservationOutput(reservation_id=reservation.id)

        raise BackendUnavailableError(
            message=f"Table {request.table_number} stayed contended for {MAX_BOOKING_ATTEMPTS} booking attempts",
            error_code="BOOKING_CONTENDED",
            context=context,
        )

    def _check_slot_free(self, table: Table, request: CreateReservationRequest, context: ErrorContext) -> None:
        existing = self.dal.list_reservations_for_table(table.id, request.date, context=context)
        conflict = find_conflict(request.start, request.end, existing)
        if conflict is not None:
            metrics.add_metric(name="ReservationConflict", unit=MetricUnit.Count, value=1)
            raise SlotConflictError(
                table_id=table.id,
                date=request.date,
                conflicting_reservation_id=conflict.id,
                context=context,
            )

    @tracer.capture_method
    def list_reservations(
        self,
        context: ErrorContext,
        username: Optional[str] = None,
    ) -> ReservationsOutput:
        """List reservations, optionally only those made by ``username``."""
        reservations = self.dal.list_reservations(username=username, context=context)
        logger.info("Reservations listed", extra={
            "count": len(reservations),
            "username_filter": username,
        })
        return ReservationsOutput(
            reservations=[ReservationOutput.from_reservation(reservation) for reservation in reservations]
        )
