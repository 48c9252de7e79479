"""
Reservation conflict detection.

Slots are closed intervals: a booking ending at 19:00 and another starting
at 19:00 on the same table and date conflict. Zero-length and inverted
slots are not rejected here.
"""

from datetime import time
from typing import Iterable, Optional

from restaurant_service.models.reservation import Reservation


def slots_overlap(existing_start: time, existing_end: time, new_start: time, new_end: time) -> bool:
    """Return True when the two slots share at least one instant, boundaries included."""
    return existing_start <= new_end and new_start <= existing_end


def find_conflict(
    new_start: time,
    new_end: time,
    existing_reservations: Iterable[Reservation],
) -> Optional[Reservation]:
    """
    Find the first existing reservation whose slot overlaps the candidate slot.

    The caller is responsible for passing only reservations of the same
    table and date.

    Args:
        new_start: Candidate slot start
        new_end: Candidate slot end
        existing_reservations: Reservations already booked for the table and date

    Returns:
        The first conflicting reservation, or None if the slot is free
    """
    for reservation in existing_reservations:
        if slots_overlap(reservation.start, reservation.end, new_start, new_end):
            return reservation
    return None
