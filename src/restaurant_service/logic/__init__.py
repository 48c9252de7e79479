"""
Business Logic Layer Module.

This module contains the booking domain operations. It implements the middle
layer of the three-layer architecture: handlers parse and validate requests,
the services here apply the booking rules, and the DAL talks to DynamoDB
and Cognito.

Services receive their data access handles through their constructors; the
Lambda entry point owns their construction.
"""

from restaurant_service.logic.account_service import AccountService
from restaurant_service.logic.conflict_checker import find_conflict, slots_overlap
from restaurant_service.logic.reservation_service import ReservationService
from restaurant_service.logic.table_service import TableService

__all__ = [
    "AccountService",
    "ReservationService",
    "TableService",
    "find_conflict",
    "slots_overlap",
]
