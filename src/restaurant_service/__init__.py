"""
Restaurant Booking Service Module.

This package implements the restaurant table booking API following the
three-layer architecture pattern:

- handlers: API Gateway entry point, routing and request parsing
- logic: Booking rules, slot conflict detection and account operations
- dal: DynamoDB and Cognito access
- models: Request, response and domain models
"""

__version__ = "1.0.0"
__description__ = "Restaurant table booking API on AWS Lambda"

# Re-export commonly used classes for convenience
from restaurant_service.models.reservation import Reservation
from restaurant_service.models.table import Table
from restaurant_service.models.input import CreateReservationRequest, CreateTableRequest
from restaurant_service.handlers.utils.observability import logger, tracer, metrics

__all__ = [
    "Reservation",
    "Table",
    "CreateReservationRequest",
    "CreateTableRequest",
    "logger",
    "tracer",
    "metrics",
]
