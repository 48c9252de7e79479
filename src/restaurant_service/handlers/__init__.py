"""
AWS Lambda Handlers Module.

This module contains the Lambda handler for the booking API. The handler
layer covers request parsing, caller resolution, routing and error
responses; business rules live in the logic layer and persistence in the
data access layer.

The handler uses AWS Lambda Powertools for:
- Structured logging with correlation IDs
- Distributed tracing with X-Ray
- Custom metrics collection
- REST API routing
"""

__version__ = "1.0.0"

# Re-export handler utilities for convenience
from restaurant_service.handlers.utils.observability import logger, tracer, metrics

__all__ = [
    "logger",
    "tracer",
    "metrics",
]
