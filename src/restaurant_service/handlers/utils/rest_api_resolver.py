"""
REST API resolver utilities for the booking Lambda handler.

This module declares the closed set of API operations, builds the API Gateway
REST resolver with the service's error handlers, and parses request bodies
into the strict request models.
"""

import json
from enum import Enum
from typing import Type, TypeVar

from aws_lambda_powertools.event_handler import APIGatewayRestResolver, Response
from aws_lambda_powertools.event_handler.exceptions import NotFoundError
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.data_classes import APIGatewayProxyEvent
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from restaurant_service.handlers.utils.errors import (
    INTERNAL_SERVER_ERROR_MESSAGE,
    BaseServiceError,
    ErrorContext,
    ValidationError,
    create_api_response,
    format_error_response,
    get_http_status_code,
    log_error_metrics,
)
from restaurant_service.handlers.utils.observability import logger, metrics

T = TypeVar('T', bound=BaseModel)


class Operation(Enum):
    """Operations exposed by the booking API, keyed by HTTP method and path."""

    SIGNUP = ('POST', '/signup')
    SIGNIN = ('POST', '/signin')
    LIST_TABLES = ('GET', '/tables')
    CREATE_TABLE = ('POST', '/tables')
    GET_TABLE = ('GET', '/tables/<table_id>')
    LIST_RESERVATIONS = ('GET', '/reservations')
    CREATE_RESERVATION = ('POST', '/reservations')

    def __init__(self, method: str, rule: str):
        self.method = method
        self.rule = rule

    @property
    def requires_auth(self) -> bool:
        return self not in (Operation.SIGNUP, Operation.SIGNIN)


def create_resolver() -> APIGatewayRestResolver:
    """
    Create an API Gateway REST resolver with the service error handlers.

    Service errors become their mapped status and message; anything else is
    logged with its stack trace and answered with a 500.
    """
    app = APIGatewayRestResolver()

    @app.not_found
    def handle_not_found(_: NotFoundError) -> Response:
        logger.info("Route not found", extra={
            "path": app.current_event.path,
            "http_method": app.current_event.http_method,
        })
        return create_api_response(status_code=404, body={"message": "Not Found"})

    @app.exception_handler(BaseServiceError)
    def handle_service_error(error: BaseServiceError) -> Response:
        log_error_metrics(error)
        return create_api_response(
            status_code=get_http_status_code(error),
            body=format_error_response(error),
        )

    @app.exception_handler(Exception)
    def handle_unexpected_error(error: Exception) -> Response:
        logger.exception("Unexpected error in handler", extra={"error": str(error)})
        metrics.add_metric(name="UnexpectedError", unit=MetricUnit.Count, value=1)
        return create_api_response(status_code=500, body={"message": INTERNAL_SERVER_ERROR_MESSAGE})

    return app


def get_request_id(event: APIGatewayProxyEvent) -> str:
    request_context = event.raw_event.get('requestContext') or {}
    return request_context.get('requestId', 'unknown')


def _validation_message(error: PydanticValidationError, default_message: str) -> str:
    """Surface a validator's own message only when every failure came from a validator."""
    errors = error.errors()
    if errors and all(item['type'] == 'value_error' for item in errors):
        return str(errors[0]['ctx']['error'])
    return default_message


def parse_body(
    event: APIGatewayProxyEvent,
    model: Type[T],
    message: str,
    context: ErrorContext,
    error_cls: Type[ValidationError] = ValidationError,
    use_field_messages: bool = False,
) -> T:
    """
    Parse and validate a JSON request body.

    Args:
        event: Current API Gateway event
        model: Request model to validate against
        message: Error message returned when validation fails
        context: Error context for tracing
        error_cls: Validation error type to raise
        use_field_messages: Return a field validator's message instead of
            ``message`` when only field validators failed

    Raises:
        ValidationError: If the body is not JSON or does not match the model
    """
    try:
        payload = json.loads(event.body or "{}")
    except json.JSONDecodeError as e:
        raise error_cls(message=message, context=context) from e

    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        field_errors = [
            {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
            for error in e.errors()
        ]
        logger.info("Request validation failed", extra={
            "model": model.__name__,
            "validation_errors": field_errors,
        })
        error_message = _validation_message(e, message) if use_field_messages else message
        raise error_cls(message=error_message, field_errors=field_errors, context=context) from e
