"""
Error handling utilities for the booking Lambda handler.

This module defines the service error hierarchy and the helpers that turn
errors into structured logs, metrics and API Gateway responses.
"""

import json
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from aws_lambda_powertools.event_handler import Response, content_types
from aws_lambda_powertools.metrics import MetricUnit
from pydantic import BaseModel, Field

from restaurant_service.handlers.utils.observability import logger, metrics, tracer

CORS_HEADERS = {
    'Access-Control-Allow-Headers': 'Content-Type,X-Amz-Date,Authorization,X-Api-Key,X-Amz-Security-Token',
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': '*',
    'Accept-Version': '*',
}

INTERNAL_SERVER_ERROR_MESSAGE = 'Internal Server Error'


class ErrorSeverity(str, Enum):
    """Error severity levels for classification."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class ErrorCategory(str, Enum):
    """Error categories for classification."""
    VALIDATION = "VALIDATION"
    BUSINESS_LOGIC = "BUSINESS_LOGIC"
    EXTERNAL_SERVICE = "EXTERNAL_SERVICE"
    INFRASTRUCTURE = "INFRASTRUCTURE"
    SECURITY = "SECURITY"


class ErrorContext(BaseModel):
    """Context information for errors."""

    request_id: str = Field(description="Unique request identifier")
    user_id: Optional[str] = Field(default=None, description="Caller username if available")
    operation: str = Field(description="Operation being performed")
    resource_id: Optional[str] = Field(default=None, description="Resource identifier")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    additional_data: Dict[str, Any] = Field(default_factory=dict)


class BaseServiceError(Exception):
    """Base exception class for service errors."""

    # Key under which the user message is returned in the response body
    response_key = "message"

    def __init__(
        self,
        message: str,
        error_code: str,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.BUSINESS_LOGIC,
        context: Optional[ErrorContext] = None,
        user_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.severity = severity
        self.category = category
        self.context = context
        self.user_message = user_message or message
        self.error_id = str(uuid.uuid4())

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging."""
        return {
            "error_id": self.error_id,
            "error_code": self.error_code,
            "message": self.message,
            "user_message": self.user_message,
            "severity": self.severity.value,
            "category": self.category.value,
            "context": self.context.model_dump(mode="json") if self.context else None,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }


class ValidationError(BaseServiceError):
    """Raised when a request body or query does not match its schema."""

    def __init__(
        self,
        message: str,
        field_errors: Optional[List[Dict[str, str]]] = None,
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.VALIDATION,
            context=context,
        )
        self.field_errors = field_errors or []


class AccountValidationError(ValidationError):
    """Validation failure on the sign-up and sign-in operations."""

    response_key = "error"


class UnauthorizedError(BaseServiceError):
    """Raised when no caller identity can be resolved from the request."""

    def __init__(self, context: Optional[ErrorContext] = None):
        super().__init__(
            message="Caller identity missing from authorizer claims",
            error_code="UNAUTHORIZED",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.SECURITY,
            context=context,
            user_message="Unauthorized",
        )


class ResourceNotFoundError(BaseServiceError):
    """Raised when a resource addressed by id does not exist."""

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(
            message=f"{resource_type} with ID '{resource_id}' not found",
            error_code="RESOURCE_NOT_FOUND",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.BUSINESS_LOGIC,
            context=context,
            user_message=f"{resource_type} not found",
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class TableNotFoundError(BaseServiceError):
    """Raised when a booking names a table number no table carries."""

    def __init__(self, table_number: int, context: Optional[ErrorContext] = None):
        super().__init__(
            message=f"No table with number {table_number}",
            error_code="TABLE_NOT_FOUND",
            severity=ErrorSeverity.LOW,
            context=context,
            user_message="Table not found",
        )
        self.table_number = table_number


class SlotConflictError(BaseServiceError):
    """Raised when the requested slot overlaps an existing reservation."""

    def __init__(
        self,
        table_id: str,
        date: str,
        conflicting_reservation_id: Optional[str] = None,
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(
            message=f"Table {table_id} already reserved on {date}",
            error_code="SLOT_CONFLICT",
            severity=ErrorSeverity.LOW,
            context=context,
            user_message="Table is already reserved for the selected date and time",
        )
        self.table_id = table_id
        self.date = date
        self.conflicting_reservation_id = conflicting_reservation_id


class BackendUnavailableError(BaseServiceError):
    """Raised when a backing store or service call fails."""

    def __init__(
        self,
        message: str,
        error_code: str = "BACKEND_UNAVAILABLE",
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.INFRASTRUCTURE,
            context=context,
            user_message=INTERNAL_SERVER_ERROR_MESSAGE,
        )


class IdentityProviderError(BaseServiceError):
    """Base for failures reported by the user directory."""

    response_key = "error"

    def __init__(
        self,
        message: str,
        error_code: str,
        user_message: str,
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            severity=ErrorSeverity.MEDIUM,
            category=ErrorCategory.EXTERNAL_SERVICE,
            context=context,
            user_message=user_message,
        )


class UserAlreadyExistsError(IdentityProviderError):
    """Raised when signing up with an email that is already registered."""

    def __init__(self, email: str, context: Optional[ErrorContext] = None):
        super().__init__(
            message=f"User {email} already exists",
            error_code="USER_ALREADY_EXISTS",
            user_message="Email already exists.",
            context=context,
        )


class SignupFailedError(IdentityProviderError):
    """Raised when the user directory rejects a sign-up for any other reason."""

    def __init__(self, message: str, context: Optional[ErrorContext] = None):
        super().__init__(
            message=message,
            error_code="SIGNUP_FAILED",
            user_message="Signup failed.",
            context=context,
        )


class InvalidCredentialsError(IdentityProviderError):
    """Raised when the email/password pair is rejected."""

    def __init__(self, context: Optional[ErrorContext] = None):
        super().__init__(
            message="Credentials rejected by user pool",
            error_code="INVALID_CREDENTIALS",
            user_message="Invalid email or password.",
            context=context,
        )


class AuthenticationFailedError(IdentityProviderError):
    """Raised when sign-in fails without a credential rejection."""

    def __init__(
        self,
        message: str,
        user_message: str = "Authentication failed.",
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(
            message=message,
            error_code="AUTHENTICATION_FAILED",
            user_message=user_message,
            context=context,
        )


def create_error_context(
    request_id: str,
    operation: str,
    user_id: Optional[str] = None,
    resource_id: Optional[str] = None,
    **additional_data: Any,
) -> ErrorContext:
    """Create an error context for consistent error handling."""
    return ErrorContext(
        request_id=request_id,
        user_id=user_id,
        operation=operation,
        resource_id=resource_id,
        additional_data=additional_data,
    )


@tracer.capture_method
def log_error_metrics(error: BaseServiceError) -> None:
    """Log error metrics for monitoring and alerting."""

    metrics.add_metric(name="ErrorCount", unit=MetricUnit.Count, value=1)
    metrics.add_metric(name=f"Error{error.category.value}Count", unit=MetricUnit.Count, value=1)

    tracer.put_annotation("error_code", error.error_code)
    tracer.put_annotation("error_category", error.category.value)
    tracer.put_metadata("error_details", error.to_dict())

    log = logger.error if error.severity in (ErrorSeverity.HIGH, ErrorSeverity.CRITICAL) else logger.warning
    log(
        "Service error occurred",
        extra={
            "error_id": error.error_id,
            "error_code": error.error_code,
            "error_severity": error.severity.value,
            "error_category": error.category.value,
            "error_message": error.message,
            "user_message": error.user_message,
            "context": error.context.model_dump(mode="json") if error.context else None,
        }
    )


def format_error_response(error: BaseServiceError) -> Dict[str, Any]:
    """Format error for API response."""
    return {error.response_key: error.user_message}


def get_http_status_code(error: BaseServiceError) -> int:
    """Get appropriate HTTP status code for error."""

    status_mapping = {
        "VALIDATION_ERROR": 400,
        "UNAUTHORIZED": 401,
        "RESOURCE_NOT_FOUND": 404,
        "TABLE_NOT_FOUND": 400,
        "SLOT_CONFLICT": 400,
        "USER_ALREADY_EXISTS": 400,
        "INVALID_CREDENTIALS": 400,
        "AUTHENTICATION_FAILED": 400,
        "SIGNUP_FAILED": 502,
    }

    return status_mapping.get(error.error_code, 500)


def create_api_response(
    status_code: int,
    body: Any,
    headers: Optional[Dict[str, str]] = None,
) -> Response:
    """Create an API Gateway response carrying the CORS header set."""

    response_headers = dict(CORS_HEADERS)
    if headers:
        response_headers.update(headers)

    if isinstance(body, BaseModel):
        body = body.model_dump_json(by_alias=True)
    elif not isinstance(body, str):
        body = json.dumps(body)

    return Response(
        status_code=status_code,
        content_type=content_types.APPLICATION_JSON,
        body=body,
        headers=response_headers,
    )
