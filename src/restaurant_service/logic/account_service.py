"""
Business Logic Layer for user accounts.
"""

from typing import Protocol

from aws_lambda_powertools.metrics import MetricUnit

from restaurant_service.handlers.utils.errors import ErrorContext
from restaurant_service.handlers.utils.observability import logger, metrics, tracer
from restaurant_service.models.input import SigninRequest, SignupRequest
from restaurant_service.models.output import MessageOutput, SigninOutput


class IdentityHandler(Protocol):
    """User directory operations the account service relies on."""

    def sign_up(self, email: str, password: str, first_name: str, last_name: str, context: ErrorContext | None = None) -> None:
        ...

    def sign_in(self, email: str, password: str, context: ErrorContext | None = None) -> str:
        ...


class AccountService:
    """Business logic service for sign-up and sign-in."""

    def __init__(self, identity: IdentityHandler):
        self.identity = identity

    @tracer.capture_method
    def signup(self, request: SignupRequest, context: ErrorContext) -> MessageOutput:
        self.identity.sign_up(
            email=request.email,
            password=request.password,
            first_name=request.first_name,
            last_name=request.last_name,
            context=context,
        )
        metrics.add_metric(name="UserSignup", unit=MetricUnit.Count, value=1)
        return MessageOutput(message="User created successfully.")

    @tracer.capture_method
    def signin(self, request: SigninRequest, context: ErrorContext) -> SigninOutput:
        logger.info("Received signin request", extra={"email": request.email})
        id_token = self.identity.sign_in(email=request.email, password=request.password, context=context)
        metrics.add_metric(name="UserSignin", unit=MetricUnit.Count, value=1)
        return SigninOutput(id_token=id_token)
