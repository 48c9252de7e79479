"""
Caller identity resolution.

API Gateway validates the Cognito id token with a user pool authorizer and
forwards the token claims under ``requestContext.authorizer.claims``; the
handler only reads them.
"""

from aws_lambda_powertools.utilities.data_classes import APIGatewayProxyEvent

from restaurant_service.handlers.utils.errors import ErrorContext, UnauthorizedError
from restaurant_service.handlers.utils.observability import logger

COGNITO_USERNAME_CLAIM = 'cognito:username'


def get_authorizer_claims(event: APIGatewayProxyEvent) -> dict:
    """Return the authorizer claims attached to the request, if any."""
    request_context = event.raw_event.get('requestContext') or {}
    authorizer = request_context.get('authorizer') or {}
    return authorizer.get('claims') or {}


def get_caller_username(event: APIGatewayProxyEvent, context: ErrorContext) -> str:
    """
    Resolve the caller's user pool username.

    Raises:
        UnauthorizedError: If the request carries no username claim
    """
    username = get_authorizer_claims(event).get(COGNITO_USERNAME_CLAIM)
    if username:
        return username

    if event.get_header_value('Authorization'):
        logger.debug('Auth header present, but not processed through requestContext.authorizer')
    raise UnauthorizedError(context=context)
