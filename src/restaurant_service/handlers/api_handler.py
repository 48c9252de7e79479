"""
Booking API Handler - Lambda function for the restaurant booking API.

This module implements the handler layer: it maps each API operation to a
service call, resolves the caller for protected operations, and owns the
construction of the services the operations use.
"""

from typing import Any, Callable, Dict, Optional

from aws_lambda_powertools.event_handler import APIGatewayRestResolver, Response
from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from restaurant_service.dal import get_dal_handler
from restaurant_service.dal.identity_handler import CognitoIdentityHandler
from restaurant_service.handlers.models.env_vars import BookingHandlerEnvVars, get_handler_env_vars
from restaurant_service.handlers.utils.auth import get_caller_username
from restaurant_service.handlers.utils.errors import (
    AccountValidationError,
    create_api_response,
    create_error_context,
)
from restaurant_service.handlers.utils.observability import logger, metrics, tracer
from restaurant_service.handlers.utils.rest_api_resolver import (
    Operation,
    create_resolver,
    get_request_id,
    parse_body,
)
from restaurant_service.logic import AccountService, ReservationService, TableService
from restaurant_service.models.input import (
    CreateReservationRequest,
    CreateTableRequest,
    SigninRequest,
    SignupRequest,
)

SIGNUP_REQUIRED_MESSAGE = 'All fields are required.'
SIGNIN_REQUIRED_MESSAGE = 'Email and password are required.'
TABLE_REQUIRED_MESSAGE = 'Table number, capacity, and location are required'
RESERVATION_REQUIRED_MESSAGE = 'Table number, date, slotTimeStart, and slotTimeEnd are required'

_app: Optional[APIGatewayRestResolver] = None


def create_app(
    table_service: TableService,
    reservation_service: ReservationService,
    account_service: AccountService,
) -> APIGatewayRestResolver:
    """
    Create the booking API resolver with every operation routed.

    Args:
        table_service: Service for table operations
        reservation_service: Service for reservation operations
        account_service: Service for sign-up and sign-in

    Returns:
        Resolver ready to resolve API Gateway REST events
    """
    app = create_resolver()

    def dispatch(operation: Operation, path_params: Dict[str, str]) -> Response:
        event = app.current_event
        context = create_error_context(
            request_id=get_request_id(event),
            operation=operation.name.lower(),
            resource_id=path_params.get('table_id'),
        )
        tracer.put_annotation("operation", operation.name)

        username = None
        if operation.requires_auth:
            username = get_caller_username(event, context)
            context.user_id = username

        match operation:
            case Operation.SIGNUP:
                signup_request = parse_body(
                    event, SignupRequest, SIGNUP_REQUIRED_MESSAGE, context,
                    error_cls=AccountValidationError, use_field_messages=True,
                )
                return create_api_response(200, account_service.signup(signup_request, context))

            case Operation.SIGNIN:
                signin_request = parse_body(
                    event, SigninRequest, SIGNIN_REQUIRED_MESSAGE, context,
                    error_cls=AccountValidationError,
                )
                return create_api_response(200, account_service.signin(signin_request, context))

            case Operation.LIST_TABLES:
                return create_api_response(200, table_service.list_tables(context))

            case Operation.CREATE_TABLE:
                table_request = parse_body(event, CreateTableRequest, TABLE_REQUIRED_MESSAGE, context)
                return create_api_response(200, table_service.create_table(table_request, context))

            case Operation.GET_TABLE:
                return create_api_response(200, table_service.get_table(path_params['table_id'], context))

            case Operation.LIST_RESERVATIONS:
                query = event.query_string_parameters or {}
                return create_api_response(
                    200,
                    reservation_service.list_reservations(context, username=query.get('user')),
                )

            case Operation.CREATE_RESERVATION:
                reservation_request = parse_body(
                    event, CreateReservationRequest, RESERVATION_REQUIRED_MESSAGE, context,
                )
                return create_api_response(
                    200,
                    reservation_service.create_reservation(reservation_request, username, context),
                )

        raise ValueError(f"Unhandled operation: {operation}")

    for operation in Operation:
        app.route(rule=operation.rule, method=operation.method)(_route_for(operation, dispatch))

    return app


def _route_for(operation: Operation, dispatch: Callable[[Operation, Dict[str, str]], Response]) -> Callable[..., Response]:
    def route(**path_params: str) -> Response:
        return dispatch(operation, path_params)

    route.__name__ = operation.name.lower()
    return route


def build_app(env_vars: BookingHandlerEnvVars) -> APIGatewayRestResolver:
    """Wire the services to DynamoDB and Cognito from the environment."""
    dal = get_dal_handler(
        tables_table_name=env_vars.TABLES_TABLE,
        reservations_table_name=env_vars.RESERVATIONS_TABLE,
        region_name=env_vars.AWS_REGION,
        endpoint_url=env_vars.DYNAMODB_ENDPOINT,
    )
    identity = CognitoIdentityHandler(
        user_pool_id=env_vars.COGNITO_USER_POOL_ID,
        client_id=env_vars.COGNITO_CLIENT_ID,
        region_name=env_vars.AWS_REGION,
    )
    logger.info("Booking API initialized", extra={
        "tables_table": env_vars.TABLES_TABLE,
        "reservations_table": env_vars.RESERVATIONS_TABLE,
        "environment": env_vars.ENVIRONMENT,
    })
    return create_app(
        table_service=TableService(dal),
        reservation_service=ReservationService(dal),
        account_service=AccountService(identity),
    )


def get_app() -> APIGatewayRestResolver:
    """Return the resolver for this execution environment, building it on first use."""
    global _app
    if _app is None:
        _app = build_app(get_handler_env_vars())
    return _app


@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Main Lambda handler for the booking API.

    Args:
        event: API Gateway REST proxy event
        context: Lambda context

    Returns:
        API Gateway proxy response
    """
    logger.info("Booking API request received", extra={
        "http_method": event.get("httpMethod"),
        "path": event.get("path"),
    })
    metrics.add_metric(name="RequestCount", unit=MetricUnit.Count, value=1)

    return get_app().resolve(event, context)
