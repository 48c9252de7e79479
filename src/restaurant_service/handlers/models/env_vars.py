"""
Environment variable models for type-safe configuration.

This module defines the Pydantic model for the environment variables read by
the booking Lambda handler entry point.
"""

from typing import Annotated, Optional

from aws_lambda_env_modeler import get_environment_variables
from pydantic import BaseModel, Field


class BookingHandlerEnvVars(BaseModel):
    """Environment variables for the booking API handler."""

    # DynamoDB table holding restaurant tables
    TABLES_TABLE: Annotated[str, Field(
        description='DynamoDB table name for restaurant tables',
        min_length=1
    )]

    # DynamoDB table holding reservations
    RESERVATIONS_TABLE: Annotated[str, Field(
        description='DynamoDB table name for reservations',
        min_length=1
    )]

    # Cognito user pool used for sign-up and sign-in
    COGNITO_USER_POOL_ID: Annotated[str, Field(
        description='Cognito user pool id',
        min_length=1
    )]

    COGNITO_CLIENT_ID: Annotated[str, Field(
        description='Cognito app client id allowed to run admin auth flows',
        min_length=1
    )]

    # For local testing against DynamoDB Local
    DYNAMODB_ENDPOINT: Annotated[Optional[str], Field(
        description='Override endpoint URL for DynamoDB'
    )] = None

    AWS_REGION: Annotated[str, Field(
        description='AWS region for service deployment'
    )] = 'us-east-1'

    # Environment name (dev, test, staging, prod)
    ENVIRONMENT: Annotated[str, Field(
        description='Deployment environment name',
        pattern=r'^(dev|test|staging|prod)$'
    )] = 'dev'

    POWERTOOLS_SERVICE_NAME: Annotated[str, Field(
        description='Service name for AWS Powertools'
    )] = 'restaurant-booking'

    LOG_LEVEL: Annotated[str, Field(
        description='Log level for application logging',
        pattern=r'^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$'
    )] = 'INFO'

    POWERTOOLS_TRACE_DISABLED: Annotated[str, Field(
        description='Disable X-Ray tracing (true/false)',
        pattern=r'^(true|false)$'
    )] = 'false'


def get_handler_env_vars() -> BookingHandlerEnvVars:
    """
    Get typed environment variables for the booking handler.

    Returns:
        Validated environment variables model instance
    """
    return get_environment_variables(model=BookingHandlerEnvVars)
