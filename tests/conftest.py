"""
Pytest configuration and shared fixtures for the restaurant booking service.

This module provides common test fixtures and configuration used across
unit, integration, and end-to-end tests.
"""

import json
import os
import pytest
from typing import Any, Dict, Optional
from unittest.mock import Mock

import boto3
from moto import mock_aws

from restaurant_service.handlers.utils.errors import create_error_context
from restaurant_service.handlers.utils.observability import metrics
from restaurant_service.models.reservation import Reservation
from restaurant_service.models.table import Table

TABLES_TABLE = "test-tables"
RESERVATIONS_TABLE = "test-reservations"


# Test environment configuration
@pytest.fixture(scope="session", autouse=True)
def test_environment():
    """Set up test environment variables."""
    os.environ.update({
        "AWS_DEFAULT_REGION": "us-east-1",
        "AWS_REGION": "us-east-1",
        "AWS_ACCESS_KEY_ID": "test",
        "AWS_SECRET_ACCESS_KEY": "test",
        "TABLES_TABLE": TABLES_TABLE,
        "RESERVATIONS_TABLE": RESERVATIONS_TABLE,
        "COGNITO_USER_POOL_ID": "us-east-1_testpool",
        "COGNITO_CLIENT_ID": "test-client-id",
        "ENVIRONMENT": "test",
        "POWERTOOLS_SERVICE_NAME": "test-restaurant-booking",
        "LOG_LEVEL": "DEBUG",
        "POWERTOOLS_TRACE_DISABLED": "true",  # Disable X-Ray in tests
    })


# DynamoDB fixtures
@pytest.fixture
def dynamodb_tables():
    """Create the mock tables and reservations tables."""
    with mock_aws():
        dynamodb = boto3.resource("dynamodb", region_name="us-east-1")

        tables = {}
        for table_name in (TABLES_TABLE, RESERVATIONS_TABLE):
            table = dynamodb.create_table(
                TableName=table_name,
                KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
                AttributeDefinitions=[{"AttributeName": "id", "AttributeType": "S"}],
                BillingMode="PAY_PER_REQUEST",
            )
            table.wait_until_exists()
            tables[table_name] = table

        yield tables


@pytest.fixture
def dal(dynamodb_tables):
    """Booking DAL bound to the mock tables."""
    from restaurant_service.dal.db_handler import DynamoDbHandler

    return DynamoDbHandler(TABLES_TABLE, RESERVATIONS_TABLE, region_name="us-east-1")


# Sample data fixtures
@pytest.fixture
def error_context():
    """Error context for calling services directly."""
    return create_error_context(request_id="test-request-id-123", operation="test")


@pytest.fixture
def sample_table() -> Table:
    return Table.create(number=5, places=4, is_vip=False, table_id="1")


@pytest.fixture
def sample_reservation(sample_table) -> Reservation:
    return Reservation.create(
        table_id=sample_table.id,
        table_number=sample_table.number,
        username="jane@example.com",
        date="2024-06-01",
        slot_time_start="18:00",
        slot_time_end="19:00",
        client_name="Jane Doe",
        phone_number="+380501234567",
    )


@pytest.fixture
def make_api_event():
    """Build API Gateway REST proxy events, optionally carrying authorizer claims."""

    def build(
        http_method: str,
        path: str,
        body: Optional[Any] = None,
        username: Optional[str] = None,
        query: Optional[Dict[str, str]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        request_context: Dict[str, Any] = {
            "requestId": "test-request-id-123",
            "accountId": "123456789012",
            "stage": "prod",
            "httpMethod": http_method,
            "path": path,
            "protocol": "HTTP/1.1",
            "requestTimeEpoch": 1717257600000,
            "identity": {
                "sourceIp": "127.0.0.1",
                "userAgent": "test-agent/1.0",
            },
        }
        if username is not None:
            request_context["authorizer"] = {
                "claims": {
                    "cognito:username": username,
                    "email": username,
                }
            }

        return {
            "resource": path,
            "httpMethod": http_method,
            "path": path,
            "headers": {
                "Content-Type": "application/json",
                "User-Agent": "test-agent/1.0",
                **(headers or {}),
            },
            "multiValueHeaders": {},
            "body": body if body is None or isinstance(body, str) else json.dumps(body),
            "requestContext": request_context,
            "pathParameters": None,
            "queryStringParameters": query,
            "multiValueQueryStringParameters": {k: [v] for k, v in query.items()} if query else None,
            "stageVariables": None,
            "isBase64Encoded": False,
        }

    return build


@pytest.fixture
def lambda_context():
    """Create a mock Lambda context for testing."""
    context = Mock()
    context.function_name = "test-lambda-function"
    context.function_version = "1"
    context.invoked_function_arn = "arn:aws:lambda:us-east-1:123456789012:function:test-lambda-function"
    context.memory_limit_in_mb = "512"
    context.remaining_time_in_millis = lambda: 30000
    context.aws_request_id = "test-request-id-123"
    context.log_group_name = "/aws/lambda/test-lambda-function"
    context.log_stream_name = "2024/01/01/[$LATEST]test123"
    return context


# Integration test fixtures
@pytest.fixture
def integration_client():
    """HTTP client for deployed API testing."""
    import httpx

    base_url = os.environ.get("API_BASE_URL")
    if not base_url:
        pytest.skip("API_BASE_URL is not set")

    with httpx.Client(base_url=base_url, timeout=30.0) as client:
        yield client


# Error simulation fixtures
@pytest.fixture
def mock_client_error():
    """Build botocore ClientErrors for testing error handling."""
    from botocore.exceptions import ClientError

    def create_error(error_code: str, message: str = "Test error", operation_name: str = "TestOperation"):
        return ClientError(
            error_response={
                "Error": {
                    "Code": error_code,
                    "Message": message,
                }
            },
            operation_name=operation_name,
        )

    return create_error


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "e2e" in str(item.fspath):
            item.add_marker(pytest.mark.e2e)


@pytest.fixture(autouse=True)
def reset_metrics():
    """Drop metrics buffered by the previous test."""
    metrics.clear_metrics()
    yield
    metrics.clear_metrics()
