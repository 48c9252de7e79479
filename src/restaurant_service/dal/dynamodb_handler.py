"""
Generic DynamoDB access with consistent error translation and observability.

Every call is wrapped so that boto3 failures surface as DAL errors, which
the API layer answers with a 500. Conditional write failures get their own
error type so callers can turn them into domain outcomes.
"""

import time
from typing import Any, Callable, Dict, List, Optional, TypeVar

import boto3
from aws_lambda_powertools.metrics import MetricUnit
from botocore.exceptions import BotoCoreError, ClientError

from restaurant_service.handlers.utils.errors import BackendUnavailableError, ErrorContext
from restaurant_service.handlers.utils.observability import logger, metrics, tracer

T = TypeVar('T')

CONDITIONAL_FAILURE_CODES = ('ConditionalCheckFailedException', 'TransactionCanceledException')


class DALError(BackendUnavailableError):
    """Base exception for Data Access Layer errors."""

    def __init__(
        self,
        message: str,
        operation: str,
        table_name: str,
        error_code: str = "DAL_ERROR",
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(message=message, error_code=error_code, context=context)
        self.operation = operation
        self.table_name = table_name


class ConditionalCheckFailedError(DALError):
    """Raised when a conditional write or transaction is rejected."""

    def __init__(
        self,
        table_name: str,
        operation: str,
        reasons: Optional[List[str]] = None,
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(
            message=f"Conditional check failed during {operation}",
            operation=operation,
            table_name=table_name,
            error_code="CONDITIONAL_CHECK_FAILED",
            context=context,
        )
        self.reasons = reasons or []


class DynamoDBHandler:
    """DynamoDB table wrapper with error handling and observability."""

    def __init__(
        self,
        table_name: str,
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        resource: Optional[Any] = None,
    ):
        """
        Initialize DynamoDB handler.

        Args:
            table_name: Name of the DynamoDB table
            region_name: AWS region name
            endpoint_url: DynamoDB endpoint URL (for local testing)
            resource: Existing boto3 DynamoDB resource to share between handlers
        """
        self.table_name = table_name

        if resource is None:
            session_config = {}
            if region_name:
                session_config['region_name'] = region_name
            if endpoint_url:
                session_config['endpoint_url'] = endpoint_url
            resource = boto3.resource('dynamodb', **session_config)

        self.dynamodb = resource
        self.table = self.dynamodb.Table(table_name)

        logger.debug("DynamoDB handler initialized", extra={
            "table_name": table_name,
            "endpoint_url": endpoint_url,
        })

    def _call(self, operation: str, func: Callable[[], T], context: Optional[ErrorContext] = None) -> T:
        """Run a DynamoDB call, translating boto errors into DAL errors."""
        operation_start = time.time()

        try:
            result = func()

        except ClientError as e:
            error_code = e.response['Error']['Code']
            error_message = e.response['Error'].get('Message', '')

            metrics.add_metric(name=f"DynamoDB{operation}Error", unit=MetricUnit.Count, value=1)

            if error_code in CONDITIONAL_FAILURE_CODES:
                reasons = [reason.get('Code', 'None') for reason in e.response.get('CancellationReasons', [])]
                logger.info(f"DynamoDB {operation} condition not met", extra={
                    "table_name": self.table_name,
                    "error_code": error_code,
                    "cancellation_reasons": reasons,
                })
                raise ConditionalCheckFailedError(
                    table_name=self.table_name,
                    operation=operation,
                    reasons=reasons,
                    context=context,
                ) from e

            logger.error(f"DynamoDB {operation} error", extra={
                "error_code": error_code,
                "error_message": error_message,
                "table_name": self.table_name,
                "operation": operation,
            })
            raise DALError(
                message=f"DynamoDB error: {error_message}",
                operation=operation,
                table_name=self.table_name,
                error_code=f"DYNAMODB_{error_code}",
                context=context,
            ) from e

        except BotoCoreError as e:
            metrics.add_metric(name=f"DynamoDB{operation}Error", unit=MetricUnit.Count, value=1)
            logger.error(f"DynamoDB connection error during {operation}", extra={
                "error": str(e),
                "table_name": self.table_name,
            })
            raise DALError(
                message=f"Database connection error: {e}",
                operation=operation,
                table_name=self.table_name,
                error_code="DATABASE_CONNECTION_ERROR",
                context=context,
            ) from e

        operation_duration = (time.time() - operation_start) * 1000
        metrics.add_metric(name=f"DynamoDB{operation}Duration", unit=MetricUnit.Milliseconds, value=operation_duration)
        tracer.put_annotation("dynamodb_operation", operation)
        return result

    @tracer.capture_method
    def get_item(
        self,
        key: Dict[str, Any],
        consistent_read: bool = False,
        context: Optional[ErrorContext] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Get a single item.

        Returns:
            Item data or None if not found
        """
        response = self._call(
            "GetItem",
            lambda: self.table.get_item(Key=key, ConsistentRead=consistent_read),
            context,
        )
        return response.get('Item')

    @tracer.capture_method
    def put_item(
        self,
        item: Dict[str, Any],
        condition_expression: Optional[Any] = None,
        context: Optional[ErrorContext] = None,
    ) -> Dict[str, Any]:
        """
        Put an item.

        Raises:
            DALError: If DynamoDB operation fails
            ConditionalCheckFailedError: If condition check fails
        """
        put_item_kwargs: Dict[str, Any] = {'Item': item}
        if condition_expression is not None:
            put_item_kwargs['ConditionExpression'] = condition_expression

        self._call("PutItem", lambda: self.table.put_item(**put_item_kwargs), context)

        logger.info("Item stored successfully", extra={
            "table_name": self.table_name,
            "item_id": item.get('id', 'unknown'),
        })
        return item

    @tracer.capture_method
    def scan_all(
        self,
        filter_expression: Optional[Any] = None,
        consistent_read: bool = False,
        context: Optional[ErrorContext] = None,
    ) -> List[Dict[str, Any]]:
        """
        Scan the whole table, following pagination until exhausted.

        Args:
            filter_expression: Optional boto3 condition applied server side
            consistent_read: Read every page with strong consistency
            context: Error context for tracing

        Returns:
            All matching items in scan order
        """
        scan_kwargs: Dict[str, Any] = {}
        if filter_expression is not None:
            scan_kwargs['FilterExpression'] = filter_expression
        if consistent_read:
            scan_kwargs['ConsistentRead'] = True

        items: List[Dict[str, Any]] = []
        pages = 0
        while True:
            response = self._call("Scan", lambda: self.table.scan(**scan_kwargs), context)
            items.extend(response.get('Items', []))
            pages += 1
            last_evaluated_key = response.get('LastEvaluatedKey')
            if not last_evaluated_key:
                break
            scan_kwargs['ExclusiveStartKey'] = last_evaluated_key

        logger.debug("Scan completed successfully", extra={
            "table_name": self.table_name,
            "items_count": len(items),
            "pages": pages,
        })
        return items

    @tracer.capture_method
    def transact_write_items(
        self,
        transact_items: List[Dict[str, Any]],
        context: Optional[ErrorContext] = None,
    ) -> None:
        """
        Write several items atomically.

        Items use plain Python values; the resource client serializes them.

        Raises:
            ConditionalCheckFailedError: If any condition in the transaction fails
            DALError: If DynamoDB operation fails
        """
        client = self.dynamodb.meta.client
        self._call(
            "TransactWriteItems",
            lambda: client.transact_write_items(TransactItems=transact_items),
            context,
        )

        logger.info("Transaction committed", extra={
            "table_name": self.table_name,
            "transact_items": len(transact_items),
        })

