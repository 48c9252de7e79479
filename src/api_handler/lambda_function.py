"""
Booking API Lambda Function - Entry point for the booking API.

This module serves as the Lambda function entry point that delegates to the
booking API handler in the restaurant_service package.
"""

from typing import Any, Dict

from aws_lambda_powertools.utilities.typing import LambdaContext

from restaurant_service.handlers.api_handler import lambda_handler as api_handler


def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Lambda function entry point for the booking API.

    Args:
        event: Lambda event payload (API Gateway event)
        context: Lambda context object

    Returns:
        API Gateway response dictionary
    """
    return api_handler(event, context)
