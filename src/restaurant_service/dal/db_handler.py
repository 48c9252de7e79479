"""
DynamoDB implementation of the booking Data Access Layer.

Tables and reservations live in two DynamoDB tables keyed by ``id``. Items
keep the attribute names the booking API has always stored (``isVip``,
``minOrder``, ``tableId``, ``time``, ``slotTimeEnd``...).
"""

from typing import Any, List, Optional

import boto3
from boto3.dynamodb.conditions import Attr

from restaurant_service.dal import BaseDalHandler
from restaurant_service.dal.dynamodb_handler import DynamoDBHandler
from restaurant_service.handlers.utils.errors import ErrorContext
from restaurant_service.handlers.utils.observability import logger, tracer
from restaurant_service.models.reservation import Reservation
from restaurant_service.models.table import Table


class DynamoDbHandler(BaseDalHandler):
    """DynamoDB implementation of the booking data access layer."""

    def __init__(
        self,
        tables_table_name: str,
        reservations_table_name: str,
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
    ) -> None:
        """
        Initialize the DynamoDB handler.

        Args:
            tables_table_name: Name of the DynamoDB table holding restaurant tables
            reservations_table_name: Name of the DynamoDB table holding reservations
            region_name: AWS region name
            endpoint_url: DynamoDB endpoint URL (for local testing)
        """
        session_config = {}
        if region_name:
            session_config['region_name'] = region_name
        if endpoint_url:
            session_config['endpoint_url'] = endpoint_url
        resource: Any = boto3.resource('dynamodb', **session_config)

        self.tables = DynamoDBHandler(tables_table_name, resource=resource)
        self.reservations = DynamoDBHandler(reservations_table_name, resource=resource)
        logger.debug('Booking DAL initialized', extra={
            'tables_table': tables_table_name,
            'reservations_table': reservations_table_name,
        })

    @tracer.capture_method
    def list_tables(self, context: Optional[ErrorContext] = None) -> List[Table]:
        items = self.tables.scan_all(context=context)
        return [Table.from_dict(item) for item in items]

    @tracer.capture_method
    def get_table_by_id(self, table_id: str, context: Optional[ErrorContext] = None) -> Optional[Table]:
        item = self.tables.get_item(key={'id': table_id}, context=context)
        if not item:
            logger.info(f'Table not found: {table_id}')
            return None
        return Table.from_dict(item)

    @tracer.capture_method
    def find_tables_by_number(self, number: int, context: Optional[ErrorContext] = None) -> List[Table]:
        items = self.tables.scan_all(
            filter_expression=Attr('number').eq(number),
            consistent_read=True,
            context=context,
        )
        return [Table.from_dict(item) for item in items]

    @tracer.capture_method
    def create_table_in_db(self, table: Table, context: Optional[ErrorContext] = None) -> Table:
        self.tables.put_item(item=table.to_dict(), context=context)
        tracer.put_annotation('table_created', table.id)
        return table

    @tracer.capture_method
    def list_reservations(
        self,
        username: Optional[str] = None,
        context: Optional[ErrorContext] = None,
    ) -> List[Reservation]:
        filter_expression = Attr('username').eq(username) if username else None
        items = self.reservations.scan_all(filter_expression=filter_expression, context=context)
        return [Reservation.from_dict(item) for item in items]

    @tracer.capture_method
    def list_reservations_for_table(
        self,
        table_id: str,
        date: str,
        context: Optional[ErrorContext] = None,
    ) -> List[Reservation]:
        items = self.reservations.scan_all(
            filter_expression=Attr('tableId').eq(table_id) & Attr('date').eq(date),
            consistent_read=True,
            context=context,
        )
        logger.debug(f'Found {len(items)} reservations for table {table_id} on {date}')
        return [Reservation.from_dict(item) for item in items]

    @tracer.capture_method
    def create_reservation_in_db(
        self,
        reservation: Reservation,
        expected_booking_version: int,
        context: Optional[ErrorContext] = None,
    ) -> Reservation:
        """
        Persist a reservation and bump the table's booking version atomically.

        The write only succeeds while the table's ``bookingVersion`` still
        equals ``expected_booking_version``, so two bookings checked against
        the same snapshot of a table cannot both land.

        Raises:
            ConditionalCheckFailedError: If another booking for the table was
                written since the snapshot, or the reservation id is taken
            DALError: If DynamoDB operation fails
        """
        self.reservations.transact_write_items(
            transact_items=[
                {
                    'Update': {
                        'TableName': self.tables.table_name,
                        'Key': {'id': reservation.table_id},
                        'UpdateExpression': 'SET bookingVersion = :next',
                        'ConditionExpression': (
                            'attribute_exists(id) AND '
                            '(attribute_not_exists(bookingVersion) OR bookingVersion = :expected)'
                        ),
                        'ExpressionAttributeValues': {
                            ':expected': expected_booking_version,
                            ':next': expected_booking_version + 1,
                        },
                    }
                },
                {
                    'Put': {
                        'TableName': self.reservations.table_name,
                        'Item': reservation.to_dict(),
                        'ConditionExpression': 'attribute_not_exists(id)',
                    }
                },
            ],
            context=context,
        )

        logger.info(f'Successfully created reservation in database: {reservation.id}')
        tracer.put_annotation('reservation_created', reservation.id)
        return reservation
