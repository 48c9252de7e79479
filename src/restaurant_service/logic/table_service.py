"""
Business Logic Layer for restaurant tables.
"""

from aws_lambda_powertools.metrics import MetricUnit

from restaurant_service.dal import DalHandler
from restaurant_service.handlers.utils.errors import ErrorContext, ResourceNotFoundError
from restaurant_service.handlers.utils.observability import logger, metrics, tracer
from restaurant_service.models.input import CreateTableRequest
from restaurant_service.models.output import CreateTableOutput, TableOutput, TablesOutput
from restaurant_service.models.table import Table


class TableService:
    """Business logic service for restaurant tables."""

    def __init__(self, dal: DalHandler):
        self.dal = dal

    @tracer.capture_method
    def list_tables(self, context: ErrorContext) -> TablesOutput:
        tables = self.dal.list_tables(context=context)
        logger.info("Tables listed", extra={"count": len(tables)})
        return TablesOutput(tables=[TableOutput.from_table(table) for table in tables])

    @tracer.capture_method
    def get_table(self, table_id: str, context: ErrorContext) -> TableOutput:
        """
        Get a table by id.

        Raises:
            ResourceNotFoundError: If no table has the id
        """
        table = self.dal.get_table_by_id(table_id, context=context)
        if table is None:
            raise ResourceNotFoundError(resource_type="Table", resource_id=table_id, context=context)
        return TableOutput.from_table(table)

    @tracer.capture_method
    def create_table(self, request: CreateTableRequest, context: ErrorContext) -> CreateTableOutput:
        """
        Create a table, generating an id when the request has none.

        Returns:
            The table id, echoed in the type it was supplied in
        """
        table = Table.create(
            number=request.number,
            places=request.places,
            is_vip=request.is_vip,
            min_order=request.min_order,
            table_id=str(request.id) if request.id is not None else None,
        )
        self.dal.create_table_in_db(table, context=context)

        metrics.add_metric(name="TableCreated", unit=MetricUnit.Count, value=1)
        logger.info("Table created", extra={"table_id": table.id, "number": table.number})

        return CreateTableOutput(id=request.id if request.id is not None else table.id)
