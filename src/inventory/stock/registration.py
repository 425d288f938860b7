"""Stock record registration — command and handler."""

import structlog
from protean import handle
from protean.fields import Integer, String
from protean.utils.globals import current_domain

from inventory.domain import inventory
from inventory.stock.record import StockRecord

logger = structlog.get_logger(__name__)


@inventory.command(part_of="StockRecord")
class CreateStockRecord:
    """Register a new item with its opening quantity and low-stock threshold."""

    name = String(required=True, max_length=255)
    quantity = Integer(default=0)
    threshold = Integer(default=0)


@inventory.command_handler(part_of=StockRecord)
class CreateStockRecordHandler:
    @handle(CreateStockRecord)
    def create_stock_record(self, command):
        record = StockRecord.create(
            name=command.name,
            quantity=command.quantity or 0,
            threshold=command.threshold or 0,
        )
        current_domain.repository_for(StockRecord).add(record)

        logger.info(
            "Stock record created",
            stock_record_id=str(record.id),
            name=record.name,
            quantity=record.quantity,
            threshold=record.threshold,
        )
        return str(record.id)


def create_stock_record(name, quantity=0, threshold=0):
    """Register a record and return its id."""
    return current_domain.process(
        CreateStockRecord(name=name, quantity=quantity, threshold=threshold),
        asynchronous=False,
    )
