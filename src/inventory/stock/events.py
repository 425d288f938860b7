"""Domain events for the StockRecord aggregate.

Events are immutable facts about stock movements. They are committed
alongside the aggregate by the unit of work and give downstream consumers
(reports, external alerting) a stream of what happened to each record.
"""

from protean.fields import DateTime, Identifier, Integer, String

from inventory.domain import inventory


@inventory.event(part_of="StockRecord")
class StockRecordCreated:
    """A new stock record was registered with its opening quantity."""

    __version__ = 1

    stock_record_id = Identifier(required=True)
    name = String(required=True)
    initial_quantity = Integer(required=True)
    threshold = Integer(required=True)
    created_at = DateTime(required=True)


@inventory.event(part_of="StockRecord")
class StockConsumed:
    """Units were taken out of stock."""

    __version__ = 1

    stock_record_id = Identifier(required=True)
    amount = Integer(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    consumed_at = DateTime(required=True)


@inventory.event(part_of="StockRecord")
class StockRestocked:
    """Units were added back to stock."""

    __version__ = 1

    stock_record_id = Identifier(required=True)
    amount = Integer(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    restocked_at = DateTime(required=True)


@inventory.event(part_of="StockRecord")
class LowStockDetected:
    """Quantity is below the record's threshold after a transaction."""

    __version__ = 1

    stock_record_id = Identifier(required=True)
    name = String(required=True)
    quantity = Integer(required=True)
    threshold = Integer(required=True)
    detected_at = DateTime(required=True)
