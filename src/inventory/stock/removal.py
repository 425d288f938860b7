"""Stock record removal — command and handler.

Removal is a hard delete: the record and its transaction history are
deleted in the same unit of work, so neither can be fetched afterwards.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from inventory.domain import inventory
from inventory.stock.ledger import DEFAULT_LOCK_TIMEOUT
from inventory.stock.record import StockRecord, Transaction
from inventory.utils.locking import lock

logger = structlog.get_logger(__name__)


@inventory.command(part_of="StockRecord")
class RemoveStockRecord:
    stock_record_id = Identifier(required=True)


@inventory.command_handler(part_of=StockRecord)
class RemoveStockRecordHandler:
    @handle(RemoveStockRecord)
    def remove_stock_record(self, command):
        repo = current_domain.repository_for(StockRecord)
        record = repo.get(command.stock_record_id)

        history_dao = current_domain.repository_for(Transaction)._dao
        removed_entries = history_dao.query.filter(stock_record_id=record.id).limit(None).delete()
        repo._dao.delete(record)

        logger.info(
            "Stock record removed",
            stock_record_id=str(command.stock_record_id),
            name=record.name,
            history_entries=removed_entries,
        )


def remove_stock_record(stock_record_id, lock_timeout=DEFAULT_LOCK_TIMEOUT):
    """Delete a record and its history. Raises ObjectNotFoundError for an unknown id."""
    with lock(f"stock_record:{stock_record_id}", timeout=lock_timeout):
        current_domain.process(
            RemoveStockRecord(stock_record_id=stock_record_id),
            asynchronous=False,
        )
