"""Read-side helpers for stock records."""

from protean.utils.globals import current_domain

from inventory.stock.record import StockRecord


def get_stock_record(stock_record_id):
    """Fetch a record by id. Raises ObjectNotFoundError when it does not exist."""
    return current_domain.repository_for(StockRecord).get(stock_record_id)


def list_stock_records():
    """Return every stored record, oldest first."""
    records = current_domain.repository_for(StockRecord)._dao.query.limit(None).all().items
    return sorted(records, key=lambda record: record.created_at)
