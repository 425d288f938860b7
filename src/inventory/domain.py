"""Inventory bounded context — audited stock ledger for countable items.

Tracks StockRecords (e.g. medicines), applies consumption and restock
transactions under a per-record lock, keeps an append-only transaction
history, and flags records whose quantity drops below their threshold.
"""

import structlog
from protean.domain import Domain

inventory = Domain(name="inventory")

logger = structlog.get_logger(__name__)
