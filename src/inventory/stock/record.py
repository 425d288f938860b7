"""StockRecord aggregate (CQRS) — a countable item tracked under audit.

The StockRecord is a standard CQRS aggregate. Every quantity change goes
through ``apply_transaction``, which appends one Transaction entity per
delta, so the stored history always explains the current quantity:

    quantity == initial_quantity + sum(restocked) - sum(consumed)

Quantity has no floor. Consuming more than is on hand leaves a negative
quantity, which is accepted policy for over-consumption.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Integer, String

from inventory.domain import inventory
from inventory.stock.events import (
    LowStockDetected,
    StockConsumed,
    StockRecordCreated,
    StockRestocked,
)
from inventory.stock.threshold import is_low


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
# History is loaded in full; the audit balance needs every entry.
@inventory.entity(part_of="StockRecord", limit=None)
class Transaction:
    """One audited delta applied to a StockRecord."""

    amount_consumed = Integer(default=0, min_value=0)
    amount_restocked = Integer(default=0, min_value=0)
    sequence = Integer(required=True, min_value=1)
    timestamp = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@inventory.aggregate(limit=None)
class StockRecord:
    name = String(required=True, max_length=255)
    quantity = Integer(default=0)
    threshold = Integer(default=0)
    initial_quantity = Integer(default=0)
    history = HasMany(Transaction)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, name, quantity=0, threshold=0):
        """Create a record with an empty history."""
        if not name or not str(name).strip():
            raise ValidationError({"name": ["Name must not be empty"]})
        if threshold is not None and threshold < 0:
            raise ValidationError({"threshold": ["Threshold cannot be negative"]})

        now = datetime.now(UTC)
        record = cls(
            name=str(name).strip(),
            quantity=quantity or 0,
            threshold=threshold or 0,
            initial_quantity=quantity or 0,
            created_at=now,
            updated_at=now,
        )

        record.raise_(
            StockRecordCreated(
                stock_record_id=str(record.id),
                name=record.name,
                initial_quantity=record.initial_quantity,
                threshold=record.threshold,
                created_at=now,
            )
        )
        return record

    # -------------------------------------------------------------------
    # Ledger
    # -------------------------------------------------------------------
    def apply_transaction(self, amount_consumed=0, amount_restocked=0):
        """Apply a consumption and/or a restock and report whether stock is now low.

        Each non-zero amount is recorded as its own history entry, the
        consumption first. Amounts must already be non-negative integers.
        """
        for field_name, amount in (
            ("amount_consumed", amount_consumed),
            ("amount_restocked", amount_restocked),
        ):
            if amount is not None and amount < 0:
                raise ValidationError({field_name: ["Amount cannot be negative"]})

        now = datetime.now(UTC)

        if amount_consumed:
            previous = self.quantity
            self.quantity = previous - amount_consumed
            self._append_entry(amount_consumed=amount_consumed, timestamp=now)
            self.raise_(
                StockConsumed(
                    stock_record_id=str(self.id),
                    amount=amount_consumed,
                    previous_quantity=previous,
                    new_quantity=self.quantity,
                    consumed_at=now,
                )
            )

        if amount_restocked:
            previous = self.quantity
            self.quantity = previous + amount_restocked
            self._append_entry(amount_restocked=amount_restocked, timestamp=now)
            self.raise_(
                StockRestocked(
                    stock_record_id=str(self.id),
                    amount=amount_restocked,
                    previous_quantity=previous,
                    new_quantity=self.quantity,
                    restocked_at=now,
                )
            )

        if amount_consumed or amount_restocked:
            self.updated_at = now

        low = self.is_low()
        if low:
            self.raise_(
                LowStockDetected(
                    stock_record_id=str(self.id),
                    name=self.name,
                    quantity=self.quantity,
                    threshold=self.threshold,
                    detected_at=now,
                )
            )
        return low

    def _append_entry(self, timestamp, amount_consumed=0, amount_restocked=0):
        self.add_history(
            Transaction(
                amount_consumed=amount_consumed,
                amount_restocked=amount_restocked,
                sequence=self._next_sequence(),
                timestamp=timestamp,
            )
        )

    def _next_sequence(self):
        return max((entry.sequence or 0 for entry in self.history or []), default=0) + 1

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def is_low(self):
        return is_low(self.quantity, self.threshold)

    def ordered_history(self):
        """History entries in the order they were applied."""
        return sorted(self.history or [], key=lambda entry: entry.sequence)

    def audit_balance(self):
        """Quantity implied by the initial quantity and the recorded deltas."""
        entries = self.history or []
        restocked = sum(entry.amount_restocked or 0 for entry in entries)
        consumed = sum(entry.amount_consumed or 0 for entry in entries)
        return (self.initial_quantity or 0) + restocked - consumed

    def is_balanced(self):
        return self.quantity == self.audit_balance()
