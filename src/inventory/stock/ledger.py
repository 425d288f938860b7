"""Inventory ledger — the only write path for stock quantities.

``apply_transaction`` validates the amounts, then performs the whole
read-modify-commit of one StockRecord inside that record's lock so that
concurrent updates of the same record never interleave. ``record_transaction``
adds the alerting step: when the committed record is low it is handed to the
alert dispatcher, which delivers in the background.
"""

from dataclasses import dataclass, field

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from inventory.domain import inventory
from inventory.stock.record import StockRecord
from inventory.utils.locking import lock

logger = structlog.get_logger(__name__)

DEFAULT_LOCK_TIMEOUT = 5.0


@inventory.command(part_of="StockRecord")
class ApplyTransaction:
    """Consume and/or restock units of a stock record."""

    stock_record_id = Identifier(required=True)
    amount_consumed = Integer(default=0, min_value=0)
    amount_restocked = Integer(default=0, min_value=0)


@inventory.command_handler(part_of=StockRecord)
class LedgerHandler:
    @handle(ApplyTransaction)
    def apply_transaction(self, command):
        repo = current_domain.repository_for(StockRecord)
        record = repo.get(command.stock_record_id)
        record.apply_transaction(
            amount_consumed=command.amount_consumed or 0,
            amount_restocked=command.amount_restocked or 0,
        )
        repo.add(record)
        return record


@dataclass
class LedgerResult:
    record: StockRecord
    crossed_below_threshold: bool
    deliveries: list = field(default_factory=list)


def coerce_amount(value, field_name):
    """Normalize a transaction amount to a non-negative int.

    Accepts None (treated as 0), ints, integral floats and strings of
    decimal digits. Anything else raises ValidationError.
    """
    if value is None or value == "":
        return 0

    if isinstance(value, bool):
        raise ValidationError({field_name: ["Amount must be a whole number"]})

    if isinstance(value, int):
        amount = value
    elif isinstance(value, float):
        if not value.is_integer():
            raise ValidationError({field_name: ["Amount must be a whole number"]})
        amount = int(value)
    elif isinstance(value, str):
        text = value.strip()
        digits = text[1:] if text[:1] in "+-" else text
        if not digits.isdecimal():
            raise ValidationError({field_name: ["Amount must be a whole number"]})
        try:
            amount = int(text)
        except ValueError:
            raise ValidationError({field_name: ["Amount must be a whole number"]}) from None
    else:
        raise ValidationError({field_name: ["Amount must be a whole number"]})

    if amount < 0:
        raise ValidationError({field_name: ["Amount cannot be negative"]})
    return amount


def apply_transaction(
    stock_record_id,
    amount_consumed=None,
    amount_restocked=None,
    lock_timeout=DEFAULT_LOCK_TIMEOUT,
):
    """Apply a transaction to a record and report whether it is now low.

    Raises:
        ValidationError: an amount is negative or not a whole number.
        ObjectNotFoundError: no record has ``stock_record_id``.
        LockAcquireTimeout: another update of the record held the lock too long.
    """
    consumed = coerce_amount(amount_consumed, "amount_consumed")
    restocked = coerce_amount(amount_restocked, "amount_restocked")

    with lock(f"stock_record:{stock_record_id}", timeout=lock_timeout):
        record = current_domain.process(
            ApplyTransaction(
                stock_record_id=stock_record_id,
                amount_consumed=consumed,
                amount_restocked=restocked,
            ),
            asynchronous=False,
        )

    crossed = record.is_low()

    logger.info(
        "Stock transaction applied",
        stock_record_id=str(stock_record_id),
        amount_consumed=consumed,
        amount_restocked=restocked,
        quantity=record.quantity,
        threshold=record.threshold,
        crossed_below_threshold=crossed,
    )
    return LedgerResult(record=record, crossed_below_threshold=crossed)


def record_transaction(
    stock_record_id,
    dispatcher=None,
    amount_consumed=None,
    amount_restocked=None,
    lock_timeout=DEFAULT_LOCK_TIMEOUT,
):
    """Apply a transaction and hand a low record to the alert dispatcher.

    The dispatcher only schedules deliveries, so this returns as soon as the
    transaction is committed. Delivery outcomes are available on
    ``result.deliveries`` for callers that want them.
    """
    result = apply_transaction(
        stock_record_id,
        amount_consumed=amount_consumed,
        amount_restocked=amount_restocked,
        lock_timeout=lock_timeout,
    )

    if result.crossed_below_threshold:
        if dispatcher is None:
            logger.warning(
                "Stock is low but no alert dispatcher is configured",
                stock_record_id=str(stock_record_id),
                quantity=result.record.quantity,
            )
        else:
            try:
                result.deliveries = dispatcher.dispatch(result.record)
            except Exception:
                # Already committed; a dispatch error leaves the result as it is
                logger.exception(
                    "Low stock alert could not be handed to the dispatcher",
                    stock_record_id=str(stock_record_id),
                    quantity=result.record.quantity,
                )

    return result
