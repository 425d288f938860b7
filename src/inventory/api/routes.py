"""FastAPI routes for stock records."""

from fastapi import APIRouter, Depends, HTTPException, Request

from inventory.api.schemas import (
    ApplyTransactionRequest,
    CreateStockRecordRequest,
    MessageResponse,
    StockRecordResponse,
    TransactionResponse,
)
from inventory.stock.ledger import DEFAULT_LOCK_TIMEOUT, record_transaction
from inventory.stock.queries import get_stock_record, list_stock_records
from inventory.stock.registration import create_stock_record
from inventory.stock.removal import remove_stock_record
from inventory.utils.locking import LockAcquireTimeout


def get_dispatcher(request: Request):
    """The application's alert dispatcher, or None when alerting is disabled."""
    return getattr(request.app.state, "alert_dispatcher", None)


def get_lock_timeout(request: Request) -> float:
    return getattr(request.app.state, "lock_timeout", DEFAULT_LOCK_TIMEOUT)


# ---------------------------------------------------------------------------
# Stock Record Router
# ---------------------------------------------------------------------------
stock_router = APIRouter(prefix="/stock-records", tags=["stock-records"])


@stock_router.get("", response_model=list[StockRecordResponse])
async def list_records() -> list[StockRecordResponse]:
    return [StockRecordResponse.from_record(record) for record in list_stock_records()]


@stock_router.post("", status_code=201, response_model=StockRecordResponse)
async def create_record(body: CreateStockRecordRequest) -> StockRecordResponse:
    record_id = create_stock_record(
        name=body.name,
        quantity=body.quantity,
        threshold=body.threshold,
    )
    return StockRecordResponse.from_record(get_stock_record(record_id))


@stock_router.get("/{stock_record_id}", response_model=StockRecordResponse)
async def get_record(stock_record_id: str) -> StockRecordResponse:
    return StockRecordResponse.from_record(get_stock_record(stock_record_id))


@stock_router.put("/{stock_record_id}", response_model=TransactionResponse)
async def apply_transaction(
    stock_record_id: str,
    body: ApplyTransactionRequest,
    dispatcher=Depends(get_dispatcher),
    lock_timeout: float = Depends(get_lock_timeout),
) -> TransactionResponse:
    try:
        result = record_transaction(
            stock_record_id,
            dispatcher=dispatcher,
            amount_consumed=body.amount_consumed,
            amount_restocked=body.amount_restocked,
            lock_timeout=lock_timeout,
        )
    except LockAcquireTimeout as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    record = StockRecordResponse.from_record(result.record)
    return TransactionResponse(
        **record.model_dump(),
        crossed_below_threshold=result.crossed_below_threshold,
    )


@stock_router.delete("/{stock_record_id}", response_model=MessageResponse)
async def delete_record(
    stock_record_id: str,
    lock_timeout: float = Depends(get_lock_timeout),
) -> MessageResponse:
    try:
        remove_stock_record(stock_record_id, lock_timeout=lock_timeout)
    except LockAcquireTimeout as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return MessageResponse(message="Stock record deleted")
