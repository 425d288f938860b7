"""Pydantic request/response schemas for the stock record API.

These are external contracts (anti-corruption layer), separate from the
internal protean commands.
"""

from datetime import datetime

from pydantic import BaseModel, Field, StrictFloat, StrictInt


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class CreateStockRecordRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    quantity: int = 0
    threshold: int = Field(ge=0, default=0)


class ApplyTransactionRequest(BaseModel):
    # Floats and strings are validated by the ledger; only whole amounts pass
    amount_consumed: StrictInt | StrictFloat | str | None = None
    amount_restocked: StrictInt | StrictFloat | str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class TransactionSchema(BaseModel):
    amount_consumed: int
    amount_restocked: int
    sequence: int
    timestamp: datetime


class StockRecordResponse(BaseModel):
    id: str
    name: str
    quantity: int
    threshold: int
    initial_quantity: int
    history: list[TransactionSchema] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_record(cls, record) -> "StockRecordResponse":
        return cls(
            id=str(record.id),
            name=record.name,
            quantity=record.quantity,
            threshold=record.threshold,
            initial_quantity=record.initial_quantity,
            history=[
                TransactionSchema(
                    amount_consumed=entry.amount_consumed or 0,
                    amount_restocked=entry.amount_restocked or 0,
                    sequence=entry.sequence,
                    timestamp=entry.timestamp,
                )
                for entry in record.ordered_history()
            ],
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class TransactionResponse(StockRecordResponse):
    crossed_below_threshold: bool


class MessageResponse(BaseModel):
    message: str
