"""MedStock FastAPI application.

Serves the stock record API. Commands are processed synchronously inside the
inventory domain context; low stock alerts are handed to the alert dispatcher,
which delivers them in the background.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 5000
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from inventory.api import stock_router
from inventory.domain import inventory
from inventory.utils.logging import add_context, clear_context, configure_logging
from notifications.alert.dispatch import build_dispatcher
from notifications.config import AlertSettings

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
inventory.init()


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    settings = AlertSettings()
    app.state.alert_dispatcher = build_dispatcher(settings)
    app.state.lock_timeout = settings.LOCK_TIMEOUT
    logger.info(
        "MedStock started",
        channels=list(app.state.alert_dispatcher.channels),
        lock_timeout=settings.LOCK_TIMEOUT,
    )
    yield
    app.state.alert_dispatcher.shutdown(wait=True)
    logger.info("MedStock stopped")


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="MedStock API",
    description="Stock ledger with low stock alerts",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the inventory domain context and bind request details for logging."""
    add_context(method=request.method, path=request.url.path)
    try:
        with inventory.domain_context():
            return await call_next(request)
    finally:
        clear_context()


app.include_router(stock_router, prefix="/api")
register_exception_handlers(app)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": inventory.name})
