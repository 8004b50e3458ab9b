"""
Logistics Back-Office API
=========================
HTTP API behind the warehouse back-office dashboard.

This API provides:
- Express volumes: daily FedEx/UPS counts, A008 orders, completion times
- Shipment exceptions: CRUD, month-over-month statistics, SKU/courier analysis
- Containers: arrival records, summary counts, work-week grouping
- Inventory exceptions: actual vs. system stock discrepancies

Every error response is a JSON body of the form {"message": "..."}:
400 for invalid input, 404 for unknown ids, 500 for anything else.

Usage:
    uvicorn api.main:app --host 0.0.0.0 --port 5001 --reload

Or via the entrypoint script:
    python scripts/run_api.py
"""

import os
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api import __version__
from api.deps import get_db_manager, shutdown_db
from api.routers import (
    health_router,
    express_router,
    exceptions_router,
    containers_router,
    inventory_router
)
from backoffice.logging_config import setup_logging

setup_logging(
    log_file=os.environ.get('LOG_FILE'),
    log_level=os.environ.get('LOG_LEVEL', 'INFO')
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup/shutdown events.
    """
    logger.info("Back-office API starting up...")
    try:
        get_db_manager().create_tables()
    except Exception as e:
        logger.error(f"Could not prepare record tables: {e}", exc_info=True)
    yield
    logger.info("Back-office API shutting down...")
    shutdown_db()


app = FastAPI(
    title="Logistics Back-Office API",
    description="""
## Warehouse Back-Office API

Records and summarises the daily operations of the warehouse:

- **Express volumes**: courier totals per day, A008 share, throughput
- **Exceptions**: no-tracking, out-of-stock and wrong-shipment records with
  month-over-month statistics
- **Containers**: container, loose cargo and pallet arrivals
- **Inventory exceptions**: stock discrepancies

Dates are stored as `MM/DD/YYYY` and times as `HH:mm`; input such as `4/8`,
`12/25/24` or ISO timestamps is normalized on write.
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)


def format_validation_errors(errors) -> str:
    """Flatten pydantic errors into one readable message."""
    messages = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(messages) or "Invalid request"


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    message = format_validation_errors(exc.errors())
    logger.info(f"Rejected {request.method} {request.url.path}: {message}")
    return JSONResponse(status_code=400, content={"message": message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"message": str(exc)})


app.include_router(health_router)
app.include_router(express_router)
app.include_router(exceptions_router)
app.include_router(containers_router)
app.include_router(inventory_router)


@app.get("/", tags=["Root"])
def root():
    """
    API root - returns welcome message and links.
    """
    return {
        "message": "Welcome to the Logistics Back-Office API",
        "version": __version__,
        "docs": "/docs",
        "redoc": "/redoc",
        "endpoints": {
            "status": "/api/status",
            "health": "/api/health",
            "express": "/api/express",
            "express_summary": "/api/express/stats/summary",
            "exceptions": "/api/exception",
            "exception_stats": "/api/exception/stats/summary",
            "exception_analysis": "/api/exception/stats/analysis",
            "containers": "/api/container",
            "container_summary": "/api/container/stats/summary",
            "containers_by_week": "/api/container/stats/weekly",
            "inventory": "/api/inventory",
            "inventory_summary": "/api/inventory/stats/summary"
        }
    }
