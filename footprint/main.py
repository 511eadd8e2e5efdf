from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy import text

from footprint.db.base import get_db
from footprint.core.config import settings
from footprint.core.logging_config import configure_logging
from footprint.routers import households as households_router
from footprint.routers import events as events_router
from footprint.routers import receipts as receipts_router
from footprint.core.errors import (
    FootprintException,
    footprint_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

configure_logging()

app = FastAPI(
    title="Household Footprint API",
    description=(
        "**Household carbon footprint engine**\n\n"
        "Normalizes electricity, natural gas, gasoline, air travel and food "
        "records into canonical units, computes kg CO2e per event, and keeps "
        "a trailing 12-month monthly average per household and category.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(FootprintException, footprint_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers (households before events: /households/{id}/summary) ---
app.include_router(households_router.router)
app.include_router(events_router.router)
app.include_router(receipts_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health(db: Session = Depends(get_db)):
    """
    Returns `{"status": "ok", "db": "ok"}` when both the API and the database
    are reachable. Returns HTTP 503 if the DB is down.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "ok"
    except Exception:
        db_status = "unreachable"

    if db_status != "ok":
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": db_status},
        )
    return {"status": "ok", "db": "ok", "env": settings.APP_ENV}
