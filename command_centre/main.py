"""
FastAPI application for the Command Centre dashboard.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from command_centre import __version__
from command_centre.config import settings
from command_centre.core.logging import configure_logging, get_logger
from command_centre.routers.accounts import router as accounts_router
from command_centre.routers.bookings import router as bookings_router
from command_centre.routers.enquiries import router as enquiries_router
from command_centre.routers.stocks import router as stocks_router
from command_centre.routers.sync import router as sync_router
from command_centre.routers.weather import router as weather_router

log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    configure_logging(log_level=settings.log_level, json_output=settings.json_logs)
    log.info(
        "application_starting",
        version=__version__,
        gmail_configured=settings.gmail_client_credentials is not None,
        kv_configured=settings.kv_configured,
    )

    yield

    log.info("application_stopped")


app = FastAPI(
    title="Command Centre",
    description="Business dashboard backend for a photography studio",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

app.include_router(enquiries_router)
app.include_router(sync_router)
app.include_router(accounts_router)
app.include_router(stocks_router)
app.include_router(bookings_router)
app.include_router(weather_router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


# Run with: uvicorn command_centre.main:app --host 0.0.0.0 --port 3000
