import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dentaldesk import __version__
from dentaldesk.adapters.clock import SystemClock
from dentaldesk.adapters.sqlite.migrator import SQLiteMigrator
from dentaldesk.adapters.sqlite.repos import SQLiteDatabaseProbe, SQLiteSystemSettingsRepo
from dentaldesk.api.deps import get_settings
from dentaldesk.app_shell.config import validate_ops_rules
from dentaldesk.components.payments import PaymentSystemError
from dentaldesk.components.settings import SettingsService, feature_toggle_events
from dentaldesk.rules.loader import load_rules
from dentaldesk.shell.http.health import (
    configure_health,
    create_health_router,
    mark_startup_complete,
)

logger = logging.getLogger(__name__)


def _log_toggle_change() -> None:
    logger.info("Feature toggles changed; gated routes follow the new state")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    logging.basicConfig(level=logging.INFO)
    settings = get_settings()

    # Load rules, validate and migrate on startup (fail-fast)
    try:
        rules = load_rules(settings.rules_path)
        validate_ops_rules(rules, settings.data_dir)
        applied = SQLiteMigrator(settings.db_path).run_migrations()
        logger.info("Rules loaded from %s", settings.rules_path)
        if applied:
            logger.info("Applied migrations: %s", ", ".join(applied))
    except Exception as e:
        logger.critical("Startup failed: %s", e)
        sys.exit(1)

    configure_health(
        database_ping=SQLiteDatabaseProbe(settings.db_path).ping,
        read_toggles=SettingsService(
            repo=SQLiteSystemSettingsRepo(settings.db_path), time=SystemClock()
        ).get_feature_toggles,
    )
    unsubscribe = feature_toggle_events.subscribe(_log_toggle_change)
    mark_startup_complete(applied)

    yield

    unsubscribe()


app = FastAPI(
    title="DentalDesk API",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


@app.exception_handler(PaymentSystemError)
async def payment_system_error_handler(request: Request, exc: PaymentSystemError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc)},
    )


# --- Routers ---
from dentaldesk.api.routes import (  # noqa: E402
    clinics,
    payments,
    public_features,
    superadmin,
    treatments,
)

app.include_router(superadmin.router, prefix="/api/superadmin", tags=["Super Admin"])
app.include_router(public_features.router, prefix="/api/public", tags=["Public"])
app.include_router(clinics.router, prefix="/api/clinics", tags=["Clinics"])
app.include_router(treatments.router, prefix="/api/treatments", tags=["Treatments"])
app.include_router(payments.router, prefix="/api/payments", tags=["Payments"])
app.include_router(create_health_router(version=__version__))


# CORS (Allow Frontend)
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
