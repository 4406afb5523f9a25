"""FastAPI application entry point for the CSP fraud engine."""

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from src.api.middleware.error_handler import (
    global_exception_handler,
    validation_exception_handler,
)
from src.api.middleware.logging import StructuredLoggingMiddleware
from src.api.routes.admin import router as admin_router
from src.api.routes.agent import router as agent_router
from src.api.routes.audits import router as audits_router
from src.api.routes.bank import router as bank_router
from src.api.routes.check_ins import router as check_ins_router
from src.api.routes.health import router as health_router
from src.api.routes.location_logs import router as location_logs_router
from src.api.routes.notifications import router as notifications_router
from src.api.routes.transactions import router as transactions_router
from src.api.routes.users import router as users_router
from src.config import settings
from src.shared.logging import setup_logging

logger = structlog.get_logger()

APP_START_TIME: float = 0.0


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: logging, tables, default fraud rules."""
    global APP_START_TIME
    APP_START_TIME = time.time()
    setup_logging(settings.log_level)

    logger.info(
        "csp_fraud_engine_starting",
        app_name=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
    )

    from src.db.database import init_db, session_scope
    from src.domains.fraud.registry import RuleRegistry

    await init_db()

    if settings.seed_fraud_rules:
        async with session_scope() as session:
            await RuleRegistry().initialize_default_rules(session)

    yield

    logger.info("csp_fraud_engine_shutting_down")


app = FastAPI(
    title="CSP Fraud Engine",
    description="Fraud risk scoring for banking correspondent (CSP) agents",
    version=settings.app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.debug else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(StructuredLoggingMiddleware)

app.add_exception_handler(RequestValidationError, validation_exception_handler)
for exc_class in (ValueError, PermissionError, LookupError, Exception):
    app.add_exception_handler(exc_class, global_exception_handler)

app.include_router(health_router)
app.include_router(users_router)
app.include_router(transactions_router)
app.include_router(check_ins_router)
app.include_router(location_logs_router)
app.include_router(audits_router)
app.include_router(admin_router)
app.include_router(agent_router)
app.include_router(bank_router)
app.include_router(notifications_router)


def get_uptime() -> int:
    """Seconds since startup, 0 before the lifespan has run."""
    if APP_START_TIME == 0.0:
        return 0
    return int(time.time() - APP_START_TIME)
