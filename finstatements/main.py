"""FastAPI application entry point with structured logging and health checks."""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from finstatements.api import analytics, companies, dashboard, reports, statements, users
from finstatements.database import init_db
from finstatements.health import SERVICE_NAME, VERSION
from finstatements.health import router as health_router
from finstatements.logging_config import get_logger, setup_logging

setup_logging(
    json_logs=os.getenv("JSON_LOGS", "false").lower() == "true",
    log_level=os.getenv("LOG_LEVEL", "INFO"),
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle for the FastAPI application."""
    logger.info("application_startup", version=VERSION)
    init_db()
    logger.info("database_initialized")
    yield
    logger.info("application_shutdown")


app = FastAPI(
    title="Financial Statements",
    description=(
        "Ingests financial statements, extracts structured metrics, flags "
        "inconsistencies and serves dashboard, analytics and report data."
    ),
    version=VERSION,
    lifespan=lifespan,
)

ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "http://localhost:5173").split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization", "X-Request-ID", "X-User-ID"],
)

# Health checks (no versioning)
app.include_router(health_router, tags=["health"])

API_V1_PREFIX = "/api/v1"

app.include_router(companies.router, prefix=f"{API_V1_PREFIX}/companies", tags=["companies"])
app.include_router(statements.router, prefix=f"{API_V1_PREFIX}/statements", tags=["statements"])
app.include_router(dashboard.router, prefix=f"{API_V1_PREFIX}/dashboard", tags=["dashboard"])
app.include_router(analytics.router, prefix=f"{API_V1_PREFIX}/analytics", tags=["analytics"])
app.include_router(reports.router, prefix=f"{API_V1_PREFIX}/reports", tags=["reports"])
app.include_router(users.router, prefix=f"{API_V1_PREFIX}/users", tags=["users"])


@app.get("/")
def root():
    """API information and available endpoints."""
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "status": "running",
        "docs": "/docs",
        "health": "/health",
        "api_version": "v1",
        "endpoints": {
            "companies": f"{API_V1_PREFIX}/companies/",
            "statements": f"{API_V1_PREFIX}/statements/",
            "dashboard": f"{API_V1_PREFIX}/dashboard/summary",
            "analytics": f"{API_V1_PREFIX}/analytics/",
            "reports": f"{API_V1_PREFIX}/reports/",
            "users": f"{API_V1_PREFIX}/users/",
        },
    }
