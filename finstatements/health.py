"""Health check endpoints with dependency checking.

Covers database connectivity and whether the remote extraction services
are configured. No remote call is made: every hosted prompt run is billed.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from finstatements.config import Settings
from finstatements.database import get_db
from finstatements.dependencies import get_settings
from finstatements.logging_config import get_logger

router = APIRouter()
logger = get_logger(__name__)

SERVICE_NAME = "finstatements"
VERSION = "1.0.0"


def check_database(db: Session) -> Dict[str, Any]:
    try:
        db.execute(text("SELECT 1"))
        return {"healthy": True, "message": "Database connected"}
    except SQLAlchemyError as e:
        logger.error("database_health_check_failed", error=str(e))
        return {"healthy": False, "message": f"Database error: {e}"}


def check_ai_tools(settings: Settings) -> Dict[str, Any]:
    """The hosted prompt, URL and archive endpoints need a key and an archive id."""
    missing = [
        name
        for name, value in (
            ("AI_TOOLS_API_KEY", settings.ai_tools_api_key),
            ("AI_TOOLS_APP_ID", settings.ai_tools_app_id),
            ("ARCHIVE_ID", settings.archive_id),
        )
        if not value
    ]
    if missing:
        return {"healthy": False, "message": f"Not configured: {', '.join(missing)}"}
    return {"healthy": True, "message": f"AI tools configured at {settings.ai_tools_base_url}"}


def check_extraction_backend(settings: Settings) -> Dict[str, Any]:
    backend = settings.extraction_backend
    if backend == "prompt_api":
        return {"healthy": True, "message": "Using hosted prompts"}
    if backend == "anthropic":
        if not settings.anthropic_api_key:
            return {"healthy": False, "message": "Anthropic API key not configured"}
        return {"healthy": True, "message": f"Using Claude ({settings.claude_model})"}
    return {"healthy": False, "message": f"Unknown extraction backend {backend!r}"}


@router.get("/health")
def health_check() -> Dict[str, Any]:
    """Basic health check - just app status."""
    return {"status": "healthy", "service": SERVICE_NAME, "version": VERSION}


@router.get("/health/detailed")
def detailed_health_check(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """Health of the database and configuration of the remote services."""
    checks = {
        "database": check_database(db),
        "ai_tools": check_ai_tools(settings),
        "extraction_backend": check_extraction_backend(settings),
    }

    all_healthy = all(check["healthy"] for check in checks.values())
    overall_status = "healthy" if all_healthy else "degraded"

    logger.info(
        "health_check_performed",
        status=overall_status,
        **{name: check["healthy"] for name, check in checks.items()},
    )

    return {
        "status": overall_status,
        "service": SERVICE_NAME,
        "version": VERSION,
        "checks": checks,
    }


@router.get("/health/ready")
def readiness_check(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """Readiness probe: 200 if the database answers, 503 otherwise."""
    if not check_database(db)["healthy"]:
        raise HTTPException(
            status_code=503, detail={"ready": False, "reason": "Database unavailable"}
        )
    return {"ready": True}


@router.get("/health/live")
def liveness_check() -> Dict[str, Any]:
    return {"alive": True}
