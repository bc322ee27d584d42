"""
System health check endpoint.
Returns status of backend + store (mode, durability, connectivity).
"""

from fastapi import APIRouter, Depends
from backoffice.config import Settings
from backoffice.database import Store
from backoffice.dependencies import get_settings, get_store
from datetime import datetime, timezone

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(store: Store = Depends(get_store), app_settings: Settings = Depends(get_settings)):
    result = {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "deployment": app_settings.DEPLOYMENT,
        "database": "unknown",
        "durable": store.durable,
        "ephemeral": app_settings.is_ephemeral,
    }

    try:
        store.query_one("SELECT 1 AS ok")
        result["database"] = "ok"
    except Exception as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    # Memory-only although durable storage was configured: writes are being lost
    if not store.durable and not app_settings.is_ephemeral:
        result["status"] = "degraded"

    return result
