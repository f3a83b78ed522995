"""Health check endpoints"""

from datetime import datetime, timezone
from fastapi import APIRouter, Depends, status

from designdesk.api.dependencies import get_storage
from designdesk.storage.adapter import StorageAdapter

router = APIRouter(tags=["Health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def basic_health_check(storage: StorageAdapter = Depends(get_storage)):
    """
    Basic health check endpoint

    Returns health status, the active storage backend and a timestamp
    """
    return {
        "status": "healthy",
        "storage": type(storage.backend).__name__,
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    }
