"""
Health check endpoint for the authentication service
"""
from fastapi import APIRouter, status
from datetime import datetime, timezone
from typing import Dict, Any

router = APIRouter(tags=["health"])


@router.get("/api/health", status_code=status.HTTP_200_OK)
def health_check() -> Dict[str, Any]:
    """
    Basic health check endpoint.

    Returns:
        dict: Health status and timestamp
    """
    return {
        "status": "OK",
        "message": "Backend server is running correctly",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
