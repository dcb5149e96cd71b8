"""
Health check route for load balancers and the dashboard status badge.
"""

from fastapi import APIRouter, Request
from datetime import datetime
import time

from smartour.db.database import check_connection
from smartour.core.rate_limiting import limiter, HEALTH_LIMIT

router = APIRouter(tags=["health"])

# Track startup time for uptime reporting
_STARTUP_TIME = time.time()


@router.get("/health")
@limiter.limit(HEALTH_LIMIT)
def health_check(request: Request):
    """Service status plus whether the reporting database answers."""
    connected = check_connection()
    return {
        "status": "ok",
        "database": "connected" if connected else "disconnected",
        "uptime_seconds": int(time.time() - _STARTUP_TIME),
        "timestamp": datetime.utcnow().isoformat(),
    }
