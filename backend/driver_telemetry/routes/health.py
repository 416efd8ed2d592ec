"""
Driver Telemetry API: Health Check Route
===========================================

What:  GET /health for monitors and load balancer probes.
How:   Reports process uptime, current server time and whether the store
       answers a `SELECT 1` right now. The store check runs on every call.

The route always answers 200 while the process is up; callers read
`storeConnected` to decide whether the store is reachable.
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from driver_telemetry.database import Store, get_store
from driver_telemetry.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Set once when the module loads, at process start
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(store: Store = Depends(get_store)) -> HealthResponse:
    connected = await store.ping()
    if not connected:
        logger.warning("Health check: store unreachable")

    return HealthResponse(
        status="ok",
        store_connected=connected,
        uptime=round(time.time() - _start_time, 3),
        now=datetime.now(timezone.utc),
    )
