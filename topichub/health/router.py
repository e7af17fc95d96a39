"""Health domain router.

Health check endpoint for monitoring and load balancers.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from topichub.core.constants import Routes
from topichub.core.deps import StoreDep
from topichub.core.exceptions import StoreError

logger = logging.getLogger(__name__)

router = APIRouter(prefix=Routes.HEALTH.prefix, tags=[Routes.HEALTH.tag])


@router.get("")
async def health(store: StoreDep):
    """Health check endpoint with database connectivity verification."""
    try:
        store.ping()
    except StoreError:
        logger.warning("Health check failed: database unreachable", exc_info=True)
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "database": "error"},
        )
    return {"status": "ok", "database": "ok"}
