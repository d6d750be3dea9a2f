# backend/timekeeper/api/endpoints/health.py

from fastapi import APIRouter

from timekeeper.core.config import settings
from timekeeper.db.mongo import get_db

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check():
    """
    Liveness + MongoDB reachability (for load balancers / monitoring).
    With STORE_BACKEND=memory there is nothing to ping.
    """
    if settings.STORE_BACKEND == "memory":
        return {"status": "ok", "store": "memory"}

    mongo_ok = False
    mongo_error = None

    try:
        await get_db().command("ping")
        mongo_ok = True
    except Exception as e:
        mongo_error = str(e)

    return {
        "status": "ok" if mongo_ok else "degraded",
        "store": "mongo",
        "mongo": mongo_ok,
        "mongo_error": mongo_error,
    }
