# backend/timekeeper/services/cascade.py

from typing import Awaitable

import structlog

from timekeeper.core.exceptions import StorageFailureError

logger = structlog.get_logger()


async def cascade_step(description: str, operation: Awaitable[bool]) -> None:
    """
    One step of a cascading delete.
    Steps run in order and the first failure stops the cascade. Steps that
    already ran stay applied (no rollback).
    """
    try:
        acknowledged = await operation
    except Exception as exc:
        logger.exception("cascade_failed", step=description)
        raise StorageFailureError(f"Cascade step failed: {description}") from exc

    if not acknowledged:
        logger.error("cascade_not_acknowledged", step=description)
        raise StorageFailureError(f"Cascade step not acknowledged: {description}")

    logger.debug("cascade_step_done", step=description)
