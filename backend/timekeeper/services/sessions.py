# backend/timekeeper/services/sessions.py

from datetime import datetime
from typing import List, Optional

import structlog

from timekeeper.core.exceptions import SessionNotFoundError, StorageFailureError
from timekeeper.db.store import EntityStore
from timekeeper.models.session import Session
from timekeeper.models.task import TaskStatus
from timekeeper.patching import validator
from timekeeper.patching.engine import PatchEngine
from timekeeper.patching.fields import EntityKind
from timekeeper.schemas.patch import PatchOperation
from timekeeper.services.cascade import cascade_step
from timekeeper.services.tasks import TaskService

logger = structlog.get_logger()


def _now() -> datetime:
    return datetime.now().replace(microsecond=0)


class SessionService:
    def __init__(self, sessions: EntityStore[Session], task_service: TaskService):
        self.sessions = sessions
        self.task_service = task_service
        self.patch_engine = PatchEngine(EntityKind.SESSION, sessions, SessionNotFoundError)

    # ---------- READ ----------

    async def get_all(self) -> List[Session]:
        return await self.sessions.find_all()

    async def get_by_id(self, session_id: Optional[str]) -> Session:
        session = await self.sessions.find_by_id(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        return session

    async def get_sessions_from_task(self, task_id: str) -> List[Session]:
        task = await self.task_service.get_by_id(task_id)
        return await self.sessions.find_all_by(task_id=task.id)

    async def get_sessions_from_user(self, user_id: str) -> List[Session]:
        return await self.sessions.find_all_by(user_id=user_id)

    # ---------- CREATE ----------

    async def add_session(self, session: Session) -> Session:
        """
        Booking the first session on a READY_TO_START task moves the task to
        IN_PROGRESS.
        """
        validator.validate_post_session(session)
        task = await self.task_service.get_by_id(session.task_id)
        validator.validate_session_task(task)

        new_session = session.model_copy(update={"start_time": session.start_time or _now()})
        created = await self.sessions.insert(new_session)
        if created.id is None:
            raise StorageFailureError(f"Could not add session to task {task.id}")
        logger.info("session_created", session_id=created.id, task_id=task.id)

        if task.status == TaskStatus.READY_TO_START:
            await self.task_service.set_task_status(task.id, TaskStatus.IN_PROGRESS)

        return created

    # ---------- UPDATE ----------

    async def update_session(self, session: Session) -> Session:
        validator.validate_put_session(session)
        current = await self.sessions.find_by_id(session.id)
        if current is None:
            raise SessionNotFoundError(f"Cannot update session {session.id}: the session doesn't exist")
        await self.task_service.get_by_id(session.task_id)

        replacement = session.model_copy(update={"user_id": session.user_id or current.user_id})
        saved = await self.sessions.save(replacement)
        logger.info("session_replaced", session_id=saved.id)
        return saved

    async def apply_patch(self, session_id: str, operation: PatchOperation) -> Session:
        await self.patch_engine.apply(session_id, operation)
        return await self.get_by_id(session_id)

    # ---------- DELETE ----------

    async def delete_session(self, session_id: str) -> None:
        await self.get_by_id(session_id)
        await cascade_step(f"delete session {session_id}", self.sessions.delete_by_id(session_id))
        logger.info("session_deleted", session_id=session_id)

    async def delete_sessions_from_user(self, user_id: str) -> None:
        await cascade_step(
            f"delete sessions of user {user_id}",
            self.sessions.delete_all_by(user_id=user_id),
        )
