# backend/timekeeper/services/tasks.py

from datetime import datetime
from typing import List, Optional

import structlog

from timekeeper.core.exceptions import TaskNotFoundError
from timekeeper.db.store import EntityStore
from timekeeper.models.session import Session
from timekeeper.models.task import Priority, Task, TaskStatus
from timekeeper.patching import validator
from timekeeper.patching.engine import PatchEngine
from timekeeper.patching.fields import PATCHABLE_FIELDS, EntityKind
from timekeeper.patching.status import TASK_DEFAULT_STATUS
from timekeeper.schemas.patch import PatchOperation
from timekeeper.services.cascade import cascade_step
from timekeeper.services.projects import ProjectService

logger = structlog.get_logger()

DEFAULT_PRIORITY = Priority.MEDIUM


def _now() -> datetime:
    # the wire format has no sub-second part
    return datetime.now().replace(microsecond=0)


class TaskService:
    def __init__(
        self,
        tasks: EntityStore[Task],
        sessions: EntityStore[Session],
        project_service: ProjectService,
    ):
        self.tasks = tasks
        self.sessions = sessions
        self.project_service = project_service
        self.patch_engine = PatchEngine(EntityKind.TASK, tasks, TaskNotFoundError)

    # ---------- READ ----------

    async def get_all(self) -> List[Task]:
        return await self.tasks.find_all()

    async def get_by_id(self, task_id: Optional[str]) -> Task:
        task = await self.tasks.find_by_id(task_id)
        if task is None:
            raise TaskNotFoundError(f"Task {task_id} not found")
        return task

    async def get_tasks_from_project(self, project_id: str) -> List[Task]:
        project = await self.project_service.get_by_id(project_id)
        return await self.tasks.find_all_by(project_id=project.id)

    # ---------- CREATE ----------

    async def add_task(self, task: Task) -> Task:
        validator.validate_post_task(task)
        await self.project_service.get_by_id(task.project_id)

        new_task = task.model_copy(
            update={
                "status": task.status or TASK_DEFAULT_STATUS,
                "priority": task.priority or DEFAULT_PRIORITY,
                "current_time": task.current_time or _now(),
            }
        )
        created = await self.tasks.insert(new_task)
        logger.info("task_created", task_id=created.id, project_id=created.project_id)
        return created

    # ---------- UPDATE ----------

    async def update_task(self, task: Task) -> Task:
        validator.validate_put_task(task)
        current = await self.tasks.find_by_id(task.id)
        if current is None:
            raise TaskNotFoundError(f"Cannot update task {task.id}: the task doesn't exist")
        validator.validate_task_replacement(task, current)

        replacement = task.model_copy(
            update={
                "status": task.status or current.status,
                "priority": task.priority or current.priority,
            }
        )
        saved = await self.tasks.save(replacement)
        logger.info("task_replaced", task_id=saved.id)
        return saved

    async def apply_patch(self, task_id: str, operation: PatchOperation) -> Task:
        await self.patch_engine.apply(task_id, operation)
        return await self.get_by_id(task_id)

    async def set_task_status(self, task_id: str, status: TaskStatus) -> None:
        """
        Server-side status change (e.g. a session was started on the task).
        Same single-field write and acknowledgement check as a patch, but no
        client patch validation.
        """
        await self.patch_engine.write(task_id, PATCHABLE_FIELDS[EntityKind.TASK]["status"], status)
        logger.info("task_status_set", task_id=task_id, status=status.name)

    # ---------- DELETE ----------

    async def delete_task(self, task_id: str) -> None:
        await self.get_by_id(task_id)
        await cascade_step(
            f"delete sessions of task {task_id}",
            self.sessions.delete_all_by(task_id=task_id),
        )
        await cascade_step(f"delete task {task_id}", self.tasks.delete_by_id(task_id))
        logger.info("task_deleted", task_id=task_id)
