# backend/timekeeper/services/projects.py

from typing import List, Optional

import structlog

from timekeeper.core.exceptions import ProjectNotFoundError
from timekeeper.db.store import EntityStore
from timekeeper.models.project import Project
from timekeeper.models.session import Session
from timekeeper.models.task import Task
from timekeeper.patching import validator
from timekeeper.patching.engine import PatchEngine
from timekeeper.patching.fields import EntityKind
from timekeeper.schemas.patch import PatchOperation
from timekeeper.services.cascade import cascade_step

logger = structlog.get_logger()


class ProjectService:
    def __init__(
        self,
        projects: EntityStore[Project],
        tasks: EntityStore[Task],
        sessions: EntityStore[Session],
    ):
        self.projects = projects
        self.tasks = tasks
        self.sessions = sessions
        self.patch_engine = PatchEngine(EntityKind.PROJECT, projects, ProjectNotFoundError)

    # ---------- READ ----------

    async def get_all(self) -> List[Project]:
        return await self.projects.find_all()

    async def get_by_id(self, project_id: Optional[str]) -> Project:
        project = await self.projects.find_by_id(project_id)
        if project is None:
            raise ProjectNotFoundError(f"Project {project_id} not found")
        return project

    # ---------- CREATE ----------

    async def add_project(self, project: Project) -> Project:
        validator.validate_post_project(project)
        created = await self.projects.insert(project)
        logger.info("project_created", project_id=created.id)
        return created

    # ---------- UPDATE ----------

    async def update_project(self, project: Project) -> Project:
        validator.validate_put_project(project)
        current = await self.projects.find_by_id(project.id)
        if current is None:
            raise ProjectNotFoundError(f"Cannot update project {project.id}: the project doesn't exist")
        validator.validate_project_replacement(project, current)
        saved = await self.projects.save(project)
        logger.info("project_replaced", project_id=saved.id)
        return saved

    async def apply_patch(self, project_id: str, operation: PatchOperation) -> Project:
        await self.patch_engine.apply(project_id, operation)
        return await self.get_by_id(project_id)

    # ---------- DELETE ----------

    async def delete_project(self, project_id: str) -> None:
        """
        Project -> its tasks -> their sessions, deepest level first.
        Not transactional: a failing step leaves the earlier steps applied.
        """
        await self.get_by_id(project_id)

        tasks = await self.tasks.find_all_by(project_id=project_id)
        for task in tasks:
            await cascade_step(
                f"delete sessions of task {task.id}",
                self.sessions.delete_all_by(task_id=task.id),
            )
        await cascade_step(
            f"delete tasks of project {project_id}",
            self.tasks.delete_all_by(project_id=project_id),
        )
        await cascade_step(f"delete project {project_id}", self.projects.delete_by_id(project_id))

        logger.info("project_deleted", project_id=project_id, tasks_deleted=len(tasks))
