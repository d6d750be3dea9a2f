# backend/timekeeper/api/endpoints/web/projects.py
from typing import List

from fastapi import APIRouter, Depends, status

from timekeeper.api.deps import get_project_service, get_task_service
from timekeeper.models.project import Project
from timekeeper.models.task import Task
from timekeeper.schemas.patch import PatchOperation
from timekeeper.services.projects import ProjectService
from timekeeper.services.tasks import TaskService

router = APIRouter(prefix="/projects", tags=["Projects"])


# READ ALL
@router.get("/", response_model=List[Project])
async def read_projects(service: ProjectService = Depends(get_project_service)):
    return await service.get_all()


# READ ONE
@router.get("/{project_id}", response_model=Project)
async def read_project(project_id: str, service: ProjectService = Depends(get_project_service)):
    return await service.get_by_id(project_id)


# TASKS OF A PROJECT
@router.get("/{project_id}/tasks", response_model=List[Task])
async def read_project_tasks(project_id: str, service: TaskService = Depends(get_task_service)):
    return await service.get_tasks_from_project(project_id)


# CREATE
@router.post("/", response_model=Project, status_code=status.HTTP_201_CREATED)
async def create_project(project: Project, service: ProjectService = Depends(get_project_service)):
    return await service.add_project(project)


# REPLACE (id in body)
@router.put("/", response_model=Project)
async def update_project(project: Project, service: ProjectService = Depends(get_project_service)):
    return await service.update_project(project)


# PATCH (single field)
@router.patch("/{project_id}", response_model=Project)
async def patch_project(
    project_id: str,
    operation: PatchOperation,
    service: ProjectService = Depends(get_project_service),
):
    return await service.apply_patch(project_id, operation)


# DELETE (cascades to tasks and sessions)
@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(project_id: str, service: ProjectService = Depends(get_project_service)):
    await service.delete_project(project_id)
    return None
