# backend/timekeeper/api/endpoints/web/tasks.py
from typing import List

from fastapi import APIRouter, Depends, status

from timekeeper.api.deps import get_session_service, get_task_service
from timekeeper.models.session import Session
from timekeeper.models.task import Task
from timekeeper.schemas.patch import PatchOperation
from timekeeper.services.sessions import SessionService
from timekeeper.services.tasks import TaskService

router = APIRouter(prefix="/tasks", tags=["Tasks"])


# READ ALL
@router.get("/", response_model=List[Task])
async def read_tasks(service: TaskService = Depends(get_task_service)):
    return await service.get_all()


# READ ONE
@router.get("/{task_id}", response_model=Task)
async def read_task(task_id: str, service: TaskService = Depends(get_task_service)):
    return await service.get_by_id(task_id)


# SESSIONS OF A TASK
@router.get("/{task_id}/sessions", response_model=List[Session])
async def read_task_sessions(task_id: str, service: SessionService = Depends(get_session_service)):
    return await service.get_sessions_from_task(task_id)


# CREATE
@router.post("/", response_model=Task, status_code=status.HTTP_201_CREATED)
async def create_task(task: Task, service: TaskService = Depends(get_task_service)):
    return await service.add_task(task)


# REPLACE (id in body)
@router.put("/", response_model=Task)
async def update_task(task: Task, service: TaskService = Depends(get_task_service)):
    return await service.update_task(task)


# PATCH (single field)
@router.patch("/{task_id}", response_model=Task)
async def patch_task(
    task_id: str,
    operation: PatchOperation,
    service: TaskService = Depends(get_task_service),
):
    return await service.apply_patch(task_id, operation)


# DELETE (cascades to sessions)
@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: str, service: TaskService = Depends(get_task_service)):
    await service.delete_task(task_id)
    return None
