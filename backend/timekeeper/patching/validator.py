# backend/timekeeper/patching/validator.py

"""
Field validation rules.

Two modes:
- whole-entity checks used by POST (create) and PUT (replace)
- patch checks: op / path whitelist / value / status transition / terminal lock

Nothing here touches the store or mutates its arguments.
"""

from typing import Any, Optional

from timekeeper.core.exceptions import BadRequestError
from timekeeper.models.project import Project
from timekeeper.models.session import Session
from timekeeper.models.task import Task, TaskStatus
from timekeeper.patching.converter import convert_value
from timekeeper.patching.fields import (
    PATCHABLE_FIELDS,
    STATUS_MACHINES,
    EntityKind,
    FieldSpec,
)
from timekeeper.patching.status import PROJECT_STATUS, TASK_STATUS
from timekeeper.schemas.patch import PatchOperation

SUPPORTED_OP = "replace"


def _is_blank(v: Optional[str]) -> bool:
    return v is None or v.strip() == ""


def _reject_id(entity: Any, kind: EntityKind) -> None:
    if entity.id is not None:
        raise BadRequestError(f"A new {kind.value} cannot have an id (got '{entity.id}')")


def _require_id(entity: Any, kind: EntityKind) -> None:
    if _is_blank(entity.id):
        raise BadRequestError(f"A {kind.value} to replace must have an id")


def _require_filled(value: Optional[str], kind: EntityKind, field: str) -> None:
    if _is_blank(value):
        raise BadRequestError(f"The {kind.value} field '{field}' must not be blank")


def _require_present(value: Any, kind: EntityKind, field: str) -> None:
    if value is None:
        raise BadRequestError(f"The {kind.value} field '{field}' must be present")


# ---------- PATCH ----------

def _path_segment(operation: PatchOperation) -> str:
    path = operation.path
    if not path or not path.startswith("/") or "/" in path[1:] or len(path) == 1:
        raise BadRequestError(f"Invalid path '{path}' in patch {operation}: expected '/<field>'")
    return path[1:]


def validate_patch(kind: EntityKind, operation: PatchOperation, current: Any) -> FieldSpec:
    """
    Authorize `operation` against the current (persisted) state of the entity.
    Returns the FieldSpec of the targeted field.
    """
    if operation.op != SUPPORTED_OP:
        raise BadRequestError(
            f"Unsupported op '{operation.op}' in patch {operation}: only '{SUPPORTED_OP}' is allowed"
        )

    field_name = _path_segment(operation)
    spec = PATCHABLE_FIELDS[kind].get(field_name)
    if spec is None:
        raise BadRequestError(f"Path '{operation.path}' cannot be patched on a {kind.value}")

    if spec.value_required and _is_blank(operation.value):
        raise BadRequestError(f"Patch {operation} needs a value for '{spec.path}'")

    machine = STATUS_MACHINES.get(kind)
    if machine is None:
        return spec

    current_status = getattr(current, "status", None)
    if spec.is_status:
        target = convert_value(spec, operation.value)
        if not machine.can_transition(current_status, target):
            raise BadRequestError(
                f"Cannot change {kind.value} status from {current_status.name} to {target.name}"
            )
    elif machine.is_locked(current_status):
        raise BadRequestError(
            f"Cannot patch '{spec.path}': the {kind.value} is {current_status.name}"
        )
    return spec


# ---------- POST / PUT : project ----------

def validate_post_project(project: Project) -> None:
    _reject_id(project, EntityKind.PROJECT)
    _require_filled(project.name, EntityKind.PROJECT, "name")
    if not PROJECT_STATUS.accepts_initial(project.status):
        raise BadRequestError(f"A project cannot be created with status {project.status}")


def validate_put_project(project: Project) -> None:
    _require_id(project, EntityKind.PROJECT)
    _require_filled(project.name, EntityKind.PROJECT, "name")
    _require_present(project.description, EntityKind.PROJECT, "description")
    _require_present(project.deadline, EntityKind.PROJECT, "deadLine")


def validate_project_replacement(project: Project, current: Project) -> None:
    if PROJECT_STATUS.is_locked(current.status):
        raise BadRequestError(f"Project {current.id} is {current.status.name} and cannot be changed")
    if project.status is not None and not PROJECT_STATUS.can_transition(current.status, project.status):
        raise BadRequestError(
            f"Cannot change project status from {current.status.name} to {project.status.name}"
        )


# ---------- POST / PUT : task ----------

def validate_post_task(task: Task) -> None:
    _reject_id(task, EntityKind.TASK)
    _require_filled(task.name, EntityKind.TASK, "name")
    _require_filled(task.project_id, EntityKind.TASK, "projectId")
    if not TASK_STATUS.accepts_initial(task.status):
        raise BadRequestError(
            f"A task must be created as {TaskStatus.READY_TO_START.name}, not {task.status.name}"
        )


def validate_put_task(task: Task) -> None:
    _require_id(task, EntityKind.TASK)
    _require_filled(task.name, EntityKind.TASK, "name")
    _require_present(task.description, EntityKind.TASK, "description")
    _require_filled(task.project_id, EntityKind.TASK, "projectId")
    _require_present(task.current_time, EntityKind.TASK, "currentTime")


def validate_task_replacement(task: Task, current: Task) -> None:
    if task.project_id != current.project_id:
        raise BadRequestError(
            f"The project of task {current.id} cannot change ({current.project_id} -> {task.project_id})"
        )
    if TASK_STATUS.is_locked(current.status):
        raise BadRequestError(f"Task {current.id} is {current.status.name} and cannot be changed")


# ---------- POST / PUT : session ----------

def validate_post_session(session: Session) -> None:
    _reject_id(session, EntityKind.SESSION)
    _require_filled(session.task_id, EntityKind.SESSION, "taskId")


def validate_session_task(task: Task) -> None:
    """sessions can only be booked on a task that is not finished"""
    if TASK_STATUS.is_terminal(task.status):
        raise BadRequestError(
            f"Cannot add a session to task {task.id}: the task is {task.status.name}"
        )


def validate_put_session(session: Session) -> None:
    _require_id(session, EntityKind.SESSION)
    _require_filled(session.task_id, EntityKind.SESSION, "taskId")
    _require_present(session.start_time, EntityKind.SESSION, "startTime")
