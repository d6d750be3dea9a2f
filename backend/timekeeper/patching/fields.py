# backend/timekeeper/patching/fields.py

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Type

from timekeeper.models.project import ProjectStatus
from timekeeper.models.task import Priority, TaskStatus
from timekeeper.patching.status import PROJECT_STATUS, TASK_STATUS, StatusMachine


class EntityKind(str, Enum):
    PROJECT = "project"
    TASK = "task"
    SESSION = "session"
    USER = "user"


class FieldKind(str, Enum):
    STRING = "string"
    DATE = "date"          # yyyy-MM-dd
    DATETIME = "datetime"  # yyyy-MM-dd'T'HH:mm:ss
    ENUM = "enum"


@dataclass(frozen=True)
class FieldSpec:
    """
    One patchable field.
    path: the wire name used in "/<path>"
    attribute: the stored (python / document) field name
    value_required: null or blank values are rejected
    """
    path: str
    attribute: str
    kind: FieldKind = FieldKind.STRING
    enum: Optional[Type[Enum]] = None
    value_required: bool = False

    @property
    def is_status(self) -> bool:
        return self.attribute == "status"


def _table(*specs: FieldSpec) -> Dict[str, FieldSpec]:
    return {spec.path: spec for spec in specs}


# Mutable-path whitelists. "id" is never listed.
PATCHABLE_FIELDS: Dict[EntityKind, Dict[str, FieldSpec]] = {
    EntityKind.PROJECT: _table(
        FieldSpec("name", "name", value_required=True),
        FieldSpec("description", "description"),
        FieldSpec("deadLine", "deadline", FieldKind.DATE),
        FieldSpec("status", "status", FieldKind.ENUM, ProjectStatus, value_required=True),
    ),
    EntityKind.TASK: _table(
        FieldSpec("currentTime", "current_time", FieldKind.DATETIME, value_required=True),
        FieldSpec("priority", "priority", FieldKind.ENUM, Priority, value_required=True),
        FieldSpec("status", "status", FieldKind.ENUM, TaskStatus, value_required=True),
    ),
    EntityKind.SESSION: _table(
        FieldSpec("startTime", "start_time", FieldKind.DATETIME, value_required=True),
        FieldSpec("endTime", "end_time", FieldKind.DATETIME),
    ),
    EntityKind.USER: _table(
        FieldSpec("selectedTask", "selected_task", value_required=True),
    ),
}

STATUS_MACHINES: Dict[EntityKind, StatusMachine] = {
    EntityKind.PROJECT: PROJECT_STATUS,
    EntityKind.TASK: TASK_STATUS,
}
