# backend/timekeeper/models/task.py

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import field_serializer, field_validator

from timekeeper.models.base import EntityModel, format_datetime, wire_datetime


class Priority(str, Enum):
    VERY_LOW = "VERY_LOW"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    VERY_HIGH = "VERY_HIGH"


class TaskStatus(str, Enum):
    READY_TO_START = "READY_TO_START"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"
    CANCELED = "CANCELED"


class Task(EntityModel):
    """
    MongoDB 'tasks' collection document. Belongs to exactly one project.
    """
    name: Optional[str] = None
    description: Optional[str] = None
    project_id: Optional[str] = None
    current_time: Optional[datetime] = None  # creation timestamp
    priority: Optional[Priority] = None
    status: Optional[TaskStatus] = None

    @field_validator("current_time", mode="before")
    @classmethod
    def validate_current_time(cls, v):
        return wire_datetime(v)

    @field_serializer("current_time", when_used="json")
    def serialize_current_time(self, v):
        return format_datetime(v)
