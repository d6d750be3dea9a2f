# backend/timekeeper/models/project.py

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import Field, field_serializer, field_validator

from timekeeper.models.base import EntityModel, format_date, wire_date


class ProjectStatus(str, Enum):
    EMPTY = "EMPTY"
    READY_TO_START = "READY_TO_START"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"
    CANCELED = "CANCELED"


class Project(EntityModel):
    """
    MongoDB 'projects' collection document.
    status stays None when the client does not send one (no forced default).
    """
    name: Optional[str] = None
    description: Optional[str] = None
    deadline: Optional[date] = Field(default=None, alias="deadLine")
    status: Optional[ProjectStatus] = None

    @field_validator("deadline", mode="before")
    @classmethod
    def validate_deadline(cls, v):
        return wire_date(v)

    @field_serializer("deadline", when_used="json")
    def serialize_deadline(self, v):
        return format_date(v)
