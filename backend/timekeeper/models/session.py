# backend/timekeeper/models/session.py

from datetime import datetime
from typing import Optional

from pydantic import field_serializer, field_validator

from timekeeper.models.base import EntityModel, format_datetime, wire_datetime


class Session(EntityModel):
    """
    MongoDB 'sessions' collection document: one block of time spent on a task.
    """
    task_id: Optional[str] = None
    user_id: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None  # None while the session is running

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def validate_times(cls, v):
        return wire_datetime(v)

    @field_serializer("start_time", "end_time", when_used="json")
    def serialize_times(self, v):
        return format_datetime(v)
