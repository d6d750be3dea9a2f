# backend/timekeeper/models/user.py

from datetime import datetime
from typing import Optional

from timekeeper.models.base import EntityModel


class User(EntityModel):
    """
    MongoDB 'users' collection document.
    password is always the encoded (hashed) value once stored.
    """
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None

    active: bool = False
    activation_token: Optional[str] = None

    reset_password_token: Optional[str] = None
    reset_time: Optional[datetime] = None

    # issued at login
    token: Optional[str] = None

    selected_task: Optional[str] = None
    selected_project: Optional[str] = None
