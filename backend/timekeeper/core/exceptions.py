# backend/timekeeper/core/exceptions.py

from fastapi import status


class TimekeeperError(Exception):
    """
    Base for every error the services raise.
    status_code is what the HTTP layer answers with (see main.py handlers).
    """
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# ---------- 400 ----------

class BadRequestError(TimekeeperError):
    status_code = status.HTTP_400_BAD_REQUEST


class BadMailFormatError(BadRequestError):
    pass


class ActivationTokenNotCorrectError(BadRequestError):
    pass


class UserAlreadyActivatedError(BadRequestError):
    pass


class ResetTokenExpiredError(BadRequestError):
    pass


# ---------- 401 / 403 / 409 ----------

class UnauthorizedError(TimekeeperError):
    status_code = status.HTTP_401_UNAUTHORIZED


class UserNotActiveError(TimekeeperError):
    status_code = status.HTTP_403_FORBIDDEN


class UserAlreadyExistsError(TimekeeperError):
    status_code = status.HTTP_409_CONFLICT


# ---------- 404 ----------

class NotFoundError(TimekeeperError):
    status_code = status.HTTP_404_NOT_FOUND


class ProjectNotFoundError(NotFoundError):
    pass


class TaskNotFoundError(NotFoundError):
    pass


class SessionNotFoundError(NotFoundError):
    pass


class UserNotFoundError(NotFoundError):
    pass


# ---------- 500 ----------

class StorageFailureError(TimekeeperError):
    """The store did not acknowledge a write (or a cascade step failed)."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
