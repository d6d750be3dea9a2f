# backend/timekeeper/services/users.py

from datetime import datetime, timedelta
from typing import Callable, Optional

import structlog

from timekeeper.core.config import settings
from timekeeper.core.exceptions import (
    ActivationTokenNotCorrectError,
    BadMailFormatError,
    ResetTokenExpiredError,
    UnauthorizedError,
    UserAlreadyActivatedError,
    UserAlreadyExistsError,
    UserNotActiveError,
    UserNotFoundError,
)
from timekeeper.core.mail import MailService
from timekeeper.core.security import PasswordEncoder, TokenGenerator, is_email_address
from timekeeper.db.store import EntityStore
from timekeeper.models.user import User
from timekeeper.patching.fields import EntityKind
from timekeeper.patching.validator import validate_patch
from timekeeper.schemas.patch import PatchOperation
from timekeeper.services.cascade import cascade_step
from timekeeper.services.sessions import SessionService
from timekeeper.services.tasks import TaskService

logger = structlog.get_logger()


class UserService:
    def __init__(
        self,
        users: EntityStore[User],
        task_service: TaskService,
        session_service: SessionService,
        password_encoder: PasswordEncoder,
        mail_service: MailService,
        token_generator: TokenGenerator,
        reset_token_ttl: timedelta = timedelta(minutes=settings.RESET_TOKEN_TTL_MINUTES),
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.users = users
        self.task_service = task_service
        self.session_service = session_service
        self.password_encoder = password_encoder
        self.mail_service = mail_service
        self.token_generator = token_generator
        self.reset_token_ttl = reset_token_ttl
        self.clock = clock

    # ---------- READ ----------

    async def get_by_id(self, user_id: Optional[str]) -> User:
        user = await self.users.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError("User not found")
        return user

    async def get_by_token(self, token: Optional[str]) -> User:
        user = await self.users.find_first_by(token=token) if token else None
        if user is None:
            raise UserNotFoundError("User not found")
        return user

    async def is_authenticated(self, token: Optional[str]) -> bool:
        if not token:
            return False
        return await self.users.find_first_by(token=token) is not None

    # ---------- account lifecycle ----------

    async def register(self, name: str, email: str, password: str) -> User:
        if not is_email_address(email):
            raise BadMailFormatError(f"Invalid email '{email}'")
        await self._check_if_user_exists(name, email)

        user = User(
            name=name,
            email=email,
            password=self.password_encoder.encode(password),
            active=False,
            activation_token=self.token_generator.create_token(),
        )
        created = await self.users.insert(user)
        logger.info("user_registered", user_id=created.id)

        await self.mail_service.send_activation_mail(created.email, created.activation_token, created.name)
        return created

    async def activate(self, name: str, activation_token: str) -> User:
        user = await self.users.find_first_by(name=name)
        if user is None:
            raise UserNotFoundError("User not found")
        if user.activation_token != activation_token:
            raise ActivationTokenNotCorrectError("Token not correct")
        if user.active:
            raise UserAlreadyActivatedError("User already activated")

        activated = await self.users.save(user.model_copy(update={"active": True}))
        logger.info("user_activated", user_id=activated.id)
        return activated

    async def login(self, name: str, password: str) -> User:
        user = await self.users.find_first_by(name=name)
        if user is None:
            raise UserNotFoundError("User not found")
        if not self.password_encoder.matches(password, user.password):
            raise UnauthorizedError("Incorrect password")
        if not user.active:
            raise UserNotActiveError("User not active")

        logged_in = await self.users.save(user.model_copy(update={"token": self.token_generator.create_token()}))
        logger.info("user_logged_in", user_id=logged_in.id)
        return logged_in

    async def send_reset_password_mail(self, email: str) -> None:
        if not is_email_address(email):
            raise BadMailFormatError(f"Invalid email '{email}'")
        user = await self.users.find_first_by(email=email)
        if user is None:
            raise UserNotFoundError("User not found")

        user = await self.users.save(
            user.model_copy(
                update={
                    "reset_password_token": self.token_generator.create_token(),
                    "reset_time": self.clock(),
                }
            )
        )
        await self.mail_service.send_reset_password_mail(user)
        logger.info("reset_password_mail_sent", user_id=user.id)

    async def reset_password(self, name: str, reset_password_token: str, password: str) -> User:
        user = await self.users.find_first_by(name=name, reset_password_token=reset_password_token)
        if user is None:
            raise UserNotFoundError("User not found")
        if user.reset_time is None or self.clock() - user.reset_time > self.reset_token_ttl:
            raise ResetTokenExpiredError("Reset token expired")

        updated = await self.users.save(
            user.model_copy(
                update={
                    "password": self.password_encoder.encode(password),
                    "reset_password_token": None,
                    "reset_time": None,
                }
            )
        )
        logger.info("password_reset", user_id=updated.id)
        return updated

    async def _check_if_user_exists(self, name: str, email: str) -> None:
        if await self.users.find_first_by(name=name) is not None:
            raise UserAlreadyExistsError("User already exists")
        if await self.users.find_first_by(email=email) is not None:
            raise UserAlreadyExistsError("User already exists")

    # ---------- PATCH ----------

    async def apply_patch(self, token: str, operation: PatchOperation) -> User:
        """
        The only patchable user field is /selectedTask; selecting a task also
        selects the project it belongs to.
        """
        user = await self.get_by_token(token)
        validate_patch(EntityKind.USER, operation, user)
        task = await self.task_service.get_by_id(operation.value)

        updated = await self.users.save(
            user.model_copy(update={"selected_task": task.id, "selected_project": task.project_id})
        )
        logger.info("user_selected_task", user_id=updated.id, task_id=task.id)
        return updated

    # ---------- DELETE ----------

    async def delete_user(self, user_id: str) -> None:
        await self.get_by_id(user_id)
        await self.session_service.delete_sessions_from_user(user_id)
        await cascade_step(f"delete user {user_id}", self.users.delete_by_id(user_id))
        logger.info("user_deleted", user_id=user_id)
