from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from timekeeper.core.config import settings
from timekeeper.core.exceptions import UnauthorizedError
from timekeeper.core.mail import LoggingMailService, MailService
from timekeeper.core.security import PasswordEncoder, TokenGenerator
from timekeeper.db.memory import InMemoryEntityStore
from timekeeper.db.mongo import MongoEntityStore
from timekeeper.db.store import EntityStore
from timekeeper.models.project import Project
from timekeeper.models.session import Session
from timekeeper.models.task import Task
from timekeeper.models.user import User
from timekeeper.services.projects import ProjectService
from timekeeper.services.sessions import SessionService
from timekeeper.services.tasks import TaskService
from timekeeper.services.users import UserService

# Swagger shows a token field; the token is the one returned by /user/login
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class Stores:
    projects: EntityStore[Project]
    tasks: EntityStore[Task]
    sessions: EntityStore[Session]
    users: EntityStore[User]


@lru_cache
def _memory_stores() -> Stores:
    return Stores(
        projects=InMemoryEntityStore(Project),
        tasks=InMemoryEntityStore(Task),
        sessions=InMemoryEntityStore(Session),
        users=InMemoryEntityStore(User),
    )


def get_stores() -> Stores:
    if settings.STORE_BACKEND == "memory":
        return _memory_stores()
    return Stores(
        projects=MongoEntityStore(Project, "projects"),
        tasks=MongoEntityStore(Task, "tasks"),
        sessions=MongoEntityStore(Session, "sessions"),
        users=MongoEntityStore(User, "users"),
    )


@lru_cache
def get_mail_service() -> MailService:
    return LoggingMailService()


def get_token_generator() -> TokenGenerator:
    return TokenGenerator()


def get_password_encoder() -> PasswordEncoder:
    return PasswordEncoder()


# ---------- services ----------

def get_project_service(stores: Stores = Depends(get_stores)) -> ProjectService:
    return ProjectService(stores.projects, stores.tasks, stores.sessions)


def get_task_service(
    stores: Stores = Depends(get_stores),
    project_service: ProjectService = Depends(get_project_service),
) -> TaskService:
    return TaskService(stores.tasks, stores.sessions, project_service)


def get_session_service(
    stores: Stores = Depends(get_stores),
    task_service: TaskService = Depends(get_task_service),
) -> SessionService:
    return SessionService(stores.sessions, task_service)


def get_user_service(
    stores: Stores = Depends(get_stores),
    task_service: TaskService = Depends(get_task_service),
    session_service: SessionService = Depends(get_session_service),
    password_encoder: PasswordEncoder = Depends(get_password_encoder),
    mail_service: MailService = Depends(get_mail_service),
    token_generator: TokenGenerator = Depends(get_token_generator),
) -> UserService:
    return UserService(
        stores.users,
        task_service,
        session_service,
        password_encoder,
        mail_service,
        token_generator,
    )


# ---------- auth ----------

async def get_current_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Missing session token")
    return credentials.credentials


async def get_current_user(
    token: str = Depends(get_current_token),
    user_service: UserService = Depends(get_user_service),
) -> User:
    """
    Resolves the session token issued by /user/login.
    """
    if not await user_service.is_authenticated(token):
        raise UnauthorizedError("Could not validate credentials")
    return await user_service.get_by_token(token)
