"""Shared fixtures: in-memory stores and the services wired on top of them."""

import os
import random
from datetime import datetime, timedelta

import pytest

os.environ.setdefault("STORE_BACKEND", "memory")

from timekeeper.core.mail import LoggingMailService  # noqa: E402
from timekeeper.core.security import PasswordEncoder, TokenGenerator  # noqa: E402
from timekeeper.db.memory import InMemoryEntityStore  # noqa: E402
from timekeeper.models.project import Project  # noqa: E402
from timekeeper.models.session import Session  # noqa: E402
from timekeeper.models.task import Task  # noqa: E402
from timekeeper.models.user import User  # noqa: E402
from timekeeper.services.projects import ProjectService  # noqa: E402
from timekeeper.services.sessions import SessionService  # noqa: E402
from timekeeper.services.tasks import TaskService  # noqa: E402
from timekeeper.services.users import UserService  # noqa: E402

DATE_TIME_STRING = "2018-07-24T11:18:58"
DATE_STRING = "2018-07-24"


@pytest.fixture
def anyio_backend():
    return "asyncio"


class FakeClock:
    """Callable clock the tests can move forward."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def project_store():
    return InMemoryEntityStore(Project)


@pytest.fixture
def task_store():
    return InMemoryEntityStore(Task)


@pytest.fixture
def session_store():
    return InMemoryEntityStore(Session)


@pytest.fixture
def user_store():
    return InMemoryEntityStore(User)


@pytest.fixture
def project_service(project_store, task_store, session_store):
    return ProjectService(project_store, task_store, session_store)


@pytest.fixture
def task_service(task_store, session_store, project_service):
    return TaskService(task_store, session_store, project_service)


@pytest.fixture
def session_service(session_store, task_service):
    return SessionService(session_store, task_service)


@pytest.fixture
def mail_service():
    return LoggingMailService(sender="test@timekeeper.local", frontend_url="http://frontend")


@pytest.fixture
def clock():
    return FakeClock(datetime(2019, 1, 1, 12, 0, 0))


@pytest.fixture
def token_generator():
    return TokenGenerator(length=16, rng=random.Random(42))


@pytest.fixture
def password_encoder():
    # few iterations: hashing speed is irrelevant in tests
    return PasswordEncoder(iterations=1_000)


@pytest.fixture
def user_service(user_store, task_service, session_service, password_encoder, mail_service, token_generator, clock):
    return UserService(
        user_store,
        task_service,
        session_service,
        password_encoder,
        mail_service,
        token_generator,
        reset_token_ttl=timedelta(minutes=10),
        clock=clock,
    )
