"""Tests for SessionService: booking sessions on tasks, replace, patch, delete."""

from datetime import datetime

import pytest

from timekeeper.core.exceptions import (
    BadRequestError,
    SessionNotFoundError,
    StorageFailureError,
    TaskNotFoundError,
)
from timekeeper.models.session import Session
from timekeeper.models.task import Priority, Task, TaskStatus
from timekeeper.schemas.patch import PatchOperation

pytestmark = pytest.mark.anyio

DATE_TIME_STRING = "2018-07-24T11:18:58"


async def stored_task(task_store, status=TaskStatus.READY_TO_START) -> Task:
    return await task_store.insert(
        Task(
            name="task",
            description="",
            project_id="P1",
            current_time=datetime(2018, 7, 24, 11, 18, 58),
            priority=Priority.MEDIUM,
            status=status,
        )
    )


class TestAddSession:
    async def test_first_session_starts_the_task(self, session_service, task_store):
        task = await stored_task(task_store)

        created = await session_service.add_session(Session(task_id=task.id, user_id="U1"))

        assert created.id is not None
        assert created.start_time is not None
        assert task_store.documents[task.id]["status"] == TaskStatus.IN_PROGRESS

    async def test_keeps_given_start_time(self, session_service, task_store):
        task = await stored_task(task_store)
        start = datetime(2018, 7, 24, 11, 18, 58)

        created = await session_service.add_session(Session(task_id=task.id, start_time=start))

        assert created.start_time == start

    async def test_in_progress_task_is_left_alone(self, session_service, task_store):
        task = await stored_task(task_store, status=TaskStatus.IN_PROGRESS)
        task_store.acknowledge_writes = False

        # no status write happens, so the dropped-write store is never hit
        await session_service.add_session(Session(task_id=task.id))

        assert task_store.documents[task.id]["status"] == TaskStatus.IN_PROGRESS

    @pytest.mark.parametrize("status", [TaskStatus.DONE, TaskStatus.CANCELED])
    async def test_finished_task_rejected(self, session_service, task_store, session_store, status):
        task = await stored_task(task_store, status=status)
        with pytest.raises(BadRequestError):
            await session_service.add_session(Session(task_id=task.id))
        assert session_store.documents == {}

    @pytest.mark.parametrize(
        "session",
        [
            Session(id="abc", task_id="T1"),
            Session(task_id=None),
            Session(task_id=" "),
        ],
    )
    async def test_not_allowed_values(self, session_service, session_store, session):
        with pytest.raises(BadRequestError):
            await session_service.add_session(session)
        assert session_store.documents == {}

    async def test_unknown_task(self, session_service):
        with pytest.raises(TaskNotFoundError):
            await session_service.add_session(Session(task_id="nope"))

    async def test_status_write_not_acknowledged(self, session_service, task_store):
        task = await stored_task(task_store)
        task_store.acknowledge_writes = False
        with pytest.raises(StorageFailureError):
            await session_service.add_session(Session(task_id=task.id))


class TestPatchSession:
    @pytest.mark.parametrize(
        "path,value,attribute,expected",
        [
            ("/startTime", DATE_TIME_STRING, "start_time", datetime(2018, 7, 24, 11, 18, 58)),
            ("/endTime", DATE_TIME_STRING, "end_time", datetime(2018, 7, 24, 11, 18, 58)),
            ("/endTime", None, "end_time", None),
        ],
    )
    async def test_allowed_values(self, session_service, session_store, path, value, attribute, expected):
        session = await session_store.insert(
            Session(task_id="T1", start_time=datetime(2018, 1, 1), end_time=datetime(2018, 1, 2))
        )

        patched = await session_service.apply_patch(
            session.id, PatchOperation(op="replace", path=path, value=value)
        )

        assert getattr(patched, attribute) == expected

    @pytest.mark.parametrize(
        "operation,path,value",
        [
            ("remove", "/endTime", DATE_TIME_STRING),
            ("replace", "/startTime", None),
            ("replace", "/startTime", "2018-07-24 11:18:58"),
            ("replace", "/taskId", "T2"),
            ("replace", "/userId", "U2"),
        ],
    )
    async def test_not_allowed_values(self, session_service, session_store, operation, path, value):
        session = await session_store.insert(Session(task_id="T1", start_time=datetime(2018, 1, 1)))
        with pytest.raises(BadRequestError):
            await session_service.apply_patch(session.id, PatchOperation(op=operation, path=path, value=value))

    async def test_not_found(self, session_service):
        with pytest.raises(SessionNotFoundError):
            await session_service.apply_patch(
                "missing", PatchOperation(op="replace", path="/endTime", value=DATE_TIME_STRING)
            )


class TestUpdateSession:
    async def test_keeps_owner(self, session_service, session_store, task_store):
        task = await stored_task(task_store)
        session = await session_store.insert(
            Session(task_id=task.id, user_id="U1", start_time=datetime(2018, 1, 1))
        )

        saved = await session_service.update_session(
            session.model_copy(update={"user_id": None, "end_time": datetime(2018, 1, 2)})
        )

        assert saved.user_id == "U1"
        assert saved.end_time == datetime(2018, 1, 2)

    @pytest.mark.parametrize("changes", [{"id": None}, {"task_id": None}, {"start_time": None}])
    async def test_not_allowed_values(self, session_service, session_store, changes):
        session = await session_store.insert(Session(task_id="T1", start_time=datetime(2018, 1, 1)))
        with pytest.raises(BadRequestError):
            await session_service.update_session(session.model_copy(update=changes))

    async def test_unknown_task(self, session_service, session_store):
        session = await session_store.insert(Session(task_id="T1", start_time=datetime(2018, 1, 1)))
        with pytest.raises(TaskNotFoundError):
            await session_service.update_session(session)


class TestDeleteSession:
    async def test_delete(self, session_service, session_store):
        session = await session_store.insert(Session(task_id="T1"))
        await session_service.delete_session(session.id)
        assert session_store.documents == {}

    async def test_not_found(self, session_service):
        with pytest.raises(SessionNotFoundError):
            await session_service.delete_session("missing")

    async def test_sessions_from_user(self, session_service, session_store):
        await session_store.insert(Session(task_id="T1", user_id="U1"))
        other = await session_store.insert(Session(task_id="T1", user_id="U2"))

        await session_service.delete_sessions_from_user("U1")

        assert list(session_store.documents) == [other.id]
