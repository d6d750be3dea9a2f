"""Tests for ProjectService: create / replace / patch / cascading delete."""

from datetime import date

import pytest

from timekeeper.core.exceptions import BadRequestError, ProjectNotFoundError, StorageFailureError
from timekeeper.models.project import Project, ProjectStatus
from timekeeper.models.session import Session
from timekeeper.models.task import Task
from timekeeper.schemas.patch import PatchOperation

pytestmark = pytest.mark.anyio

PROJECT_ID = "123456abc"


async def stored_project(project_store, **fields) -> Project:
    return await project_store.insert(Project(name="project", **fields))


class TestAddProject:
    @pytest.mark.parametrize(
        "name,description,deadline,status",
        [
            ("project", "Hello", None, None),
            ("project", "", None, ProjectStatus.EMPTY),
            ("project", "", date(2019, 12, 21), ProjectStatus.EMPTY),
            ("project", "Hello", date(2019, 12, 21), ProjectStatus.EMPTY),
        ],
    )
    async def test_allowed_values(self, project_service, project_store, name, description, deadline, status):
        created = await project_service.add_project(
            Project(name=name, description=description, deadline=deadline, status=status)
        )

        assert created.id is not None
        stored = await project_store.find_by_id(created.id)
        assert stored.name == name
        assert stored.description == description
        assert stored.deadline == deadline
        assert stored.status == status

    async def test_no_default_status(self, project_service):
        created = await project_service.add_project(Project(name="project"))
        assert created.status is None

    @pytest.mark.parametrize(
        "project_id,name,status",
        [
            (PROJECT_ID, "project", ProjectStatus.EMPTY),
            (PROJECT_ID, "project", ProjectStatus.DONE),
            (None, "", ProjectStatus.READY_TO_START),
            (None, "", ProjectStatus.CANCELED),
            (None, "", None),
            (None, None, ProjectStatus.IN_PROGRESS),
        ],
    )
    async def test_not_allowed_values(self, project_service, project_store, project_id, name, status):
        with pytest.raises(BadRequestError):
            await project_service.add_project(Project(id=project_id, name=name, description="d", status=status))
        assert project_store.documents == {}


class TestUpdateProject:
    @pytest.mark.parametrize("status", list(ProjectStatus))
    async def test_allowed_values(self, project_service, project_store, status):
        existing = await stored_project(project_store)
        replacement = Project(
            id=existing.id, name="renamed", description="", deadline=date(2020, 1, 1), status=status
        )

        saved = await project_service.update_project(replacement)

        assert saved == replacement
        assert await project_store.find_by_id(existing.id) == replacement

    async def test_not_found(self, project_service):
        with pytest.raises(ProjectNotFoundError):
            await project_service.update_project(
                Project(id=PROJECT_ID, name="project", description="Hello", deadline=date.today())
            )

    async def test_missing_deadline(self, project_service, project_store):
        existing = await stored_project(project_store)
        with pytest.raises(BadRequestError):
            await project_service.update_project(Project(id=existing.id, name="p", description="d"))

    @pytest.mark.parametrize("status", [ProjectStatus.DONE, ProjectStatus.CANCELED])
    async def test_finished_project_cannot_be_replaced(self, project_service, project_store, status):
        existing = await stored_project(project_store, status=status)
        with pytest.raises(BadRequestError):
            await project_service.update_project(
                Project(id=existing.id, name="p", description="d", deadline=date.today())
            )


class TestPatchProject:
    @pytest.mark.parametrize(
        "path,value,attribute,expected",
        [
            ("/deadLine", "1980-08-22", "deadline", date(1980, 8, 22)),
            ("/description", "", "description", ""),
            ("/name", "abcde", "name", "abcde"),
            ("/status", "DONE", "status", ProjectStatus.DONE),
            ("/status", "EMPTY", "status", ProjectStatus.EMPTY),
        ],
    )
    async def test_field_written(self, project_service, project_store, path, value, attribute, expected):
        existing = await stored_project(project_store, description="before", status=ProjectStatus.READY_TO_START)

        patched = await project_service.apply_patch(existing.id, PatchOperation(op="replace", path=path, value=value))

        assert getattr(patched, attribute) == expected

    async def test_only_targeted_field_changes(self, project_service, project_store):
        existing = await stored_project(project_store, description="keep", status=ProjectStatus.IN_PROGRESS)

        patched = await project_service.apply_patch(
            existing.id, PatchOperation(op="replace", path="/name", value="renamed")
        )

        assert patched.model_dump(exclude={"name"}) == existing.model_dump(exclude={"name"})

    @pytest.mark.parametrize(
        "operation,path,value,status",
        [
            ("replace", "/deadLine", "2019-12-21", ProjectStatus.DONE),
            ("replace", "/name", "2019-12-21", ProjectStatus.DONE),
            ("replace", "/description", "2019-12-21", ProjectStatus.CANCELED),
            ("replace", "/status", "IN_PROGRESS", ProjectStatus.DONE),
            ("replace", "/id", "2019-12-21", ProjectStatus.IN_PROGRESS),
            ("add", "/id", "2019-12-21", ProjectStatus.IN_PROGRESS),
            ("replace", "/deadLine", "21-12-2019", ProjectStatus.IN_PROGRESS),
        ],
    )
    async def test_rejected(self, project_service, project_store, operation, path, value, status):
        existing = await stored_project(project_store, status=status)
        before = dict(project_store.documents[existing.id])

        with pytest.raises(BadRequestError):
            await project_service.apply_patch(existing.id, PatchOperation(op=operation, path=path, value=value))
        assert project_store.documents[existing.id] == before

    async def test_not_found_before_validation(self, project_service):
        with pytest.raises(ProjectNotFoundError):
            await project_service.apply_patch(PROJECT_ID, PatchOperation(op="add", path="/id", value="x"))

    async def test_unacknowledged_write(self, project_service, project_store):
        existing = await stored_project(project_store)
        project_store.acknowledge_writes = False

        with pytest.raises(StorageFailureError):
            await project_service.apply_patch(
                existing.id, PatchOperation(op="replace", path="/name", value="renamed")
            )


class TestDeleteProject:
    async def test_cascade(self, project_service, project_store, task_store, session_store):
        p1 = await stored_project(project_store)
        other = await stored_project(project_store)
        t1 = await task_store.insert(Task(name="t1", project_id=p1.id))
        t2 = await task_store.insert(Task(name="t2", project_id=p1.id))
        kept_task = await task_store.insert(Task(name="kept", project_id=other.id))
        await session_store.insert(Session(task_id=t1.id))
        await session_store.insert(Session(task_id=t2.id))
        kept_session = await session_store.insert(Session(task_id=kept_task.id))

        await project_service.delete_project(p1.id)

        assert await project_store.find_by_id(p1.id) is None
        assert await task_store.find_all_by(project_id=p1.id) == []
        assert [s.id for s in await session_store.find_all()] == [kept_session.id]
        assert [t.id for t in await task_store.find_all()] == [kept_task.id]

    async def test_not_found(self, project_service):
        with pytest.raises(ProjectNotFoundError):
            await project_service.delete_project(PROJECT_ID)

    async def test_failed_step_is_fatal(self, project_service, project_store, task_store, session_store):
        p1 = await stored_project(project_store)
        t1 = await task_store.insert(Task(name="t1", project_id=p1.id))
        await session_store.insert(Session(task_id=t1.id))
        session_store.acknowledge_writes = False

        with pytest.raises(StorageFailureError):
            await project_service.delete_project(p1.id)

        # nothing after the failing step ran
        assert await task_store.find_by_id(t1.id) is not None
        assert await project_store.find_by_id(p1.id) is not None
