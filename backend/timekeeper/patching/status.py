# backend/timekeeper/patching/status.py

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Mapping, Optional, Type

from timekeeper.models.project import ProjectStatus
from timekeeper.models.task import TaskStatus


@dataclass(frozen=True)
class StatusMachine:
    """
    Explicit transition table for one entity's status field.

    - initial: values accepted on create (None = "absent" is allowed when in the set)
    - transitions: source -> allowed targets
    - terminal: states after which the entity is considered finished
    - locks_terminal: when True, a terminal entity rejects every field mutation
      except a status change along an edge listed in `transitions`
    """
    name: str
    states: Type[Enum]
    initial: FrozenSet[Optional[Enum]]
    transitions: Mapping[Enum, FrozenSet[Enum]]
    terminal: FrozenSet[Enum]
    locks_terminal: bool

    def is_terminal(self, state: Optional[Enum]) -> bool:
        return state in self.terminal

    def is_locked(self, state: Optional[Enum]) -> bool:
        return self.locks_terminal and self.is_terminal(state)

    def accepts_initial(self, state: Optional[Enum]) -> bool:
        return state in self.initial

    def can_transition(self, source: Optional[Enum], target: Enum) -> bool:
        # an entity that never had a status behaves like a fresh one
        if source is None:
            return True
        return target in self.transitions.get(source, frozenset())


def _open_edges(states: Type[Enum], terminal: FrozenSet[Enum]) -> dict:
    """every non-terminal state may move to any state, itself included"""
    return {
        s: frozenset(states)
        for s in states
        if s not in terminal
    }


_PROJECT_TERMINAL = frozenset({ProjectStatus.DONE, ProjectStatus.CANCELED})

PROJECT_STATUS = StatusMachine(
    name="project",
    states=ProjectStatus,
    initial=frozenset({None, *ProjectStatus}),
    transitions=_open_edges(ProjectStatus, _PROJECT_TERMINAL),
    terminal=_PROJECT_TERMINAL,
    locks_terminal=True,
)

# Task DONE / CANCELED are terminal by name,
# but they do not block further edits (unlike Project).
TASK_STATUS = StatusMachine(
    name="task",
    states=TaskStatus,
    initial=frozenset({None, TaskStatus.READY_TO_START}),
    transitions={s: frozenset(TaskStatus) for s in TaskStatus},
    terminal=frozenset({TaskStatus.DONE, TaskStatus.CANCELED}),
    locks_terminal=False,
)

TASK_DEFAULT_STATUS = TaskStatus.READY_TO_START
