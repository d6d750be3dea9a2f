# backend/timekeeper/db/store.py

from abc import ABC, abstractmethod
from typing import Any, Generic, List, Optional, Type, TypeVar

from timekeeper.models.base import EntityModel

E = TypeVar("E", bound=EntityModel)


class EntityStore(ABC, Generic[E]):
    """
    Persistence collaborator for one entity type (one collection).

    Lookups return None for a missing id; services turn that into the
    entity's NotFound error. Writes return whether the store acknowledged them.
    """

    def __init__(self, model: Type[E]):
        self.model = model

    @abstractmethod
    async def find_by_id(self, entity_id: Optional[str]) -> Optional[E]: ...

    @abstractmethod
    async def find_first_by(self, **criteria: Any) -> Optional[E]: ...

    @abstractmethod
    async def find_all_by(self, **criteria: Any) -> List[E]: ...

    @abstractmethod
    async def insert(self, entity: E) -> E:
        """Store a new entity; returns a copy carrying the assigned id."""

    @abstractmethod
    async def save(self, entity: E) -> E:
        """Full-document replace (id preserved)."""

    @abstractmethod
    async def update_field(self, entity_id: str, field: str, value: Any) -> bool:
        """Targeted single-field write."""

    @abstractmethod
    async def delete_by_id(self, entity_id: str) -> bool: ...

    @abstractmethod
    async def delete_all_by(self, **criteria: Any) -> bool: ...

    async def find_all(self) -> List[E]:
        return await self.find_all_by()
