# backend/timekeeper/db/memory.py

import copy
import uuid
from typing import Any, Dict, List, Optional

from timekeeper.db.store import E, EntityStore


class InMemoryEntityStore(EntityStore[E]):
    """
    dict-backed EntityStore (STORE_BACKEND=memory, tests).
    Documents are kept as plain dicts keyed by id, like a collection would.
    `acknowledge_writes=False` simulates a store that drops writes.
    """

    def __init__(self, model, acknowledge_writes: bool = True):
        super().__init__(model)
        self.documents: Dict[str, Dict[str, Any]] = {}
        self.acknowledge_writes = acknowledge_writes

    def _load(self, doc: Dict[str, Any]) -> E:
        return self.model.model_validate(copy.deepcopy(doc))

    @staticmethod
    def _matches(doc: Dict[str, Any], criteria: Dict[str, Any]) -> bool:
        return all(doc.get(k) == v for k, v in criteria.items())

    async def find_by_id(self, entity_id: Optional[str]) -> Optional[E]:
        if entity_id is None or entity_id not in self.documents:
            return None
        return self._load(self.documents[entity_id])

    async def find_first_by(self, **criteria: Any) -> Optional[E]:
        for doc in self.documents.values():
            if self._matches(doc, criteria):
                return self._load(doc)
        return None

    async def find_all_by(self, **criteria: Any) -> List[E]:
        return [self._load(doc) for doc in self.documents.values() if self._matches(doc, criteria)]

    async def insert(self, entity: E) -> E:
        entity_id = uuid.uuid4().hex
        doc = entity.model_dump()
        doc["id"] = entity_id
        self.documents[entity_id] = doc
        return self._load(doc)

    async def save(self, entity: E) -> E:
        doc = entity.model_dump()
        if doc.get("id") is None:
            doc["id"] = uuid.uuid4().hex
        if self.acknowledge_writes:
            self.documents[doc["id"]] = doc
        return self._load(doc)

    async def update_field(self, entity_id: str, field: str, value: Any) -> bool:
        if not self.acknowledge_writes:
            return False
        if entity_id in self.documents:
            self.documents[entity_id][field] = copy.deepcopy(value)
        return True

    async def delete_by_id(self, entity_id: str) -> bool:
        if not self.acknowledge_writes:
            return False
        self.documents.pop(entity_id, None)
        return True

    async def delete_all_by(self, **criteria: Any) -> bool:
        if not self.acknowledge_writes:
            return False
        for entity_id in [k for k, doc in self.documents.items() if self._matches(doc, criteria)]:
            del self.documents[entity_id]
        return True
