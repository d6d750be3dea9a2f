# backend/timekeeper/patching/engine.py

from typing import Any, Generic, Optional, Type

import structlog

from timekeeper.core.exceptions import NotFoundError, StorageFailureError
from timekeeper.db.store import E, EntityStore
from timekeeper.patching.converter import convert_value
from timekeeper.patching.fields import EntityKind, FieldSpec
from timekeeper.patching.validator import validate_patch
from timekeeper.schemas.patch import PatchOperation

logger = structlog.get_logger()


class PatchEngine(Generic[E]):
    """
    Runs one PatchOperation against one entity:

        lookup (NotFound) -> validate -> convert -> update_field -> ack check

    The write is a single-field update, so patches of different fields of the
    same entity never overwrite each other. Read-validate-write as a whole is
    not atomic: two concurrent patches of the *same* field may interleave.
    """

    def __init__(self, kind: EntityKind, store: EntityStore[E], not_found: Type[NotFoundError]):
        self.kind = kind
        self.store = store
        self.not_found = not_found

    async def load(self, entity_id: Optional[str]) -> E:
        entity = await self.store.find_by_id(entity_id)
        if entity is None:
            raise self.not_found(f"Cannot patch {self.kind.value} {entity_id}: it doesn't exist")
        return entity

    async def apply(self, entity_id: Optional[str], operation: PatchOperation) -> Any:
        """Returns the typed value that was written."""
        current = await self.load(entity_id)
        spec = validate_patch(self.kind, operation, current)
        value = convert_value(spec, operation.value)
        await self.write(current.id, spec, value)
        logger.info(
            "entity_patched",
            entity=self.kind.value,
            entity_id=current.id,
            path=operation.path,
        )
        return value

    async def write(self, entity_id: str, spec: FieldSpec, value: Any) -> None:
        acknowledged = await self.store.update_field(entity_id, spec.attribute, value)
        if not acknowledged:
            logger.error(
                "patch_not_acknowledged",
                entity=self.kind.value,
                entity_id=entity_id,
                field=spec.attribute,
            )
            raise StorageFailureError(
                f"Could not set '{spec.path}' on {self.kind.value} {entity_id}: write not acknowledged"
            )
