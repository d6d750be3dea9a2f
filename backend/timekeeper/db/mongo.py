# backend/timekeeper/db/mongo.py

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

import structlog
from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase

from timekeeper.core.config import settings
from timekeeper.db.store import E, EntityStore

logger = structlog.get_logger()

client: Optional[AsyncIOMotorClient] = None
db: Optional[AsyncIOMotorDatabase] = None


async def connect_to_mongo():
    global client, db
    client = AsyncIOMotorClient(settings.MONGO_URI)
    db = client[settings.MONGO_DB_NAME]
    logger.info("mongo_connected", db_name=settings.MONGO_DB_NAME)


async def close_mongo_connection():
    global client
    if client:
        client.close()
        logger.info("mongo_connection_closed")


def get_db() -> AsyncIOMotorDatabase:
    if db is None:
        raise RuntimeError("MongoDB is not connected (connect_to_mongo() not called)")
    return db


def _safe_object_id(entity_id: Any) -> Optional[ObjectId]:
    if isinstance(entity_id, ObjectId):
        return entity_id
    try:
        return ObjectId(entity_id)
    except (InvalidId, TypeError):
        return None


def _to_bson(value: Any) -> Any:
    """
    python value -> BSON-friendly value
    - Enum: stored by member name
    - date (without time): stored as "YYYY-MM-DD"
    """
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, date) and not isinstance(value, datetime):
        return value.isoformat()
    return value


class MongoEntityStore(EntityStore[E]):
    """
    EntityStore backed by one Motor collection.
    `_id` is an ObjectId in the collection and a plain string on the model.
    """

    def __init__(self, model, collection_name: str, database: Optional[AsyncIOMotorDatabase] = None):
        super().__init__(model)
        self.collection_name = collection_name
        self._database = database

    @property
    def collection(self) -> AsyncIOMotorCollection:
        return (self._database if self._database is not None else get_db())[self.collection_name]

    def _to_document(self, entity: E) -> Dict[str, Any]:
        doc = {k: _to_bson(v) for k, v in entity.model_dump(exclude={"id"}).items()}
        return doc

    def _from_document(self, doc: Dict[str, Any]) -> E:
        data = dict(doc)
        data["id"] = str(data.pop("_id"))
        return self.model.model_validate(data)

    @staticmethod
    def _query(criteria: Dict[str, Any]) -> Dict[str, Any]:
        return {k: _to_bson(v) for k, v in criteria.items()}

    # ---------- READ ----------

    async def find_by_id(self, entity_id: Optional[str]) -> Optional[E]:
        oid = _safe_object_id(entity_id)
        if oid is None:
            return None
        doc = await self.collection.find_one({"_id": oid})
        return self._from_document(doc) if doc else None

    async def find_first_by(self, **criteria: Any) -> Optional[E]:
        doc = await self.collection.find_one(self._query(criteria))
        return self._from_document(doc) if doc else None

    async def find_all_by(self, **criteria: Any) -> List[E]:
        cursor = self.collection.find(self._query(criteria))
        return [self._from_document(doc) async for doc in cursor]

    # ---------- CREATE ----------

    async def insert(self, entity: E) -> E:
        result = await self.collection.insert_one(self._to_document(entity))
        return entity.model_copy(update={"id": str(result.inserted_id)})

    # ---------- UPDATE ----------

    async def save(self, entity: E) -> E:
        oid = _safe_object_id(entity.id)
        if oid is None:
            return await self.insert(entity)
        await self.collection.replace_one({"_id": oid}, self._to_document(entity), upsert=True)
        return entity

    async def update_field(self, entity_id: str, field: str, value: Any) -> bool:
        oid = _safe_object_id(entity_id)
        if oid is None:
            return False
        result = await self.collection.update_one({"_id": oid}, {"$set": {field: _to_bson(value)}})
        return result.acknowledged

    # ---------- DELETE ----------

    async def delete_by_id(self, entity_id: str) -> bool:
        oid = _safe_object_id(entity_id)
        if oid is None:
            return False
        result = await self.collection.delete_one({"_id": oid})
        return result.acknowledged

    async def delete_all_by(self, **criteria: Any) -> bool:
        result = await self.collection.delete_many(self._query(criteria))
        return result.acknowledged
