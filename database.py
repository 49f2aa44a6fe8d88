import logging
import os
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Union

from bson import ObjectId
from pydantic import BaseModel
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import ConnectionFailure

from schemas import UpdateOutcome

logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv("DATABASE_URL", "mongodb://localhost:27017")
DATABASE_NAME = os.getenv("DATABASE_NAME", "modelingRelationships")
SERVER_SELECTION_TIMEOUT_MS = 5000


def connect(url: Optional[str] = None, name: Optional[str] = None) -> Database:
    """Open a client and return the database, failing fast if the server is unreachable."""
    url = url or DATABASE_URL
    name = name or DATABASE_NAME
    client = MongoClient(url, serverSelectionTimeoutMS=SERVER_SELECTION_TIMEOUT_MS)
    try:
        client.admin.command("ping")
    except ConnectionFailure:
        logger.error("Could not connect to %s", url)
        client.close()
        raise
    logger.info("connected to DB %s", name)
    return client[name]


@contextmanager
def open_database(url: Optional[str] = None, name: Optional[str] = None) -> Iterator[Database]:
    db = connect(url, name)
    try:
        yield db
    finally:
        db.client.close()
        logger.info("closed connection to DB %s", db.name)


def to_object_id(value: Union[str, ObjectId]) -> ObjectId:
    # Raises bson.errors.InvalidId for malformed ids
    if isinstance(value, ObjectId):
        return value
    return ObjectId(str(value))


def _serialize(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if doc is None:
        return doc
    d = dict(doc)
    if "_id" in d:
        d["id"] = str(d.pop("_id"))
    for k, v in d.items():
        if isinstance(v, ObjectId):
            d[k] = str(v)
    return d


def create_document(db: Database, collection_name: str, data: Union[BaseModel, Dict[str, Any]]) -> Dict[str, Any]:
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_none=True)
    col = db[collection_name]
    res = col.insert_one(dict(data))
    saved = col.find_one({"_id": res.inserted_id})
    return _serialize(saved)


def get_documents(
    db: Database,
    collection_name: str,
    filter_dict: Optional[Dict[str, Any]] = None,
    projection: Optional[Dict[str, Any]] = None,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    col = db[collection_name]
    cursor = col.find(filter_dict or {}, projection)
    if limit:
        cursor = cursor.limit(limit)
    return [_serialize(d) for d in cursor]


def get_document_by_id(
    db: Database,
    collection_name: str,
    doc_id: Any,
    projection: Optional[Dict[str, Any]] = None,
) -> Optional[Dict[str, Any]]:
    return _serialize(db[collection_name].find_one({"_id": doc_id}, projection))


def update_document(db: Database, collection_name: str, doc_id: ObjectId, update: Dict[str, Any]) -> UpdateOutcome:
    res = db[collection_name].update_one({"_id": doc_id}, update)
    outcome = UpdateOutcome(matched_count=res.matched_count, modified_count=res.modified_count)
    if outcome.matched_count == 0:
        logger.warning("No %s document matched id %s", collection_name, doc_id)
    return outcome


def replace_document(db: Database, collection_name: str, doc_id: ObjectId, data: Dict[str, Any]) -> UpdateOutcome:
    res = db[collection_name].replace_one({"_id": doc_id}, data)
    return UpdateOutcome(matched_count=res.matched_count, modified_count=res.modified_count)


def delete_document(db: Database, collection_name: str, doc_id: ObjectId) -> int:
    res = db[collection_name].delete_one({"_id": doc_id})
    if res.deleted_count == 0:
        logger.warning("No %s document matched id %s", collection_name, doc_id)
    return res.deleted_count
