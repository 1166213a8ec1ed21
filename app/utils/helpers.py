"""
Helper utility functions
"""
from bson import ObjectId
from bson.errors import InvalidId
from typing import Any, Dict, Optional
from datetime import datetime
import pytz


def utc_now() -> datetime:
    """Current UTC time, truncated to the millisecond precision MongoDB stores"""
    now = datetime.now(pytz.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def new_id() -> str:
    """Generate an opaque document id"""
    return str(ObjectId())


def parse_object_id(value: Any) -> Optional[ObjectId]:
    """Return the ObjectId for ``value`` or None when it is not a valid id"""
    if not isinstance(value, str):
        return None
    try:
        return ObjectId(value)
    except InvalidId:
        return None


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes coming back from the driver"""
    if value.tzinfo is None:
        return pytz.utc.localize(value)
    return value.astimezone(pytz.utc)


def serialize_doc(doc: Optional[Dict]) -> Optional[Dict]:
    """Convert a MongoDB document into plain model input"""
    if doc is None:
        return None

    doc = dict(doc)
    if "_id" in doc:
        doc["id"] = str(doc.pop("_id"))

    for key, value in doc.items():
        if isinstance(value, ObjectId):
            doc[key] = str(value)
        elif isinstance(value, datetime):
            doc[key] = ensure_utc(value)

    return doc
