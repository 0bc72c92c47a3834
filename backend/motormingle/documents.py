from datetime import datetime, timezone
from typing import Any, Dict, Optional

from bson import ObjectId
from bson.errors import InvalidId

from .errors import ValidationError


def parse_object_id(s: Any) -> ObjectId:
    try:
        return ObjectId(str(s))
    except (InvalidId, TypeError):
        raise ValidationError("invalid id")


def _plain(v: Any) -> Any:
    if isinstance(v, ObjectId):
        return str(v)
    if isinstance(v, datetime):
        if v.tzinfo is None:
            v = v.replace(tzinfo=timezone.utc)
        return v.isoformat()
    if isinstance(v, dict):
        return {k: _plain(x) for k, x in v.items()}
    if isinstance(v, list):
        return [_plain(x) for x in v]
    return v


def serialize_document(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """ObjectIds -> strings and datetimes -> ISO so the document is JSON-safe."""
    if doc is None:
        return None
    return _plain(doc)


def insert_result(res) -> Dict[str, Any]:
    return {"acknowledged": res.acknowledged, "insertedId": str(res.inserted_id)}


def update_result(res) -> Dict[str, Any]:
    upserted = res.upserted_id
    return {
        "acknowledged": res.acknowledged,
        "matchedCount": res.matched_count,
        "modifiedCount": res.modified_count,
        "upsertedId": str(upserted) if upserted is not None else None,
    }


def delete_result(res) -> Dict[str, Any]:
    return {"acknowledged": res.acknowledged, "deletedCount": res.deleted_count}
