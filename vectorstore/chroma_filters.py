# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-10-01
# Description: chroma_filters.py
# -----------------------------------------------------------------------------
# Chroma metadata can only hold flat scalars, so each stored document gets a
# flattened copy of the fields we filter or sort on. This module builds that
# copy and translates Mongo-style predicates into Chroma "where" clauses.
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from utility.time_utils import iso_to_epoch

DATETIME = "datetime"
NUMBER = "number"
STRING = "string"

INDEXED_FIELDS: Dict[str, str] = {
    "user_id": STRING,
    "entry_id": STRING,
    "session_id": STRING,
    "message_type": STRING,
    "model_version": STRING,
    "timestamp": DATETIME,
    "created_at": DATETIME,
    "updated_at": DATETIME,
    "text_length": NUMBER,
    "processing_time_ms": NUMBER,
    "feature_completeness": NUMBER,
    "confidence_score": NUMBER,
    "emotion_context.dominant_emotion": STRING,
    "emotion_context.intensity": NUMBER,
}

# List fields are indexed as one boolean key per element
TAG_FIELDS: Dict[str, str] = {
    "semantic_tags": "tag:",
}

SUPPORTED_OPERATORS = ("$eq", "$ne", "$gt", "$gte", "$lt", "$lte", "$in", "$nin")


def metadata_key(field: str) -> str:
    return field.replace(".", "__")


def _get_path(document: Dict[str, Any], field: str) -> Any:
    value: Any = document
    for part in field.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def _to_scalar(field: str, value: Any) -> Any:
    if INDEXED_FIELDS.get(field) != DATETIME:
        return value
    if isinstance(value, datetime):
        return value.timestamp()
    if isinstance(value, str):
        return iso_to_epoch(value)
    return value


def build_metadata(document: Dict[str, Any]) -> Dict[str, Any]:
    metadata: Dict[str, Any] = {"doc_id": document["_id"]}

    for field in INDEXED_FIELDS:
        value = _get_path(document, field)
        if value is None:
            continue
        metadata[metadata_key(field)] = _to_scalar(field, value)

    for field, prefix in TAG_FIELDS.items():
        for item in document.get(field) or []:
            metadata[f"{prefix}{item}"] = True

    return metadata


def _tag_condition(prefix: str, condition: Any) -> Dict[str, Any]:
    if isinstance(condition, dict):
        if set(condition) != {"$in"}:
            raise ValueError(f"Unsupported list filter {condition!r}")
        values = list(dict.fromkeys(condition["$in"]))
    else:
        values = [condition]

    if not values:
        raise ValueError("Empty $in filter")

    clauses = [{f"{prefix}{v}": {"$eq": True}} for v in values]
    return clauses[0] if len(clauses) == 1 else {"$or": clauses}


def to_where(filter: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Translate a Mongo-style predicate into a Chroma where clause.
    Returns None for an empty predicate (Chroma rejects an empty dict).
    """
    conditions: List[Dict[str, Any]] = []

    for field, condition in (filter or {}).items():
        if field in TAG_FIELDS:
            conditions.append(_tag_condition(TAG_FIELDS[field], condition))
            continue

        if field not in INDEXED_FIELDS:
            raise ValueError(f"Field '{field}' is not indexed for filtering")

        key = metadata_key(field)
        if not isinstance(condition, dict):
            conditions.append({key: {"$eq": _to_scalar(field, condition)}})
            continue

        for op, value in condition.items():
            if op not in SUPPORTED_OPERATORS:
                raise ValueError(f"Unsupported operator '{op}' on field '{field}'")
            if op in ("$in", "$nin"):
                value = [_to_scalar(field, v) for v in value]
            else:
                value = _to_scalar(field, value)
            conditions.append({key: {op: value}})

    if not conditions:
        return None
    if len(conditions) == 1:
        return conditions[0]
    return {"$and": conditions}


def sort_value(metadata: Optional[Dict[str, Any]], field: str) -> Tuple[int, Any]:
    """Sort key over stored metadata; documents missing the field sort lowest."""
    if field not in INDEXED_FIELDS:
        raise ValueError(f"Field '{field}' is not indexed for sorting")
    value = (metadata or {}).get(metadata_key(field))
    if value is None:
        return (0, 0)
    return (1, value)
