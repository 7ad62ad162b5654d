# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-30
# Description: FilterBuilder.py
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from enum import Enum
from functools import reduce
from typing import Any, Callable, Dict, Optional, Sequence

from utility.time_utils import to_utc_iso

Predicate = Dict[str, Any]


@dataclass(frozen=True)
class FilterClause:
    """
    One optional filter: `applies` decides whether the source carries it,
    `contribute` returns its piece of the store predicate.
    """

    name: str
    applies: Callable[[Any], bool]
    contribute: Callable[[Any], Predicate]


def _merge(predicate: Predicate, piece: Predicate) -> Predicate:
    merged = dict(predicate)
    for key, value in piece.items():
        existing = merged.get(key)
        if isinstance(existing, dict) and isinstance(value, dict):
            merged[key] = {**existing, **value}
        else:
            merged[key] = value
    return merged


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _nested(source: Any, *path: str) -> Any:
    value = source
    for attr in path:
        if value is None:
            return None
        value = getattr(value, attr, None)
    return value


class FilterBuilder:
    """Folds an ordered list of optional clauses over an empty predicate."""

    def __init__(self, clauses: Sequence[FilterClause]) -> None:
        self.clauses = tuple(clauses)

    def build(self, source: Optional[Any]) -> Predicate:
        if source is None:
            return {}
        return reduce(
            lambda acc, clause: _merge(acc, clause.contribute(source)) if clause.applies(source) else acc,
            self.clauses,
            {},
        )

    def extended(self, *clauses: FilterClause) -> "FilterBuilder":
        return FilterBuilder(self.clauses + tuple(clauses))


# -----------------------------------------------------------------------------
# Clause factories
# -----------------------------------------------------------------------------
def equals(field: str, *path: str) -> FilterClause:
    """Exact match on `field` when the source value at `path` is set."""
    path = path or (field,)
    return FilterClause(
        name=field,
        applies=lambda src: _nested(src, *path) is not None,
        contribute=lambda src: {field: _plain(_nested(src, *path))},
    )


def at_least(field: str, *path: str) -> FilterClause:
    """Inclusive lower bound on `field`."""
    return FilterClause(
        name=field,
        applies=lambda src: _nested(src, *path) is not None,
        contribute=lambda src: {field: {"$gte": _nested(src, *path)}},
    )


def date_range(field: str = "timestamp") -> FilterClause:
    """Half-open or closed range depending on which bounds are present."""

    def _bounds(src: Any) -> Predicate:
        rng: Predicate = {}
        start = _nested(src, "date_range", "start")
        end = _nested(src, "date_range", "end")
        if start is not None:
            rng["$gte"] = to_utc_iso(start)
        if end is not None:
            rng["$lte"] = to_utc_iso(end)
        return {field: rng}

    return FilterClause(
        name=field,
        applies=lambda src: _nested(src, "date_range", "start") is not None
        or _nested(src, "date_range", "end") is not None,
        contribute=_bounds,
    )


def any_of(field: str) -> FilterClause:
    """Matches when the stored list shares at least one value with the requested one."""
    return FilterClause(
        name=field,
        applies=lambda src: bool(_nested(src, field)),
        contribute=lambda src: {field: {"$in": list(_nested(src, field))}},
    )


# Filters shared by paginated listing and similarity search
LIST_FILTER = FilterBuilder(
    [
        equals("user_id"),
        equals("session_id"),
        equals("message_type"),
        date_range("timestamp"),
    ]
)

SIMILARITY_FILTER = LIST_FILTER.extended(
    equals("emotion_context.dominant_emotion", "emotion_filter", "dominant_emotion"),
    at_least("emotion_context.intensity", "emotion_filter", "min_intensity"),
    any_of("semantic_tags"),
)
