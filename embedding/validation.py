# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-28
# Description: validation.py
# -----------------------------------------------------------------------------
from typing import Any, List, Sequence, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from embedding.ChatEmbeddingSchema import (
    ChatEmbeddingBatch,
    ChatEmbeddingCreate,
    ChatEmbeddingUpdate,
    ListQuery,
    SimilaritySearchRequest,
)
from embedding.errors import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def _format_errors(exc: PydanticValidationError) -> List[str]:
    """One readable line per violation, prefixed with the field path."""
    messages: List[str] = []
    for err in exc.errors():
        msg = err.get("msg", "invalid value")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        loc = ".".join(str(p) for p in err.get("loc", ()))
        messages.append(f"{loc}: {msg}" if loc else msg)
    return messages


def _validate(model: Type[ModelT], data: Any) -> ModelT:
    # pydantic collects every violation rather than stopping at the first
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(_format_errors(e)) from e


def validate_create(data: Any) -> ChatEmbeddingCreate:
    return _validate(ChatEmbeddingCreate, data)


def validate_update(data: Any) -> ChatEmbeddingUpdate:
    return _validate(ChatEmbeddingUpdate, data)


def validate_batch(items: Any) -> List[ChatEmbeddingCreate]:
    """Validate every batch item; any failure rejects the whole batch."""
    if isinstance(items, Sequence) and not isinstance(items, (str, bytes)):
        items = list(items)
    batch = _validate(ChatEmbeddingBatch, {"embeddings": items})
    return batch.embeddings


def validate_similarity_search(data: Any) -> SimilaritySearchRequest:
    return _validate(SimilaritySearchRequest, data)


def validate_list_query(data: Any) -> ListQuery:
    return _validate(ListQuery, data)
