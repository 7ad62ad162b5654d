# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-28
# Description: errors.py
# -----------------------------------------------------------------------------
from typing import Iterable, List


class ChatEmbeddingError(Exception):
    """Base class for failures raised by the chat embedding record layer."""


class ValidationError(ChatEmbeddingError):
    """
    Input does not satisfy the record contract.
    Carries one human-readable message per violation.
    """

    def __init__(self, messages: Iterable[str]) -> None:
        self.messages: List[str] = list(messages)
        super().__init__(", ".join(self.messages))


class NotFoundError(ChatEmbeddingError):
    """The targeted chat embedding does not exist."""

    def __init__(self, embedding_id: str) -> None:
        self.embedding_id = embedding_id
        super().__init__("Chat embedding not found")


class PersistenceError(ChatEmbeddingError):
    """The document store rejected or failed an otherwise valid operation."""

    def __init__(self, operation: str, cause: Exception) -> None:
        self.operation = operation
        super().__init__(f"Failed to {operation}: {cause}")
