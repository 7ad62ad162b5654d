# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-30
# Description: ChatEmbeddingStore
# -----------------------------------------------------------------------------
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

Document = Dict[str, Any]
Filter = Dict[str, Any]


@runtime_checkable
class ChatEmbeddingStore(Protocol):
    """
    Document store gateway used by ChatEmbeddingService.

    Documents carry their id under "_id" and the ranking vector under
    "$vector"; vector-ranked matches come back annotated with "$similarity".
    Filters are Mongo-style: equality, {"$gte"/"$lte"} ranges and {"$in": [...]}.
    """

    def insert_one(self, document: Document) -> str:
        ...

    def insert_many(self, documents: Sequence[Document]) -> List[str]:
        ...

    def find_one(self, doc_id: str) -> Optional[Document]:
        ...

    def replace_one(self, doc_id: str, document: Document) -> int:
        ...

    def delete_one(self, doc_id: str) -> int:
        ...

    def find(
            self,
            filter: Filter,
            *,
            sort: Optional[Tuple[str, int]] = None,
            skip: int = 0,
            limit: Optional[int] = None,
            include_vector: bool = True,
    ) -> List[Document]:
        ...

    def find_similar(self, filter: Filter, vector: Sequence[float], *, limit: int) -> List[Document]:
        ...

    def count_documents(self, filter: Filter) -> int:
        ...

    def group_count(self, field: str) -> Dict[str, int]:
        ...

    def numeric_summary(self, field: str) -> Optional[Dict[str, float]]:
        ...

    def health_check(self) -> Dict[str, Any]:
        ...
