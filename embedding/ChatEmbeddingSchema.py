# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-28
# Updated: 2026-10-06
# Description: ChatEmbeddingSchema
# -----------------------------------------------------------------------------
from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Callable, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator

# Vector sizes are part of the stored document contract
PRIMARY_DIMENSIONS = 768
LIGHTWEIGHT_DIMENSIONS = 384
FEATURE_VECTOR_DIMENSIONS = 90
TEMPORAL_FEATURE_DIMENSIONS = 25
EMOTIONAL_FEATURE_DIMENSIONS = 20
SEMANTIC_FEATURE_DIMENSIONS = 30
USER_FEATURE_DIMENSIONS = 15

MAX_BATCH_SIZE = 50


class MessageType(str, Enum):
    USER_MESSAGE = "user_message"
    AI_RESPONSE = "ai_response"
    SYSTEM_MESSAGE = "system_message"


class EmotionName(str, Enum):
    JOY = "joy"
    SADNESS = "sadness"
    ANGER = "anger"
    FEAR = "fear"
    SURPRISE = "surprise"
    DISGUST = "disgust"
    ANTICIPATION = "anticipation"
    TRUST = "trust"


class SortField(str, Enum):
    TIMESTAMP = "timestamp"
    PROCESSING_TIME_MS = "processing_time_ms"
    TEXT_LENGTH = "text_length"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


def _exact_length(size: int, label: str) -> Callable[[List[float]], List[float]]:
    def _check(values: List[float]) -> List[float]:
        if len(values) != size:
            raise ValueError(f"{label} must have exactly {size} dimensions")
        return values

    return _check


def _uuid_string(value: str) -> str:
    try:
        uuid.UUID(value)
    except ValueError:
        raise ValueError("must be a valid UUID")
    return value


Number = Annotated[float, Field(allow_inf_nan=False)]
UnitScore = Annotated[float, Field(ge=0, le=1, allow_inf_nan=False)]
UUIDString = Annotated[str, AfterValidator(_uuid_string)]

PrimaryEmbedding = Annotated[
    List[Number], AfterValidator(_exact_length(PRIMARY_DIMENSIONS, "Primary embedding"))
]
LightweightEmbedding = Annotated[
    List[Number], AfterValidator(_exact_length(LIGHTWEIGHT_DIMENSIONS, "Lightweight embedding"))
]
FeatureVector = Annotated[
    List[Number], AfterValidator(_exact_length(FEATURE_VECTOR_DIMENSIONS, "Feature vector"))
]
TemporalFeatures = Annotated[
    List[Number], AfterValidator(_exact_length(TEMPORAL_FEATURE_DIMENSIONS, "Temporal features"))
]
EmotionalFeatures = Annotated[
    List[Number], AfterValidator(_exact_length(EMOTIONAL_FEATURE_DIMENSIONS, "Emotional features"))
]
SemanticFeatures = Annotated[
    List[Number], AfterValidator(_exact_length(SEMANTIC_FEATURE_DIMENSIONS, "Semantic features"))
]
UserFeatures = Annotated[
    List[Number], AfterValidator(_exact_length(USER_FEATURE_DIMENSIONS, "User features"))
]

MessageContent = Annotated[str, Field(min_length=1, max_length=10000)]
ConversationContext = Annotated[str, Field(max_length=2000)]


class _Contract(BaseModel):
    # unknown keys are dropped, not rejected
    model_config = ConfigDict(extra="ignore")


# -----------------------------------------------------------------------------
# Nested shapes
# -----------------------------------------------------------------------------
class EmotionScores(_Contract):
    joy: UnitScore = 0.0
    sadness: UnitScore = 0.0
    anger: UnitScore = 0.0
    fear: UnitScore = 0.0
    surprise: UnitScore = 0.0
    disgust: UnitScore = 0.0
    anticipation: UnitScore = 0.0
    trust: UnitScore = 0.0


class EmotionContext(_Contract):
    dominant_emotion: EmotionName
    intensity: UnitScore
    emotions: EmotionScores


class EntitiesMentioned(_Contract):
    people: List[str] = Field(default_factory=list)
    locations: List[str] = Field(default_factory=list)
    organizations: List[str] = Field(default_factory=list)


class TemporalContext(_Contract):
    hour_of_day: int = Field(..., ge=0, le=23)
    day_of_week: int = Field(..., ge=0, le=6)
    is_weekend: bool


class DateRange(_Contract):
    start: Optional[datetime] = None
    end: Optional[datetime] = None


class EmotionFilter(_Contract):
    dominant_emotion: Optional[EmotionName] = None
    min_intensity: Optional[UnitScore] = None


# -----------------------------------------------------------------------------
# Record contracts
# -----------------------------------------------------------------------------
class ChatEmbeddingCreate(_Contract):
    """
    Full contract for a chat embedding record.
    Used for create, for every batch item and for whole-record replace.
    """

    user_id: UUIDString
    entry_id: UUIDString
    session_id: UUIDString
    message_content: MessageContent
    message_type: MessageType
    conversation_context: Optional[ConversationContext] = None

    # only honoured by replace; create always stamps the current time
    timestamp: Optional[datetime] = None

    primary_embedding: PrimaryEmbedding
    lightweight_embedding: LightweightEmbedding

    text_length: int = Field(..., ge=0)
    processing_time_ms: Number = Field(..., ge=0)
    model_version: str

    semantic_tags: List[str] = Field(default_factory=list)
    emotion_context: Optional[EmotionContext] = None
    entities_mentioned: EntitiesMentioned = Field(default_factory=EntitiesMentioned)

    # Derived feature groups
    feature_vector: FeatureVector
    temporal_features: TemporalFeatures
    emotional_features: EmotionalFeatures
    semantic_features: SemanticFeatures
    user_features: UserFeatures

    feature_completeness: UnitScore
    confidence_score: UnitScore
    temporal_context: TemporalContext


class ChatEmbeddingUpdate(_Contract):
    """
    Partial contract: every field optional, same constraints when present.
    Identifiers are not part of it and are dropped like any unknown key.
    """

    message_content: Optional[MessageContent] = None
    message_type: Optional[MessageType] = None
    conversation_context: Optional[ConversationContext] = None
    timestamp: Optional[datetime] = None
    primary_embedding: Optional[PrimaryEmbedding] = None
    lightweight_embedding: Optional[LightweightEmbedding] = None
    text_length: Optional[int] = Field(None, ge=0)
    processing_time_ms: Optional[Number] = Field(None, ge=0)
    model_version: Optional[str] = None
    semantic_tags: Optional[List[str]] = None
    emotion_context: Optional[EmotionContext] = None
    entities_mentioned: Optional[EntitiesMentioned] = None
    feature_vector: Optional[FeatureVector] = None
    temporal_features: Optional[TemporalFeatures] = None
    emotional_features: Optional[EmotionalFeatures] = None
    semantic_features: Optional[SemanticFeatures] = None
    user_features: Optional[UserFeatures] = None
    feature_completeness: Optional[UnitScore] = None
    confidence_score: Optional[UnitScore] = None
    temporal_context: Optional[TemporalContext] = None

    def present_fields(self) -> dict:
        """Fields the caller actually sent, JSON-ready."""
        return self.model_dump(mode="json", exclude_unset=True)


class ChatEmbeddingBatch(_Contract):
    embeddings: List[ChatEmbeddingCreate]

    @field_validator("embeddings", mode="before")
    @classmethod
    def _check_batch_size(cls, value: Any) -> Any:
        if isinstance(value, list):
            if len(value) < 1:
                raise ValueError("At least one embedding is required")
            if len(value) > MAX_BATCH_SIZE:
                raise ValueError(f"Maximum {MAX_BATCH_SIZE} embeddings allowed per batch")
        return value


# -----------------------------------------------------------------------------
# Read-side requests
# -----------------------------------------------------------------------------
class SimilarityFilters(_Contract):
    user_id: Optional[UUIDString] = None
    session_id: Optional[UUIDString] = None
    message_type: Optional[MessageType] = None
    date_range: Optional[DateRange] = None
    emotion_filter: Optional[EmotionFilter] = None
    semantic_tags: Optional[List[str]] = None


class SimilaritySearchRequest(_Contract):
    primary_embedding: PrimaryEmbedding
    limit: int = Field(10, ge=1, le=100)
    filters: SimilarityFilters = Field(default_factory=SimilarityFilters)


class ListQuery(_Contract):
    user_id: Optional[UUIDString] = None
    session_id: Optional[UUIDString] = None
    message_type: Optional[MessageType] = None
    date_range: Optional[DateRange] = None
    limit: int = Field(20, ge=1, le=100)
    offset: int = Field(0, ge=0)
    sort_by: SortField = SortField.TIMESTAMP
    sort_order: SortOrder = SortOrder.DESC
