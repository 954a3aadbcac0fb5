"""
Pydantic Schemas - Request/Response Validation

All API request/response schemas and realtime envelopes in one file for simplicity.

Stored documents use snake_case; the wire format (HTTP and WebSocket) is
camelCase to match the front end, with ids exposed as "_id".
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict, Any
from datetime import datetime
from enum import Enum
from bson import ObjectId

from placehub.utils.image_payload import validate_image_url


# ============================================================
# ENUMS
# ============================================================

class QuestionStatus(str, Enum):
    open = "open"
    active = "active"
    archived = "archived"
    reported = "reported"


class AnswerStatus(str, Enum):
    open = "open"
    reported = "reported"


class InboundEvent(str, Enum):
    new_answer = "NEW_ANSWER"
    reaction = "REACTION"


class OutboundEvent(str, Enum):
    answer_received = "ANSWER_RECEIVED"
    reaction_updated = "REACTION_UPDATED"
    connected = "CONNECTED"
    error = "ERROR"


DEFAULT_REACTIONS = ("helpful", "clear", "smart")


def default_reaction_tally() -> Dict[str, int]:
    return {label: 0 for label in DEFAULT_REACTIONS}


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _object_id(value: str, field: str) -> str:
    if not ObjectId.is_valid(value):
        raise ValueError(f"{field} is not a valid id")
    return value


# ============================================================
# SESSION SCHEMAS
# ============================================================

class SessionInit(CamelModel):
    session_id: str = Field(..., min_length=1, max_length=128)
    animal_icon: str = Field(..., min_length=1, max_length=64)

class SessionResponse(CamelModel):
    id: str = Field(alias="_id")
    session_id: str
    animal_icon: str
    created_at: datetime

class SessionStatsResponse(BaseModel):
    open: int = 0
    active: int = 0
    archived: int = 0
    reported: int = 0
    total: int = 0


# ============================================================
# QUESTION SCHEMAS
# ============================================================

class QuestionCreate(CamelModel):
    text: str = Field(..., max_length=2000)
    session_id: str = Field(..., min_length=1, max_length=128)

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Question text is required")
        return v

class QuestionStatusUpdate(BaseModel):
    status: QuestionStatus

class QuestionResponse(CamelModel):
    id: str = Field(alias="_id")
    text: str
    session_id: Optional[str] = None
    status: QuestionStatus
    ai_summary: str = ""
    created_at: datetime

class QuestionListItem(QuestionResponse):
    answer_count: int = 0


# ============================================================
# ANSWER SCHEMAS
# ============================================================

class AnswerCreate(CamelModel):
    question_id: str
    text: Optional[str] = Field(None, max_length=5000)
    sender_icon: str = Field(..., min_length=1, max_length=64)
    image_url: Optional[str] = None
    # REST clients may answer without an initialised session
    session_id: Optional[str] = Field(None, max_length=128)

    @field_validator("question_id")
    @classmethod
    def question_id_well_formed(cls, v: str) -> str:
        return _object_id(v, "questionId")

    @field_validator("image_url")
    @classmethod
    def image_url_valid(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return validate_image_url(v)

    @model_validator(mode="after")
    def text_or_image(self):
        if self.text is not None:
            self.text = self.text.strip() or None
        if self.text is None and self.image_url is None:
            raise ValueError("Answer text is required unless an image is attached")
        return self

class AnswerResponse(CamelModel):
    id: str = Field(alias="_id")
    question_id: str
    text: Optional[str] = None
    image_url: Optional[str] = None
    session_id: Optional[str] = None
    sender_icon: str
    status: AnswerStatus
    reactions: Dict[str, int] = Field(default_factory=default_reaction_tally)
    created_at: datetime


def clean_reaction_label(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Reaction label is required")
    return v


class ReactionRequest(BaseModel):
    reaction: str = Field(..., min_length=1, max_length=32)

    @field_validator("reaction")
    @classmethod
    def reaction_not_blank(cls, v: str) -> str:
        return clean_reaction_label(v)


# ============================================================
# REALTIME ENVELOPES
# ============================================================

class RealtimeMessage(BaseModel):
    type: str
    payload: Dict[str, Any] = {}

class ReactionPayload(CamelModel):
    answer_id: str
    reaction: str = Field(..., min_length=1, max_length=32)

    @field_validator("reaction")
    @classmethod
    def reaction_not_blank(cls, v: str) -> str:
        return clean_reaction_label(v)

class ReactionUpdatedPayload(CamelModel):
    answer_id: str
    reactions: Dict[str, int]
    triggered_by: str
    timestamp: int  # epoch milliseconds


# ============================================================
# MODERATION SCHEMAS
# ============================================================

class ReportedContentResponse(BaseModel):
    questions: List[QuestionResponse] = []
    answers: List[AnswerResponse] = []


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True

class ErrorResponse(BaseModel):
    detail: str
    success: bool = False
