from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import Any, Optional
from datetime import datetime
import uuid

class ChatLogCreate(BaseModel):
    school: Optional[str] = None
    question: Any = None
    answer: Any = None
    url: Optional[str] = None
    timestamp: Optional[str] = None
    # the widget sends camelCase
    session_id: Optional[str] = Field(None, validation_alias=AliasChoices("session_id", "sessionId"))

class ChatLogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    school_id: str
    session_id: str
    question: str
    answer: str
    url: str
    timestamp: datetime

class ChatSessionOut(BaseModel):
    session_id: str
    school_id: str
    started_at: datetime
    ended_at: datetime
    count: int
    entries: list[ChatLogOut]

class ChatLogDelete(BaseModel):
    session_id: Optional[str] = Field(None, validation_alias=AliasChoices("session_id", "sessionId"))

class ChatLogDeleted(BaseModel):
    session_id: str
    deleted: int
