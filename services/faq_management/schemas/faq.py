from pydantic import BaseModel
from typing import Any, Literal, Optional
from datetime import datetime
from uuid import UUID

class FaqOut(BaseModel):
    items: list[dict[str, Any]]
    palette: Optional[str] = None
    cta_label: Optional[str] = None
    cta_url: Optional[str] = None
    launcher_text: Optional[str] = None
    version: Optional[int] = None
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None

class FaqSaved(BaseModel):
    ok: bool
    id: UUID
    school_id: str
    action: Literal["created", "updated"]
    version: int
    updated_at: datetime

class FaqDocument(BaseModel):
    school: str
    version: int
    updated_at: str
    items: list[dict[str, Any]]

class FaqNodeOut(BaseModel):
    path: str
    node: dict[str, Any]

class FaqIssues(BaseModel):
    school_id: str
    empty_question: int
    empty_answer: int
    unlabeled_option: int
    invalid_url: int
    total: int

class FaqAdminRecord(BaseModel):
    id: UUID
    school_id: str
    items: list[dict[str, Any]]
    palette: Optional[str] = None
    cta_label: Optional[str] = None
    cta_url: Optional[str] = None
    launcher_text: Optional[str] = None
    version: int
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None
