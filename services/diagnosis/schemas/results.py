from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

class ResultConditionsIn(BaseModel):
    campus: list[str] = []
    genre: list[str] = []
    q2_tags: list[str] = []
    course_slug: list[str] = []

class ResultCreate(BaseModel):
    school_id: str
    title: str
    body: Optional[str] = None
    priority: int = 0
    sort_order: int = 0
    is_fallback: bool = False
    is_active: bool = True
    conditions: ResultConditionsIn = Field(default_factory=ResultConditionsIn)

class ResultUpdate(BaseModel):
    title: Optional[str] = None
    body: Optional[str] = None
    priority: Optional[int] = None
    sort_order: Optional[int] = None
    is_fallback: Optional[bool] = None
    is_active: Optional[bool] = None
    conditions: Optional[ResultConditionsIn] = None

class ResultOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    school_id: str
    title: str
    body: Optional[str]
    priority: int
    sort_order: int
    is_fallback: bool
    is_active: bool
    conditions: dict
    created_at: datetime

class ResultSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    sort_order: int
    is_active: bool

class LinkUpdate(BaseModel):
    type: str
    school_id: str
    result_id: str
    genre_ids: Optional[list[str]] = None
    genre_slugs: Optional[list[str]] = None
    campus_ids: Optional[list[str]] = None
    campus_slugs: Optional[list[str]] = None
