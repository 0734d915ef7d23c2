from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

class InstructorCreate(BaseModel):
    school_id: str
    id: Optional[str] = None
    label: str
    slug: str
    sort_order: int = 0
    is_active: bool = True
    style_tags: list[str] = []
    photo_url: Optional[str] = None
    campus_ids: list[str] = []
    course_ids: list[str] = []
    genre_ids: list[str] = []

class InstructorUpdate(BaseModel):
    school_id: str
    label: Optional[str] = None
    slug: Optional[str] = None
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None
    style_tags: Optional[list[str]] = None
    photo_url: Optional[str] = None

class InstructorLinks(BaseModel):
    school_id: str
    campus_ids: Optional[list[str]] = None
    course_ids: Optional[list[str]] = None
    genre_ids: Optional[list[str]] = None

class InstructorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    school_id: str
    label: str
    slug: str
    sort_order: int
    is_active: bool
    style_tags: list[str]
    photo_url: Optional[str]
    campus_ids: list[str] = []
    course_ids: list[str] = []
    genre_ids: list[str] = []
    created_at: datetime
