from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

class CourseCreate(BaseModel):
    school_id: str
    label: str
    slug: str
    sort_order: int = 0
    is_active: bool = True
    level_tags: list[str] = []
    target_tags: list[str] = []
    photo_url: Optional[str] = None

class CourseUpdate(BaseModel):
    label: Optional[str] = None
    slug: Optional[str] = None
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None
    level_tags: Optional[list[str]] = None
    target_tags: Optional[list[str]] = None
    photo_url: Optional[str] = None

class CourseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    school_id: str
    label: str
    slug: str
    sort_order: int
    is_active: bool
    level_tags: list[str]
    target_tags: list[str]
    photo_url: Optional[str]
    created_at: datetime
