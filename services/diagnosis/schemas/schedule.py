from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class ScheduleSlotCreate(BaseModel):
    school_id: str
    weekday: str
    genre_text: str
    time_text: str
    teacher: str
    place: str
    course_ids: list[str]
    sort_order: int = 0
    is_active: bool = True

class ScheduleSlotUpdate(BaseModel):
    weekday: Optional[str] = None
    genre_text: Optional[str] = None
    time_text: Optional[str] = None
    teacher: Optional[str] = None
    place: Optional[str] = None
    course_ids: Optional[list[str]] = None
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None

class ScheduleSlotOut(BaseModel):
    id: str
    school_id: str
    weekday: str
    genre_text: str
    time_text: str
    teacher: str
    place: str
    sort_order: int
    is_active: bool
    course_ids: list[str]
    created_at: datetime

class PublicSlot(BaseModel):
    id: str
    genre_text: str
    time_text: str
    teacher: str
    place: str

class WeeklySchedule(BaseModel):
    schedule: dict[str, list[PublicSlot]]
    order: list[str]
