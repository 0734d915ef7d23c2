from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

class CampusCreate(BaseModel):
    school_id: str
    label: str
    slug: str
    sort_order: int = 0
    is_online: bool = False
    is_active: bool = True
    address: Optional[str] = None
    access: Optional[str] = None
    google_map_url: Optional[str] = None

class CampusUpdate(BaseModel):
    label: Optional[str] = None
    slug: Optional[str] = None
    sort_order: Optional[int] = None
    is_online: Optional[bool] = None
    is_active: Optional[bool] = None
    address: Optional[str] = None
    access: Optional[str] = None
    google_map_url: Optional[str] = None

class CampusOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    school_id: str
    label: str
    slug: str
    sort_order: int
    is_online: bool
    is_active: bool
    address: Optional[str]
    access: Optional[str]
    google_map_url: Optional[str]
    created_at: datetime

class CampusOption(BaseModel):
    id: str  # campus slug, used as the Q1 answer
    label: str
    is_online: bool
