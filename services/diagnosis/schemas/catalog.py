# Genres and lifestyles share the same label/slug shape
from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

class CatalogItemCreate(BaseModel):
    school_id: str
    label: str
    slug: str
    sort_order: int = 0
    is_active: bool = True

class CatalogItemUpdate(BaseModel):
    label: Optional[str] = None
    slug: Optional[str] = None
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None

class CatalogItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    school_id: str
    label: str
    slug: str
    sort_order: int
    is_active: bool
    created_at: datetime

class SchoolRef(BaseModel):
    school_id: str
