from pydantic import BaseModel, ConfigDict, EmailStr
from typing import Optional
from datetime import datetime
from enum import Enum
from uuid import UUID

class SchoolUserRole(str, Enum):
    SUPERADMIN = "superadmin"
    SCHOOL_ADMIN = "school_admin"

class SchoolUserCreate(BaseModel):
    email: EmailStr
    name: Optional[str] = None
    password: str
    role: SchoolUserRole = SchoolUserRole.SCHOOL_ADMIN
    school_id: Optional[str] = None

class SchoolUserUpdate(BaseModel):
    email: EmailStr
    name: Optional[str] = None
    role: SchoolUserRole
    password: Optional[str] = None
    school_id: Optional[str] = None

class SchoolUserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: Optional[str]
    email: str
    role: SchoolUserRole
    school_id: Optional[str]
    is_active: bool
    created_at: datetime

class SchoolAdminCreate(BaseModel):
    email: EmailStr
    name: Optional[str] = None
    password: str

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class LoginResponse(BaseModel):
    name: Optional[str]
    email: str
    role: SchoolUserRole
    school_id: Optional[str]
    access_token: str
    token_type: str = "bearer"

class SessionOut(BaseModel):
    user_id: str
    email: str
    role: SchoolUserRole
    school_id: Optional[str]
