# services/user_management/schemas/schools.py

from pydantic import BaseModel, EmailStr
from typing import Literal, Optional

class SchoolAdminAdd(BaseModel):
    school_id: str
    admin_email: EmailStr
    name: Optional[str] = None

class SchoolAdminPatch(BaseModel):
    school_id: str
    email: EmailStr
    action: str  # "add" | "remove", checked in the route

class CheckResponse(BaseModel):
    ok: bool

class InitSchoolsResponse(BaseModel):
    ok: bool
    is_super_admin: bool
    schools: dict[str, list[str]]

class AdminSchoolsResponse(BaseModel):
    email: str
    schools: list[str]

class SchoolDeleted(BaseModel):
    ok: bool
    school_id: str
    action: Literal["deleted"] = "deleted"
