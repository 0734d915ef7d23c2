from pydantic import BaseModel, EmailStr
from typing import Literal, Optional

class SuperAdminAction(BaseModel):
    action: Literal["add", "remove"]
    email: EmailStr
    school_id: Optional[str] = None

class SuperAdminList(BaseModel):
    emails: list[str]
