from pydantic import BaseModel, ConfigDict
from typing import Any, Optional
from enum import Enum

class FormFieldType(str, Enum):
    TEXT = "TEXT"
    EMAIL = "EMAIL"
    TEL = "TEL"
    TEXTAREA = "TEXTAREA"
    SELECT = "SELECT"
    CHECKBOX = "CHECKBOX"

class FormFieldIn(BaseModel):
    label: str
    type: FormFieldType = FormFieldType.TEXT
    required: bool = False
    placeholder: Optional[str] = None
    options_json: Optional[Any] = None
    is_active: bool = True

class FormFieldOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    label: str
    type: str
    required: bool
    placeholder: Optional[str]
    options_json: Optional[Any]
    sort_order: int
    is_active: bool

class FormUpdate(BaseModel):
    id: str
    is_active: bool = True
    title: str
    description: Optional[str] = None
    submit_type: str = "email"
    submit_url: Optional[str] = None
    thanks_type: str = "message"
    thanks_text: Optional[str] = None
    thanks_url: Optional[str] = None
    fields: list[FormFieldIn] = []

class FormOut(BaseModel):
    id: str
    school_id: str
    is_active: bool
    title: str
    description: Optional[str]
    submit_type: str
    submit_url: Optional[str]
    thanks_type: str
    thanks_text: Optional[str]
    thanks_url: Optional[str]
    fields: list[FormFieldOut]

class EmailSettingUpdate(BaseModel):
    id: Optional[str] = None
    school_id: Optional[str] = None
    is_active: Optional[bool] = None
    from_name: Optional[str] = None
    from_email: Optional[str] = None
    reply_to: Optional[str] = None
    admin_to: Optional[str] = None
    admin_cc: Optional[str] = None
    admin_bcc: Optional[str] = None
    admin_subject: Optional[str] = None
    admin_body_template: Optional[str] = None
    user_auto_reply_enabled: Optional[bool] = None
    user_subject: Optional[str] = None
    user_body_template: Optional[str] = None

class EmailSettingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    school_id: str
    is_active: bool
    from_name: Optional[str]
    from_email: Optional[str]
    reply_to: Optional[str]
    admin_to: str
    admin_cc: Optional[str]
    admin_bcc: Optional[str]
    admin_subject: str
    admin_body_template: str
    user_auto_reply_enabled: bool
    user_subject: str
    user_body_template: str

class SubmitRequest(BaseModel):
    school_id: Optional[str] = None
    fields: dict[str, Any] = {}
    hidden_values: dict[str, Any] = {}
