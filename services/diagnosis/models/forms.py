# services/diagnosis/models/forms.py
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, Text
from shared.db import Base, JSONType, new_id, utcnow
import enum

class FormFieldType(str, enum.Enum):
    TEXT = "TEXT"
    EMAIL = "EMAIL"
    TEL = "TEL"
    TEXTAREA = "TEXTAREA"
    SELECT = "SELECT"
    CHECKBOX = "CHECKBOX"


# Trial lesson form shown after the result
class DiagnosisForm(Base):
    __tablename__ = "diagnosis_forms"

    id = Column(String(36), primary_key=True, default=new_id)
    school_id = Column(String, unique=True, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    submit_type = Column(String, nullable=False, default="email")  # "email" | "url"
    submit_url = Column(String, nullable=True)
    thanks_type = Column(String, nullable=False, default="message")  # "message" | "url"
    thanks_text = Column(Text, nullable=True)
    thanks_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class DiagnosisFormField(Base):
    __tablename__ = "diagnosis_form_fields"

    id = Column(String(36), primary_key=True, default=new_id)
    form_id = Column(String(36), ForeignKey("diagnosis_forms.id", ondelete="CASCADE"), nullable=False, index=True)
    label = Column(String, nullable=False)
    type = Column(String, nullable=False, default=FormFieldType.TEXT.value)
    required = Column(Boolean, nullable=False, default=False)
    placeholder = Column(String, nullable=True)
    options_json = Column(JSONType, nullable=True)  # choices for SELECT / CHECKBOX
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)


# Notification mails sent when the form is submitted
class DiagnosisFormEmailSetting(Base):
    __tablename__ = "diagnosis_form_email_settings"

    id = Column(String(36), primary_key=True, default=new_id)
    school_id = Column(String, unique=True, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    from_name = Column(String, nullable=True)
    from_email = Column(String, nullable=True)
    reply_to = Column(String, nullable=True)
    admin_to = Column(String, nullable=False)  # comma separated
    admin_cc = Column(String, nullable=True)
    admin_bcc = Column(String, nullable=True)
    admin_subject = Column(String, nullable=False)
    admin_body_template = Column(Text, nullable=False)
    user_auto_reply_enabled = Column(Boolean, nullable=False, default=True)
    user_subject = Column(String, nullable=False)
    user_body_template = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
