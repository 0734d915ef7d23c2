# services/user_management/models/super_admin.py
from sqlalchemy import Column, String, DateTime
from sqlalchemy import Uuid
import uuid
from shared.db import Base, utcnow

# Registry of e-mails with platform wide access
class SuperAdmin(Base):
    __tablename__ = "superadmins"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String, unique=True, nullable=False)
    school_id = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
