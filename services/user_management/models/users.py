# services/user_management/models/users.py
from sqlalchemy import Column, String, Enum, DateTime, Boolean, Index
from sqlalchemy import Uuid
from shared.db import Base, utcnow
import enum
import uuid

class SchoolUserRole(str, enum.Enum):
    SUPERADMIN = "superadmin"
    SCHOOL_ADMIN = "school_admin"

class SchoolUser(Base):
    __tablename__ = "school_users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=True)
    email = Column(String(255), unique=True, nullable=False)  # stored lowercase
    hashed_password = Column(String, nullable=False)
    role = Column(Enum(SchoolUserRole, values_callable=lambda roles: [r.value for r in roles]), nullable=False)
    school_id = Column(String, nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index('idx_user_school', 'school_id'),  # school-level access
        Index('idx_user_school_role', 'school_id', 'role'),
    )
