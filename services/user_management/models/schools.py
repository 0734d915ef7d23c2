# services/user_management/models/schools.py

from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint, Index
from sqlalchemy import Uuid
from shared.db import Base, utcnow
import uuid

class School(Base):
    __tablename__ = "schools"

    id = Column(String, primary_key=True, index=True)  # slug, e.g. "links-dance"
    name = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)


# Admin e-mails allowed to manage a school
class SchoolAdmin(Base):
    __tablename__ = "school_admins"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    school_id = Column(String, ForeignKey("schools.id", ondelete="CASCADE"), nullable=False)
    email = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        UniqueConstraint("school_id", "email", name="uq_school_admin_email"),
        Index("idx_school_admin_email", "email"),
    )
