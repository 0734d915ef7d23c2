# services/diagnosis/models/lifestyles.py
from sqlalchemy import Column, String, Integer, Boolean, DateTime, UniqueConstraint
from shared.db import Base, new_id, utcnow

class DiagnosisLifestyle(Base):
    __tablename__ = "diagnosis_lifestyles"

    id = Column(String(36), primary_key=True, default=new_id)
    school_id = Column(String, nullable=False, index=True)
    label = Column(String, nullable=False)
    slug = Column(String, nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint("school_id", "slug", name="uq_lifestyle_school_slug"),
    )
