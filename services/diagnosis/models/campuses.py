# services/diagnosis/models/campuses.py
from sqlalchemy import Column, String, Integer, Boolean, DateTime, UniqueConstraint, Index
from shared.db import Base, new_id, utcnow

class DiagnosisCampus(Base):
    __tablename__ = "diagnosis_campuses"

    id = Column(String(36), primary_key=True, default=new_id)
    school_id = Column(String, nullable=False)
    label = Column(String, nullable=False)  # e.g. "渋谷校"
    slug = Column(String, nullable=False)  # Q1 option id, e.g. "shibuya"
    sort_order = Column(Integer, nullable=False, default=0)
    is_online = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    address = Column(String, nullable=True)
    access = Column(String, nullable=True)
    google_map_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint("school_id", "slug", name="uq_campus_school_slug"),
        Index("idx_campus_school_sort", "school_id", "sort_order"),
    )
