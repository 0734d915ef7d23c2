# services/diagnosis/models/courses.py
from sqlalchemy import Column, String, Integer, Boolean, DateTime, UniqueConstraint, Index
from shared.db import Base, JSONType, new_id, utcnow

class DiagnosisCourse(Base):
    __tablename__ = "diagnosis_courses"

    id = Column(String(36), primary_key=True, default=new_id)
    school_id = Column(String, nullable=False)
    label = Column(String, nullable=False)
    slug = Column(String, nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    # Level tags ("Lv1_入門"...) or Q2 answer labels this course is recommended for
    level_tags = Column(JSONType, nullable=False, default=list)
    # Age tags ("Age_Adult_Work"...) the course is aimed at
    target_tags = Column(JSONType, nullable=False, default=list)
    photo_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint("school_id", "slug", name="uq_course_school_slug"),
        Index("idx_course_school_sort", "school_id", "sort_order"),
    )
