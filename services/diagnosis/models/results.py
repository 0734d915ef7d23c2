# services/diagnosis/models/results.py
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, Text, Index
from shared.db import Base, JSONType, new_id, utcnow

class DiagnosisResult(Base):
    __tablename__ = "diagnosis_results"

    id = Column(String(36), primary_key=True, default=new_id)
    school_id = Column(String, nullable=False)
    title = Column(String, nullable=False)
    body = Column(Text, nullable=True)
    priority = Column(Integer, nullable=False, default=0)  # higher wins
    sort_order = Column(Integer, nullable=False, default=0)
    is_fallback = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    # {"campus": [...], "genre": [...], "q2_tags": [...], "course_slug": [...]}
    conditions = Column(JSONType, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("idx_result_school_priority", "school_id", "priority"),
    )


class ResultGenre(Base):
    __tablename__ = "diagnosis_result_genres"

    result_id = Column(String(36), ForeignKey("diagnosis_results.id", ondelete="CASCADE"), primary_key=True)
    genre_id = Column(String(36), ForeignKey("diagnosis_genres.id", ondelete="CASCADE"), primary_key=True)


class ResultCampus(Base):
    __tablename__ = "diagnosis_result_campuses"

    result_id = Column(String(36), ForeignKey("diagnosis_results.id", ondelete="CASCADE"), primary_key=True)
    campus_id = Column(String(36), ForeignKey("diagnosis_campuses.id", ondelete="CASCADE"), primary_key=True)
