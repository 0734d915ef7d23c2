# services/diagnosis/models/instructors.py
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, UniqueConstraint, Index
from shared.db import Base, JSONType, new_id, utcnow

class DiagnosisInstructor(Base):
    __tablename__ = "diagnosis_instructors"

    id = Column(String(64), primary_key=True, default=new_id)
    school_id = Column(String, nullable=False)
    label = Column(String, nullable=False)
    slug = Column(String, nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    style_tags = Column(JSONType, nullable=False, default=list)  # "Style_Healing"...
    photo_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint("school_id", "slug", name="uq_instructor_school_slug"),
        Index("idx_instructor_school_sort", "school_id", "sort_order"),
    )


# Campuses an instructor teaches at
class InstructorCampus(Base):
    __tablename__ = "diagnosis_instructor_campuses"

    instructor_id = Column(String(64), ForeignKey("diagnosis_instructors.id", ondelete="CASCADE"), primary_key=True)
    campus_id = Column(String(36), ForeignKey("diagnosis_campuses.id", ondelete="CASCADE"), primary_key=True)


# Courses an instructor teaches
class InstructorCourse(Base):
    __tablename__ = "diagnosis_instructor_courses"

    instructor_id = Column(String(64), ForeignKey("diagnosis_instructors.id", ondelete="CASCADE"), primary_key=True)
    course_id = Column(String(36), ForeignKey("diagnosis_courses.id", ondelete="CASCADE"), primary_key=True)


# Genres an instructor teaches
class InstructorGenre(Base):
    __tablename__ = "diagnosis_instructor_genres"

    instructor_id = Column(String(64), ForeignKey("diagnosis_instructors.id", ondelete="CASCADE"), primary_key=True)
    genre_id = Column(String(36), ForeignKey("diagnosis_genres.id", ondelete="CASCADE"), primary_key=True)
