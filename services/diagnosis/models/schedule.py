# services/diagnosis/models/schedule.py
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, Index
from shared.db import Base, new_id, utcnow

WEEKDAYS = ("MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN")

class DiagnosisScheduleSlot(Base):
    __tablename__ = "diagnosis_schedule_slots"

    id = Column(String(36), primary_key=True, default=new_id)
    school_id = Column(String, nullable=False)
    weekday = Column(String(3), nullable=False)  # MON..SUN
    genre_text = Column(String, nullable=False)
    time_text = Column(String, nullable=False)  # e.g. "19:00-20:15"
    teacher = Column(String, nullable=False)
    place = Column(String, nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("idx_slot_school_weekday", "school_id", "weekday"),
    )


class ScheduleSlotCourse(Base):
    __tablename__ = "diagnosis_schedule_slot_courses"

    slot_id = Column(String(36), ForeignKey("diagnosis_schedule_slots.id", ondelete="CASCADE"), primary_key=True)
    course_id = Column(String(36), ForeignKey("diagnosis_courses.id", ondelete="CASCADE"), primary_key=True)
