import logging
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from services.diagnosis.crud import (
    blank_to_none,
    clean_tags,
    commit_or_conflict,
    get_owned,
    require_changes,
    require_text,
)
from services.diagnosis.models.courses import DiagnosisCourse
from services.diagnosis.models.instructors import InstructorCourse
from services.diagnosis.models.schedule import ScheduleSlotCourse
from services.diagnosis.schemas.courses import CourseCreate, CourseOut, CourseUpdate
from services.user_management.permissions import ensure_school_access
from shared.auth import get_current_user
from shared.db import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/diagnosis/courses", tags=["Diagnosis Admin"])

TAG_FIELDS = ("level_tags", "target_tags")


# --- LIST COURSES ---
@router.get("", response_model=List[CourseOut])
async def list_courses(
    school_id: str = Query(...),
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    await ensure_school_access(db, current_user, school_id)
    result = await db.execute(
        select(DiagnosisCourse)
        .where(DiagnosisCourse.school_id == school_id)
        .order_by(DiagnosisCourse.sort_order, DiagnosisCourse.created_at)
    )
    return result.scalars().all()


# --- CREATE COURSE ---
@router.post("", response_model=CourseOut, status_code=status.HTTP_201_CREATED)
async def create_course(
    payload: CourseCreate,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    school_id = require_text(payload.school_id, "school_id")
    await ensure_school_access(db, current_user, school_id)

    course = DiagnosisCourse(
        school_id=school_id,
        label=require_text(payload.label, "label"),
        slug=require_text(payload.slug, "slug"),
        sort_order=payload.sort_order,
        is_active=payload.is_active,
        level_tags=clean_tags(payload.level_tags),
        target_tags=clean_tags(payload.target_tags),
        photo_url=blank_to_none(payload.photo_url),
    )
    db.add(course)
    await commit_or_conflict(db, "Course slug already exists for this school")

    logger.info("Course %s created for %s", course.slug, school_id)
    return course


# --- UPDATE COURSE (fields and Q2 answer tags) ---
@router.patch("/{course_id}", response_model=CourseOut)
async def update_course(
    course_id: str,
    payload: CourseUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    changes = payload.model_dump(exclude_unset=True)
    require_changes(changes)
    course = await get_owned(db, DiagnosisCourse, course_id, current_user, "Course")

    for field, value in changes.items():
        if field in ("label", "slug"):
            value = require_text(value, field)
        elif field in TAG_FIELDS:
            value = clean_tags(value)
        elif field == "photo_url":
            value = blank_to_none(value)
        elif value is None:
            continue
        setattr(course, field, value)

    await commit_or_conflict(db, "Course slug already exists for this school")
    return course


# --- DELETE COURSE ---
@router.delete("/{course_id}")
async def delete_course(
    course_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    course = await get_owned(db, DiagnosisCourse, course_id, current_user, "Course")

    await db.execute(delete(InstructorCourse).where(InstructorCourse.course_id == course_id))
    await db.execute(delete(ScheduleSlotCourse).where(ScheduleSlotCourse.course_id == course_id))
    await db.delete(course)
    await db.commit()

    logger.info("Course %s deleted from %s", course.slug, course.school_id)
    return {"ok": True, "id": course_id}
