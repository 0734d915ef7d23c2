import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from services.diagnosis.crud import (
    blank_to_none,
    clean_tags,
    commit_or_conflict,
    ids_in_school,
    require_text,
)
from services.diagnosis.models.campuses import DiagnosisCampus
from services.diagnosis.models.courses import DiagnosisCourse
from services.diagnosis.models.genres import DiagnosisGenre
from services.diagnosis.models.instructors import (
    DiagnosisInstructor,
    InstructorCampus,
    InstructorCourse,
    InstructorGenre,
)
from services.diagnosis.schemas.instructors import (
    InstructorCreate,
    InstructorLinks,
    InstructorOut,
    InstructorUpdate,
)
from services.user_management.permissions import ensure_school_access
from shared.auth import get_current_user
from shared.db import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/diagnosis/instructors", tags=["Diagnosis Admin"])

# link table, its target column, and the model the ids must belong to
LINKS = {
    "campus_ids": (InstructorCampus, "campus_id", DiagnosisCampus),
    "course_ids": (InstructorCourse, "course_id", DiagnosisCourse),
    "genre_ids": (InstructorGenre, "genre_id", DiagnosisGenre),
}


async def load_links(db: AsyncSession, instructor_ids: list[str]) -> dict[str, dict[str, list[str]]]:
    links = {instructor_id: {name: [] for name in LINKS} for instructor_id in instructor_ids}
    if not instructor_ids:
        return links
    for name, (table, column, _) in LINKS.items():
        result = await db.execute(
            select(table.instructor_id, getattr(table, column)).where(table.instructor_id.in_(instructor_ids))
        )
        for instructor_id, target_id in result.all():
            links[instructor_id][name].append(target_id)
    return links


async def replace_links(db: AsyncSession, instructor: DiagnosisInstructor, name: str, ids: list[str]):
    table, column, target_model = LINKS[name]
    valid_ids = await ids_in_school(db, target_model, instructor.school_id, ids)
    await db.execute(delete(table).where(table.instructor_id == instructor.id))
    for target_id in valid_ids:
        db.add(table(instructor_id=instructor.id, **{column: target_id}))


def to_out(instructor: DiagnosisInstructor, links: dict[str, list[str]]) -> InstructorOut:
    return InstructorOut(
        id=instructor.id,
        school_id=instructor.school_id,
        label=instructor.label,
        slug=instructor.slug,
        sort_order=instructor.sort_order,
        is_active=instructor.is_active,
        style_tags=instructor.style_tags or [],
        photo_url=instructor.photo_url,
        created_at=instructor.created_at,
        **links,
    )


async def get_instructor(db: AsyncSession, instructor_id: str, school_id: str) -> DiagnosisInstructor:
    result = await db.execute(
        select(DiagnosisInstructor).where(
            DiagnosisInstructor.id == instructor_id,
            DiagnosisInstructor.school_id == school_id,
        )
    )
    instructor = result.scalars().first()
    if not instructor:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Instructor not found")
    return instructor


async def _out(db: AsyncSession, instructor: DiagnosisInstructor) -> InstructorOut:
    links = await load_links(db, [instructor.id])
    return to_out(instructor, links[instructor.id])


# --- LIST INSTRUCTORS ---
@router.get("", response_model=List[InstructorOut])
async def list_instructors(
    school_id: str = Query(...),
    include_inactive: bool = Query(True),
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    await ensure_school_access(db, current_user, school_id)

    stmt = select(DiagnosisInstructor).where(DiagnosisInstructor.school_id == school_id)
    if not include_inactive:
        stmt = stmt.where(DiagnosisInstructor.is_active == True)
    result = await db.execute(stmt.order_by(DiagnosisInstructor.sort_order, DiagnosisInstructor.created_at))
    instructors = result.scalars().all()

    links = await load_links(db, [i.id for i in instructors])
    return [to_out(i, links[i.id]) for i in instructors]


# --- CREATE INSTRUCTOR ---
@router.post("", response_model=InstructorOut, status_code=status.HTTP_201_CREATED)
async def create_instructor(
    payload: InstructorCreate,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    school_id = require_text(payload.school_id, "school_id")
    await ensure_school_access(db, current_user, school_id)

    instructor = DiagnosisInstructor(
        school_id=school_id,
        label=require_text(payload.label, "label"),
        slug=require_text(payload.slug, "slug"),
        sort_order=payload.sort_order,
        is_active=payload.is_active,
        style_tags=clean_tags(payload.style_tags),
        photo_url=blank_to_none(payload.photo_url),
    )
    if payload.id and payload.id.strip():
        instructor.id = payload.id.strip()
    db.add(instructor)
    await commit_or_conflict(db, "Instructor id or slug already exists")

    for name in LINKS:
        await replace_links(db, instructor, name, getattr(payload, name))
    await db.commit()

    logger.info("Instructor %s created for %s", instructor.slug, school_id)
    return await _out(db, instructor)


# --- UPDATE INSTRUCTOR ---
@router.put("/{instructor_id}", response_model=InstructorOut)
async def update_instructor(
    instructor_id: str,
    payload: InstructorUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    await ensure_school_access(db, current_user, payload.school_id)
    instructor = await get_instructor(db, instructor_id, payload.school_id)

    for field, value in payload.model_dump(exclude_unset=True, exclude={"school_id"}).items():
        if field in ("label", "slug"):
            value = require_text(value, field)
        elif field == "style_tags":
            value = clean_tags(value)
        elif field == "photo_url":
            value = blank_to_none(value)
        elif value is None:
            continue
        setattr(instructor, field, value)

    await commit_or_conflict(db, "Instructor slug already exists for this school")
    return await _out(db, instructor)


# --- REPLACE CAMPUS / COURSE / GENRE LINKS ---
@router.put("/{instructor_id}/links", response_model=InstructorOut)
async def update_instructor_links(
    instructor_id: str,
    payload: InstructorLinks,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    await ensure_school_access(db, current_user, payload.school_id)
    instructor = await get_instructor(db, instructor_id, payload.school_id)

    for name in LINKS:
        ids: Optional[list[str]] = getattr(payload, name)
        if ids is not None:
            await replace_links(db, instructor, name, ids)
    await db.commit()

    return await _out(db, instructor)


# --- DELETE INSTRUCTOR (logical) ---
@router.delete("/{instructor_id}")
async def delete_instructor(
    instructor_id: str,
    school_id: str = Query(...),
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    await ensure_school_access(db, current_user, school_id)
    instructor = await get_instructor(db, instructor_id, school_id)

    instructor.is_active = False
    await db.commit()

    logger.info("Instructor %s deactivated in %s", instructor_id, school_id)
    return {"ok": True, "id": instructor_id}
