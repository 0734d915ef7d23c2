import logging
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from services.diagnosis.crud import blank_to_none, commit_or_conflict, get_owned, require_changes, require_text
from services.diagnosis.models.campuses import DiagnosisCampus
from services.diagnosis.models.instructors import InstructorCampus
from services.diagnosis.models.results import ResultCampus
from services.diagnosis.schemas.campuses import CampusCreate, CampusOut, CampusUpdate
from services.user_management.permissions import ensure_school_access
from shared.auth import get_current_user
from shared.db import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/diagnosis/campuses", tags=["Diagnosis Admin"])

OPTIONAL_TEXT = ("address", "access", "google_map_url")


# --- LIST CAMPUSES ---
@router.get("", response_model=List[CampusOut])
async def list_campuses(
    school_id: str = Query(...),
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    await ensure_school_access(db, current_user, school_id)
    result = await db.execute(
        select(DiagnosisCampus)
        .where(DiagnosisCampus.school_id == school_id)
        .order_by(DiagnosisCampus.sort_order, DiagnosisCampus.created_at)
    )
    return result.scalars().all()


# --- CREATE CAMPUS ---
@router.post("", response_model=CampusOut, status_code=status.HTTP_201_CREATED)
async def create_campus(
    payload: CampusCreate,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    school_id = require_text(payload.school_id, "school_id")
    await ensure_school_access(db, current_user, school_id)

    campus = DiagnosisCampus(
        school_id=school_id,
        label=require_text(payload.label, "label"),
        slug=require_text(payload.slug, "slug"),
        sort_order=payload.sort_order,
        is_online=payload.is_online,
        is_active=payload.is_active,
        address=blank_to_none(payload.address),
        access=blank_to_none(payload.access),
        google_map_url=blank_to_none(payload.google_map_url),
    )
    db.add(campus)
    await commit_or_conflict(db, "Campus slug already exists for this school")

    logger.info("Campus %s created for %s", campus.slug, school_id)
    return campus


# --- UPDATE CAMPUS ---
@router.patch("/{campus_id}", response_model=CampusOut)
async def update_campus(
    campus_id: str,
    payload: CampusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    changes = payload.model_dump(exclude_unset=True)
    require_changes(changes)
    campus = await get_owned(db, DiagnosisCampus, campus_id, current_user, "Campus")

    for field, value in changes.items():
        if field in ("label", "slug"):
            value = require_text(value, field)
        elif field in OPTIONAL_TEXT:
            value = blank_to_none(value)
        elif value is None:
            continue
        setattr(campus, field, value)

    await commit_or_conflict(db, "Campus slug already exists for this school")
    return campus


# --- DELETE CAMPUS ---
@router.delete("/{campus_id}")
async def delete_campus(
    campus_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    campus = await get_owned(db, DiagnosisCampus, campus_id, current_user, "Campus")

    await db.execute(delete(InstructorCampus).where(InstructorCampus.campus_id == campus_id))
    await db.execute(delete(ResultCampus).where(ResultCampus.campus_id == campus_id))
    await db.delete(campus)
    await db.commit()

    logger.info("Campus %s deleted from %s", campus.slug, campus.school_id)
    return {"ok": True, "id": campus_id}
