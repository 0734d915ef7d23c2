import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import case, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from services.diagnosis.crud import clean_tags, get_owned, ids_in_school, require_changes, require_text
from services.diagnosis.models.courses import DiagnosisCourse
from services.diagnosis.models.schedule import WEEKDAYS, DiagnosisScheduleSlot, ScheduleSlotCourse
from services.diagnosis.schemas.schedule import ScheduleSlotCreate, ScheduleSlotOut, ScheduleSlotUpdate
from services.user_management.permissions import ensure_school_access
from shared.auth import get_current_user
from shared.db import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/diagnosis/schedule-slots", tags=["Diagnosis Admin"])

REQUIRED_TEXT = ("genre_text", "time_text", "teacher", "place")

# MON=0 .. SUN=6, so slots sort by day of week rather than alphabetically
weekday_order = case({day: index for index, day in enumerate(WEEKDAYS)}, value=DiagnosisScheduleSlot.weekday)


def normalize_weekday(value: str) -> str:
    weekday = (value or "").strip().upper()
    if weekday not in WEEKDAYS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"weekday must be one of {', '.join(WEEKDAYS)}"
        )
    return weekday


async def require_course_ids(db: AsyncSession, school_id: str, course_ids: list[str]) -> list[str]:
    wanted = clean_tags(course_ids)
    if not wanted:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="At least one course_id is required")
    valid = await ids_in_school(db, DiagnosisCourse, school_id, wanted)
    if len(valid) != len(wanted):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unknown course_id for this school")
    return valid


async def slot_course_ids(db: AsyncSession, slot_ids: list[str]) -> dict[str, list[str]]:
    course_ids = {slot_id: [] for slot_id in slot_ids}
    if slot_ids:
        result = await db.execute(
            select(ScheduleSlotCourse.slot_id, ScheduleSlotCourse.course_id)
            .where(ScheduleSlotCourse.slot_id.in_(slot_ids))
        )
        for slot_id, course_id in result.all():
            course_ids[slot_id].append(course_id)
    return course_ids


def to_out(slot: DiagnosisScheduleSlot, course_ids: list[str]) -> ScheduleSlotOut:
    return ScheduleSlotOut(
        id=slot.id,
        school_id=slot.school_id,
        weekday=slot.weekday,
        genre_text=slot.genre_text,
        time_text=slot.time_text,
        teacher=slot.teacher,
        place=slot.place,
        sort_order=slot.sort_order,
        is_active=slot.is_active,
        course_ids=course_ids,
        created_at=slot.created_at,
    )


async def replace_courses(db: AsyncSession, slot_id: str, course_ids: list[str]):
    await db.execute(delete(ScheduleSlotCourse).where(ScheduleSlotCourse.slot_id == slot_id))
    for course_id in course_ids:
        db.add(ScheduleSlotCourse(slot_id=slot_id, course_id=course_id))


# --- LIST SLOTS ---
@router.get("", response_model=List[ScheduleSlotOut])
async def list_slots(
    school_id: str = Query(...),
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    await ensure_school_access(db, current_user, school_id)

    result = await db.execute(
        select(DiagnosisScheduleSlot)
        .where(DiagnosisScheduleSlot.school_id == school_id)
        .order_by(weekday_order, DiagnosisScheduleSlot.sort_order, DiagnosisScheduleSlot.created_at)
    )
    slots = result.scalars().all()
    course_ids = await slot_course_ids(db, [s.id for s in slots])
    return [to_out(s, course_ids[s.id]) for s in slots]


# --- CREATE SLOT ---
@router.post("", response_model=ScheduleSlotOut, status_code=status.HTTP_201_CREATED)
async def create_slot(
    payload: ScheduleSlotCreate,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    school_id = require_text(payload.school_id, "school_id")
    await ensure_school_access(db, current_user, school_id)

    slot = DiagnosisScheduleSlot(
        school_id=school_id,
        weekday=normalize_weekday(payload.weekday),
        sort_order=payload.sort_order,
        is_active=payload.is_active,
        **{field: require_text(getattr(payload, field), field) for field in REQUIRED_TEXT},
    )
    course_ids = await require_course_ids(db, school_id, payload.course_ids)

    db.add(slot)
    await db.flush()
    await replace_courses(db, slot.id, course_ids)
    await db.commit()

    logger.info("Schedule slot %s %s created for %s", slot.weekday, slot.time_text, school_id)
    return to_out(slot, course_ids)


# --- UPDATE SLOT ---
@router.patch("/{slot_id}", response_model=ScheduleSlotOut)
async def update_slot(
    slot_id: str,
    payload: ScheduleSlotUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    changes = payload.model_dump(exclude_unset=True)
    require_changes(changes)
    slot = await get_owned(db, DiagnosisScheduleSlot, slot_id, current_user, "Schedule slot")

    course_ids = changes.pop("course_ids", None)
    if "course_ids" in payload.model_fields_set:
        course_ids = await require_course_ids(db, slot.school_id, course_ids or [])
        await replace_courses(db, slot.id, course_ids)

    for field, value in changes.items():
        if field == "weekday":
            value = normalize_weekday(value)
        elif field in REQUIRED_TEXT:
            value = require_text(value, field)
        elif value is None:
            continue
        setattr(slot, field, value)

    await db.commit()
    links = await slot_course_ids(db, [slot.id])
    return to_out(slot, links[slot.id])


# --- DELETE SLOT ---
@router.delete("/{slot_id}")
async def delete_slot(
    slot_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    slot = await get_owned(db, DiagnosisScheduleSlot, slot_id, current_user, "Schedule slot")

    await db.execute(delete(ScheduleSlotCourse).where(ScheduleSlotCourse.slot_id == slot_id))
    await db.delete(slot)
    await db.commit()
    return {"ok": True, "id": slot_id}
