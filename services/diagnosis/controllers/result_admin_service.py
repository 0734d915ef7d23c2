import logging
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from services.diagnosis.crud import blank_to_none, clean_tags, get_owned, require_changes, require_text
from services.diagnosis.engine.conditions import ResultConditions
from services.diagnosis.models.results import DiagnosisResult, ResultCampus, ResultGenre
from services.diagnosis.schemas.results import ResultCreate, ResultOut, ResultUpdate
from services.user_management.permissions import ensure_school_access
from shared.auth import get_current_user
from shared.db import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/diagnosis/results", tags=["Diagnosis Admin"])


def clean_conditions(conditions) -> dict:
    raw = {key: clean_tags(values) for key, values in conditions.model_dump().items()}
    return ResultConditions.parse(raw).to_dict()


# --- LIST RESULTS ---
@router.get("", response_model=List[ResultOut])
async def list_results(
    school_id: str = Query(...),
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    await ensure_school_access(db, current_user, school_id)
    result = await db.execute(
        select(DiagnosisResult)
        .where(DiagnosisResult.school_id == school_id)
        .order_by(DiagnosisResult.priority.desc(), DiagnosisResult.sort_order)
    )
    return result.scalars().all()


# --- CREATE RESULT ---
@router.post("", response_model=ResultOut, status_code=status.HTTP_201_CREATED)
async def create_result(
    payload: ResultCreate,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    school_id = require_text(payload.school_id, "school_id")
    await ensure_school_access(db, current_user, school_id)

    record = DiagnosisResult(
        school_id=school_id,
        title=require_text(payload.title, "title"),
        body=blank_to_none(payload.body),
        priority=payload.priority,
        sort_order=payload.sort_order,
        is_fallback=payload.is_fallback,
        is_active=payload.is_active,
        conditions=clean_conditions(payload.conditions),
    )
    db.add(record)
    await db.commit()

    logger.info("Diagnosis result %r created for %s", record.title, school_id)
    return record


# --- UPDATE RESULT ---
@router.patch("/{result_id}", response_model=ResultOut)
async def update_result(
    result_id: str,
    payload: ResultUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    changes = payload.model_dump(exclude_unset=True)
    require_changes(changes)
    record = await get_owned(db, DiagnosisResult, result_id, current_user, "Result")

    for field, value in changes.items():
        if field == "title":
            value = require_text(value, field)
        elif field == "body":
            value = blank_to_none(value)
        elif field == "conditions":
            value = clean_conditions(payload.conditions) if payload.conditions else {}
        elif value is None:
            continue
        setattr(record, field, value)

    await db.commit()
    return record


# --- DELETE RESULT ---
@router.delete("/{result_id}")
async def delete_result(
    result_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    record = await get_owned(db, DiagnosisResult, result_id, current_user, "Result")

    await db.execute(delete(ResultGenre).where(ResultGenre.result_id == result_id))
    await db.execute(delete(ResultCampus).where(ResultCampus.result_id == result_id))
    await db.delete(record)
    await db.commit()
    return {"ok": True, "id": result_id}
