import logging
import re
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from services.diagnosis.crud import commit_or_conflict, get_owned, require_changes, require_text
from services.diagnosis.engine.config import DEFAULT_LIFESTYLES
from services.diagnosis.models.lifestyles import DiagnosisLifestyle
from services.diagnosis.schemas.catalog import CatalogItemCreate, CatalogItemOut, CatalogItemUpdate
from services.user_management.permissions import ensure_school_access
from shared.auth import get_current_user
from shared.db import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/diagnosis/lifestyles", tags=["Diagnosis Admin"])


def normalize_slug(value: str) -> str:
    slug = re.sub(r"\s+", "-", (value or "").strip().lower())
    if not slug:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="slug is required")
    return slug


async def ensure_default_lifestyles(db: AsyncSession, school_id: str):
    result = await db.execute(select(DiagnosisLifestyle.id).where(DiagnosisLifestyle.school_id == school_id))
    if result.scalars().first():
        return
    for lifestyle in DEFAULT_LIFESTYLES:
        db.add(DiagnosisLifestyle(school_id=school_id, is_active=True, **lifestyle))
    await db.commit()
    logger.info("Default lifestyles created for %s", school_id)


# --- LIST LIFESTYLES (seeds defaults on first access) ---
@router.get("", response_model=List[CatalogItemOut])
async def list_lifestyles(
    school_id: str = Query(...),
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    await ensure_school_access(db, current_user, school_id)
    await ensure_default_lifestyles(db, school_id)

    result = await db.execute(
        select(DiagnosisLifestyle)
        .where(DiagnosisLifestyle.school_id == school_id)
        .order_by(DiagnosisLifestyle.sort_order, DiagnosisLifestyle.created_at)
    )
    return result.scalars().all()


# --- CREATE LIFESTYLE ---
@router.post("", response_model=CatalogItemOut, status_code=status.HTTP_201_CREATED)
async def create_lifestyle(
    payload: CatalogItemCreate,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    school_id = require_text(payload.school_id, "school_id")
    await ensure_school_access(db, current_user, school_id)

    lifestyle = DiagnosisLifestyle(
        school_id=school_id,
        label=require_text(payload.label, "label"),
        slug=normalize_slug(payload.slug),
        sort_order=payload.sort_order,
        is_active=payload.is_active,
    )
    db.add(lifestyle)
    await commit_or_conflict(db, "Lifestyle slug already exists for this school")
    return lifestyle


# --- UPDATE LIFESTYLE ---
@router.patch("/{lifestyle_id}", response_model=CatalogItemOut)
async def update_lifestyle(
    lifestyle_id: str,
    payload: CatalogItemUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    changes = payload.model_dump(exclude_unset=True)
    require_changes(changes)
    lifestyle = await get_owned(db, DiagnosisLifestyle, lifestyle_id, current_user, "Lifestyle")

    for field, value in changes.items():
        if field == "label":
            value = require_text(value, field)
        elif field == "slug":
            value = normalize_slug(value)
        elif value is None:
            continue
        setattr(lifestyle, field, value)

    await commit_or_conflict(db, "Lifestyle slug already exists for this school")
    return lifestyle


# --- DELETE LIFESTYLE ---
@router.delete("/{lifestyle_id}")
async def delete_lifestyle(
    lifestyle_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    lifestyle = await get_owned(db, DiagnosisLifestyle, lifestyle_id, current_user, "Lifestyle")
    await db.delete(lifestyle)
    await db.commit()
    return {"ok": True, "id": lifestyle_id}
