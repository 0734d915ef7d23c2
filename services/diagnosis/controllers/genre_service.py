import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from services.diagnosis.crud import commit_or_conflict, get_owned, require_changes, require_text
from services.diagnosis.engine.config import DEFAULT_GENRES
from services.diagnosis.models.genres import DiagnosisGenre
from services.diagnosis.models.instructors import InstructorGenre
from services.diagnosis.models.results import ResultGenre
from services.diagnosis.schemas.catalog import CatalogItemCreate, CatalogItemOut, CatalogItemUpdate, SchoolRef
from services.user_management.permissions import ensure_school_access
from shared.auth import get_current_user
from shared.db import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/diagnosis/genres", tags=["Diagnosis Admin"])


async def _list_genres(db: AsyncSession, school_id: str):
    result = await db.execute(
        select(DiagnosisGenre)
        .where(DiagnosisGenre.school_id == school_id)
        .order_by(DiagnosisGenre.sort_order, DiagnosisGenre.created_at)
    )
    return result.scalars().all()


# --- LIST GENRES ---
@router.get("", response_model=List[CatalogItemOut])
async def list_genres(
    school_id: str = Query(...),
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    await ensure_school_access(db, current_user, school_id)
    return await _list_genres(db, school_id)


# --- CREATE GENRE ---
@router.post("", response_model=CatalogItemOut, status_code=status.HTTP_201_CREATED)
async def create_genre(
    payload: CatalogItemCreate,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    school_id = require_text(payload.school_id, "school_id")
    await ensure_school_access(db, current_user, school_id)

    genre = DiagnosisGenre(
        school_id=school_id,
        label=require_text(payload.label, "label"),
        slug=require_text(payload.slug, "slug"),
        sort_order=payload.sort_order,
        is_active=payload.is_active,
    )
    db.add(genre)
    await commit_or_conflict(db, "Genre slug already exists for this school")
    return genre


# --- RESET TO DEFAULT GENRES ---
@router.post("/reset", response_model=List[CatalogItemOut])
async def reset_genres(
    payload: SchoolRef,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    school_id = require_text(payload.school_id, "school_id")
    await ensure_school_access(db, current_user, school_id)

    genre_ids = select(DiagnosisGenre.id).where(DiagnosisGenre.school_id == school_id)
    try:
        await db.execute(delete(InstructorGenre).where(InstructorGenre.genre_id.in_(genre_ids)))
        await db.execute(delete(ResultGenre).where(ResultGenre.genre_id.in_(genre_ids)))
        await db.execute(delete(DiagnosisGenre).where(DiagnosisGenre.school_id == school_id))

        for genre in DEFAULT_GENRES:
            db.add(DiagnosisGenre(school_id=school_id, is_active=True, **genre))
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("Genre reset failed for %s", school_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Error resetting genres: {str(e)}")

    logger.info("Genres reset to defaults for %s by %s", school_id, current_user["email"])
    return await _list_genres(db, school_id)


# --- UPDATE GENRE ---
@router.patch("/{genre_id}", response_model=CatalogItemOut)
async def update_genre(
    genre_id: str,
    payload: CatalogItemUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    changes = payload.model_dump(exclude_unset=True)
    require_changes(changes)
    genre = await get_owned(db, DiagnosisGenre, genre_id, current_user, "Genre")

    for field, value in changes.items():
        if field in ("label", "slug"):
            value = require_text(value, field)
        elif value is None:
            continue
        setattr(genre, field, value)

    await commit_or_conflict(db, "Genre slug already exists for this school")
    return genre


# --- DELETE GENRE ---
@router.delete("/{genre_id}")
async def delete_genre(
    genre_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    genre = await get_owned(db, DiagnosisGenre, genre_id, current_user, "Genre")

    await db.execute(delete(InstructorGenre).where(InstructorGenre.genre_id == genre_id))
    await db.execute(delete(ResultGenre).where(ResultGenre.genre_id == genre_id))
    await db.delete(genre)
    await db.commit()
    return {"ok": True, "id": genre_id}
