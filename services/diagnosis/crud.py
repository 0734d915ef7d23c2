# services/diagnosis/crud.py
# Helpers shared by the diagnosis admin controllers
import logging
from typing import Any, Iterable, Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from services.user_management.permissions import ensure_school_access

logger = logging.getLogger(__name__)


def require_text(value: Optional[str], name: str) -> str:
    text = (value or "").strip()
    if not text:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"{name} is required")
    return text


def blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def clean_tags(values: Optional[Iterable[Any]]) -> list[str]:
    if not values:
        return []
    tags = [str(v).strip() for v in values if v is not None and str(v).strip()]
    return list(dict.fromkeys(tags))


def require_changes(changes: dict):
    if not changes:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update")


async def get_owned(db: AsyncSession, model, record_id: str, current_user: dict, label: str):
    """Load a row by id and check the session may manage its school."""
    result = await db.execute(select(model).where(model.id == record_id))
    record = result.scalars().first()
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
    await ensure_school_access(db, current_user, record.school_id)
    return record


async def commit_or_conflict(db: AsyncSession, detail: str):
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)


async def ids_in_school(db: AsyncSession, model, school_id: str, ids: Iterable[str], active_only: bool = False) -> list[str]:
    """Filter ids down to rows that belong to the school, keeping the given order."""
    wanted = clean_tags(ids)
    if not wanted:
        return []
    stmt = select(model.id).where(model.school_id == school_id, model.id.in_(wanted))
    if active_only:
        stmt = stmt.where(model.is_active == True)
    result = await db.execute(stmt)
    found = set(result.scalars().all())
    return [i for i in wanted if i in found]
