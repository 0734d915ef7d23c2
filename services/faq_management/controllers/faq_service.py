import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Header, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from services.faq_management.models.faq import Faq
from services.faq_management.schemas.faq import (
    FaqAdminRecord,
    FaqDocument,
    FaqIssues,
    FaqNodeOut,
    FaqOut,
    FaqSaved,
)
from services.faq_management.tree import (
    FaqValidationError,
    count_issues,
    document_etag,
    find_node,
    is_valid_document,
    normalize_items,
    parse_path,
    total_issues,
    validate_items,
)
from services.user_management.permissions import allowed_school_ids, ensure_school_access, is_super_admin
from shared.auth import get_current_user
from shared.db import as_utc, get_db, utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["FAQ"])

META_FIELDS = ("palette", "cta_label", "cta_url", "launcher_text")


def _require_school(school_id: Optional[str]) -> str:
    if not school_id or not school_id.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='query param "school_id" is required')
    return school_id.strip()


def _blank_to_none(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def extract_payload(raw: Any) -> tuple[Any, Optional[dict]]:
    """Accept the legacy bare list or the object form with display settings."""
    if isinstance(raw, list):
        return raw, None
    if isinstance(raw, dict):
        meta = {field: _blank_to_none(raw.get(field)) for field in META_FIELDS}
        return raw.get("items", []), meta
    return [], None


async def get_faq(db: AsyncSession, school_id: str) -> Optional[Faq]:
    result = await db.execute(select(Faq).where(Faq.school_id == school_id))
    return result.scalars().first()


async def save_faq(db: AsyncSession, school_id: str, items: list, meta: Optional[dict], updated_by: str):
    faq = await get_faq(db, school_id)
    now = utcnow()
    if faq:
        action = "updated"
        faq.items = items
        faq.version = (faq.version or 0) + 1
        faq.updated_by = updated_by
        faq.updated_at = now
    else:
        action = "created"
        faq = Faq(school_id=school_id, items=items, version=1, updated_by=updated_by, updated_at=now)
        db.add(faq)

    if meta is not None:
        for field, value in meta.items():
            setattr(faq, field, value)

    await db.commit()
    return faq, action


async def _load_document(db: AsyncSession, school_id: str) -> tuple[dict, str]:
    faq = await get_faq(db, school_id)
    if not faq:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="FAQ not found")

    doc = {
        "school": faq.school_id,
        "version": faq.version,
        "updated_at": as_utc(faq.updated_at).isoformat(),
        "items": normalize_items(faq.items),
    }
    return doc, document_etag(doc["school"], doc["version"], doc["updated_at"])


# --- PUBLIC FAQ (used by the chatbot widget) ---
@router.get("/faq", response_model=FaqOut)
async def read_faq(
    response: Response,
    school_id: Optional[str] = Query(None),
    school: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    response.headers["Cache-Control"] = "no-store"
    school_id = _require_school(school_id or school)

    faq = await get_faq(db, school_id)
    if not faq:
        return FaqOut(items=[])

    return FaqOut(
        items=normalize_items(faq.items),
        palette=faq.palette,
        cta_label=faq.cta_label,
        cta_url=faq.cta_url,
        launcher_text=faq.launcher_text,
        version=faq.version,
        updated_at=faq.updated_at,
        updated_by=faq.updated_by,
    )


# --- SAVE FAQ (upsert) ---
@router.post("/faq", response_model=FaqSaved)
async def write_faq(
    response: Response,
    raw: Any = Body(...),
    school_id: Optional[str] = Query(None),
    school: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    response.headers["Cache-Control"] = "no-store"
    school_id = _require_school(school_id or school)
    await ensure_school_access(db, current_user, school_id)

    items, meta = extract_payload(raw)
    try:
        validate_items(items)
    except FaqValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

    faq, action = await save_faq(db, school_id, normalize_items(items), meta, current_user["email"])
    logger.info("FAQ %s for %s by %s (v%s)", action, school_id, current_user["email"], faq.version)

    return FaqSaved(
        ok=True,
        id=faq.id,
        school_id=school_id,
        action=action,
        version=faq.version,
        updated_at=faq.updated_at,
    )


# --- CACHEABLE FAQ DOCUMENT ---
@router.get("/faq/{school_id}/document", response_model=FaqDocument)
async def read_faq_document(
    school_id: str,
    response: Response,
    if_none_match: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db)
):
    doc, etag = await _load_document(db, school_id)

    if not is_valid_document(doc):
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Invalid FAQ structure")

    headers = {
        "ETag": etag,
        "Cache-Control": "public, max-age=60, stale-while-revalidate=300",
    }
    if if_none_match and if_none_match.strip('"') == etag:
        return Response(status_code=status.HTTP_304_NOT_MODIFIED, headers=headers)

    response.headers.update(headers)
    return doc


# --- SINGLE NODE BY PATH ---
#  /api/faq/links/node?path=0.1
@router.get("/faq/{school_id}/node", response_model=FaqNodeOut)
async def read_faq_node(
    school_id: str,
    path: str = Query(...),
    db: AsyncSession = Depends(get_db)
):
    try:
        node_path = parse_path(path)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

    doc, _ = await _load_document(db, school_id)
    try:
        node = find_node(doc["items"], node_path)
    except KeyError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="FAQ node not found")

    return FaqNodeOut(path=path, node=node)


# --- LINT RESULT FOR THE EDITOR ---
@router.get("/faq/{school_id}/issues", response_model=FaqIssues)
async def read_faq_issues(
    school_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    await ensure_school_access(db, current_user, school_id)

    faq = await get_faq(db, school_id)
    issues = count_issues(faq.items if faq else [])
    return FaqIssues(school_id=school_id, total=total_issues(issues), **issues)


def _admin_record(faq: Faq) -> FaqAdminRecord:
    return FaqAdminRecord(
        id=faq.id,
        school_id=faq.school_id,
        items=normalize_items(faq.items),
        palette=faq.palette,
        cta_label=faq.cta_label,
        cta_url=faq.cta_url,
        launcher_text=faq.launcher_text,
        version=faq.version,
        updated_at=faq.updated_at,
        updated_by=faq.updated_by,
    )


# --- ADMIN DATA (all FAQ records visible to the session) ---
@router.get("/admin-data")
async def read_admin_data(
    school_id: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    if school_id:
        await ensure_school_access(db, current_user, school_id)
        faq = await get_faq(db, school_id)
        return {"ok": True, "data": _admin_record(faq) if faq else None}

    stmt = select(Faq).order_by(Faq.updated_at.desc())
    if not is_super_admin(current_user):
        stmt = stmt.where(Faq.school_id.in_(await allowed_school_ids(db, current_user)))

    result = await db.execute(stmt)
    records = [_admin_record(faq) for faq in result.scalars().all()]
    return {"ok": True, "count": len(records), "data": records}
