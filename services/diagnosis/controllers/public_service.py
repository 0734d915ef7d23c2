import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from services.diagnosis.controllers.form_service import form_out, get_form, load_form_fields
from services.diagnosis.controllers.instructor_service import load_links, to_out as instructor_out
from services.diagnosis.controllers.schedule_service import weekday_order
from services.diagnosis.crud import clean_tags, ids_in_school
from services.diagnosis.engine.config import QUESTIONS, QuestionOption
from services.diagnosis.models.campuses import DiagnosisCampus
from services.diagnosis.models.courses import DiagnosisCourse
from services.diagnosis.models.genres import DiagnosisGenre
from services.diagnosis.models.instructors import DiagnosisInstructor
from services.diagnosis.models.lifestyles import DiagnosisLifestyle
from services.diagnosis.models.results import DiagnosisResult, ResultCampus, ResultGenre
from services.diagnosis.models.schedule import WEEKDAYS, DiagnosisScheduleSlot, ScheduleSlotCourse
from services.diagnosis.schemas.campuses import CampusOption, CampusOut
from services.diagnosis.schemas.catalog import CatalogItemOut
from services.diagnosis.schemas.courses import CourseOut
from services.diagnosis.schemas.forms import FormOut
from services.diagnosis.schemas.instructors import InstructorOut
from services.diagnosis.schemas.results import LinkUpdate, ResultSummary
from services.diagnosis.schemas.schedule import PublicSlot, WeeklySchedule
from services.user_management.permissions import ensure_school_access
from shared.auth import get_current_user
from shared.db import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/diagnosis", tags=["Diagnosis"])

# result link type -> (link table, link column, target model)
RESULT_LINKS = {
    "genres": (ResultGenre, "genre_id", DiagnosisGenre),
    "campuses": (ResultCampus, "campus_id", DiagnosisCampus),
}


PLACEHOLDER_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="240" height="240">'
    '<rect width="100%" height="100%" rx="24" fill="#E5E7EB"/>'
    '<text x="50%" y="50%" dominant-baseline="middle" text-anchor="middle" '
    'font-family="ui-sans-serif, system-ui" font-size="16" fill="#6B7280">{text}</text></svg>'
)


def _school(school_id: Optional[str], school: Optional[str] = None) -> str:
    value = (school_id or school or "").strip()
    if not value:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="school_id is required")
    return value


def _placeholder(text: str, status_code: int) -> Response:
    svg = PLACEHOLDER_SVG.format(text=text)
    return Response(
        svg,
        status_code=status_code,
        media_type="image/svg+xml",
        headers={"Cache-Control": "no-store"},
    )


async def active_rows(db: AsyncSession, model, school_id: str):
    result = await db.execute(
        select(model)
        .where(model.school_id == school_id, model.is_active == True)
        .order_by(model.sort_order, model.created_at)
    )
    return result.scalars().all()


# --- QUIZ QUESTIONS ---
@router.get("/questions")
async def read_questions(
    school_id: Optional[str] = Query(None),
    school: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    school_id = _school(school_id, school)
    campuses = await active_rows(db, DiagnosisCampus, school_id)

    questions = []
    for question in QUESTIONS:
        data = question.to_dict()
        if question.id == "Q1":
            data["options"] = [
                QuestionOption(id=c.slug, label=c.label, is_online=c.is_online).to_dict() for c in campuses
            ]
        questions.append(data)
    return {"school_id": school_id, "questions": questions}


# --- CAMPUSES ---
#  /api/diagnosis/campuses?school_id=links         -> Q1 options
#  /api/diagnosis/campuses?school_id=links&full=1  -> full rows
@router.get("/campuses")
async def read_campuses(
    school_id: Optional[str] = Query(None),
    school: Optional[str] = Query(None),
    full: bool = Query(False),
    db: AsyncSession = Depends(get_db)
):
    campuses = await active_rows(db, DiagnosisCampus, _school(school_id, school))
    if full:
        return [CampusOut.model_validate(c) for c in campuses]
    return [CampusOption(id=c.slug, label=c.label, is_online=c.is_online) for c in campuses]


@router.get("/courses", response_model=List[CourseOut])
async def read_courses(
    school_id: Optional[str] = Query(None),
    school: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    return await active_rows(db, DiagnosisCourse, _school(school_id, school))


@router.get("/genres", response_model=List[CatalogItemOut])
async def read_genres(
    school_id: Optional[str] = Query(None),
    school: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    return await active_rows(db, DiagnosisGenre, _school(school_id, school))


# --- GENRE PHOTOS (no longer served; <img> tags still get an image back) ---
@router.get("/genres/photo")
async def read_genre_photo(
    id: Optional[str] = Query(None),
    school_id: Optional[str] = Query(None)
):
    if not (id or "").strip() or not (school_id or "").strip():
        return _placeholder("BAD REQUEST", status.HTTP_400_BAD_REQUEST)
    return _placeholder("DISABLED", status.HTTP_410_GONE)


@router.get("/lifestyles", response_model=List[CatalogItemOut])
async def read_lifestyles(
    school_id: Optional[str] = Query(None),
    school: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    return await active_rows(db, DiagnosisLifestyle, _school(school_id, school))


@router.get("/instructors", response_model=List[InstructorOut])
async def read_instructors(
    school_id: Optional[str] = Query(None),
    school: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    instructors = await active_rows(db, DiagnosisInstructor, _school(school_id, school))
    links = await load_links(db, [i.id for i in instructors])
    return [instructor_out(i, links[i.id]) for i in instructors]


# --- RESULT RECORDS (summary for admin pickers) ---
@router.get("/results", response_model=List[ResultSummary])
async def read_results(
    school_id: Optional[str] = Query(None),
    school: Optional[str] = Query(None),
    include_inactive: bool = Query(False),
    db: AsyncSession = Depends(get_db)
):
    stmt = select(DiagnosisResult).where(DiagnosisResult.school_id == _school(school_id, school))
    if not include_inactive:
        stmt = stmt.where(DiagnosisResult.is_active == True)
    result = await db.execute(stmt.order_by(DiagnosisResult.sort_order, DiagnosisResult.title))
    return result.scalars().all()


# --- RESULT LINKS ---
@router.get("/links", response_model=List[str])
async def read_links(
    type: Optional[str] = Query(None),
    school_id: Optional[str] = Query(None),
    result_id: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    if type not in RESULT_LINKS or not school_id or not result_id:
        return []

    table, column, target_model = RESULT_LINKS[type]
    result = await db.execute(
        select(getattr(table, column))
        .join(target_model, target_model.id == getattr(table, column))
        .where(
            table.result_id == result_id,
            target_model.school_id == school_id,
            target_model.is_active == True,
        )
        .order_by(target_model.sort_order)
    )
    return list(result.scalars().all())


async def _ids_from_slugs(db: AsyncSession, model, school_id: str, slugs: list[str]) -> list[str]:
    wanted = clean_tags(slugs)
    if not wanted:
        return []
    result = await db.execute(
        select(model.id, model.slug).where(
            model.school_id == school_id,
            model.slug.in_(wanted),
            model.is_active == True,
        )
    )
    by_slug = {slug: row_id for row_id, slug in result.all()}
    return [by_slug[slug] for slug in wanted if slug in by_slug]


@router.post("/links", response_model=List[str])
async def write_links(
    payload: LinkUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    if payload.type not in RESULT_LINKS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"type must be one of {', '.join(RESULT_LINKS)}"
        )
    await ensure_school_access(db, current_user, payload.school_id)

    result = await db.execute(
        select(DiagnosisResult).where(
            DiagnosisResult.id == payload.result_id,
            DiagnosisResult.school_id == payload.school_id,
        )
    )
    if not result.scalars().first():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Result not found")

    table, column, target_model = RESULT_LINKS[payload.type]
    prefix = "genre" if payload.type == "genres" else "campus"
    ids = getattr(payload, f"{prefix}_ids")
    slugs = getattr(payload, f"{prefix}_slugs")
    if ids is None and slugs is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{prefix}_ids or {prefix}_slugs is required"
        )

    # ids take precedence over slugs
    if ids is not None:
        target_ids = await ids_in_school(db, target_model, payload.school_id, ids, active_only=True)
    else:
        target_ids = await _ids_from_slugs(db, target_model, payload.school_id, slugs)

    await db.execute(delete(table).where(table.result_id == payload.result_id))
    for target_id in target_ids:
        db.add(table(result_id=payload.result_id, **{column: target_id}))
    await db.commit()

    logger.info("Result %s linked to %d %s", payload.result_id, len(target_ids), payload.type)
    return target_ids


# --- WEEKLY SCHEDULE FOR A COURSE ---
@router.get("/schedule", response_model=WeeklySchedule)
async def read_schedule(
    course_id: str = Query(...),
    school_id: Optional[str] = Query(None),
    school: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    school_id = _school(school_id, school)
    result = await db.execute(
        select(DiagnosisScheduleSlot)
        .join(ScheduleSlotCourse, ScheduleSlotCourse.slot_id == DiagnosisScheduleSlot.id)
        .where(
            DiagnosisScheduleSlot.school_id == school_id,
            DiagnosisScheduleSlot.is_active == True,
            ScheduleSlotCourse.course_id == course_id,
        )
        .order_by(weekday_order, DiagnosisScheduleSlot.sort_order, DiagnosisScheduleSlot.created_at)
    )

    schedule = {day: [] for day in WEEKDAYS}
    for slot in result.scalars().all():
        schedule[slot.weekday].append(PublicSlot(
            id=slot.id,
            genre_text=slot.genre_text,
            time_text=slot.time_text,
            teacher=slot.teacher,
            place=slot.place,
        ))
    return WeeklySchedule(schedule=schedule, order=list(WEEKDAYS))


# --- ACTIVE FORM ---
@router.get("/form", response_model=Optional[FormOut])
async def read_public_form(
    school_id: Optional[str] = Query(None),
    school: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    form = await get_form(db, _school(school_id, school))
    if not form or not form.is_active:
        return None
    return form_out(form, await load_form_fields(db, form.id, active_only=True))
