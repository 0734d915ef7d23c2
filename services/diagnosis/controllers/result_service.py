import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from services.diagnosis.engine.config import (
    CONCERN_MESSAGES,
    REQUIRED_QUESTION_IDS,
    concern_key_for,
    genre_slug_for,
    q2_values,
)
from services.diagnosis.engine.conditions import ResultContext, pick_result
from services.diagnosis.engine.result_view import build_result_view, build_user_messages, headline_for
from services.diagnosis.engine.result_copy import SUBLINE
from services.diagnosis.engine.score import ClassInfo, Pair, TeacherInfo
from services.diagnosis.models.campuses import DiagnosisCampus
from services.diagnosis.models.courses import DiagnosisCourse
from services.diagnosis.models.genres import DiagnosisGenre
from services.diagnosis.models.instructors import (
    DiagnosisInstructor,
    InstructorCampus,
    InstructorCourse,
    InstructorGenre,
)
from services.diagnosis.models.results import DiagnosisResult
from services.diagnosis.schemas.result import (
    BreakdownOut,
    CourseRef,
    DiagnosisRequest,
    DiagnosisResponse,
    InstructorRef,
    MatchOut,
    ResultRef,
    SelectedCampus,
    TeacherOut,
    WorstMatchOut,
)
from shared.db import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/diagnosis", tags=["Diagnosis"])


def _bad_request(detail: str):
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


async def _linked_instructor_ids(db: AsyncSession, table, column: str, target_id: str) -> set[str]:
    result = await db.execute(select(table.instructor_id).where(getattr(table, column) == target_id))
    return set(result.scalars().all())


async def _active_by_slug(db: AsyncSession, model, school_id: str, slug: Optional[str]):
    if not slug:
        return None
    result = await db.execute(
        select(model).where(model.school_id == school_id, model.slug == slug, model.is_active == True)
    )
    return result.scalars().first()


def recommend_course(courses, values: list[str]) -> Optional[DiagnosisCourse]:
    wanted = set(values)
    for course in courses:
        if wanted & set(course.level_tags or []):
            return course
    return None


def _class_info(course: DiagnosisCourse) -> ClassInfo:
    return ClassInfo(
        levels=list(course.level_tags or []),
        targets=list(course.target_tags or []),
        id=course.id,
        name=course.label,
        slug=course.slug,
    )


def _teacher_info(instructor: DiagnosisInstructor) -> TeacherInfo:
    return TeacherInfo(
        styles=list(instructor.style_tags or []),
        id=instructor.id,
        name=instructor.label,
        photo_url=instructor.photo_url,
    )


# --- RUN DIAGNOSIS ---
@router.post("/result", response_model=DiagnosisResponse)
async def diagnose(
    payload: DiagnosisRequest,
    db: AsyncSession = Depends(get_db)
):
    school_id = (payload.school_id or "").strip()
    if not school_id:
        raise _bad_request("school_id is required")

    answers = {k: (v or "").strip() for k, v in payload.answers.items()}
    missing = [qid for qid in REQUIRED_QUESTION_IDS if not answers.get(qid)]
    if missing:
        raise _bad_request(f"Missing answers: {', '.join(missing)}")

    campus = await _active_by_slug(db, DiagnosisCampus, school_id, answers["Q1"])
    if not campus:
        raise _bad_request(f"Unknown campus: {answers['Q1']}")

    genre = await _active_by_slug(db, DiagnosisGenre, school_id, genre_slug_for(answers["Q4"]))

    result = await db.execute(
        select(DiagnosisCourse)
        .where(DiagnosisCourse.school_id == school_id, DiagnosisCourse.is_active == True)
        .order_by(DiagnosisCourse.sort_order, DiagnosisCourse.created_at)
    )
    courses = result.scalars().all()
    level_values = q2_values(answers["Q2"])
    course = recommend_course(courses, level_values)

    # --- result record ---
    result = await db.execute(
        select(DiagnosisResult)
        .where(DiagnosisResult.school_id == school_id, DiagnosisResult.is_active == True)
        .order_by(DiagnosisResult.priority.desc(), DiagnosisResult.sort_order)
    )
    record = pick_result(
        result.scalars().all(),
        ResultContext(
            campus_slug=campus.slug,
            genre_slug=genre.slug if genre else None,
            q2_values=level_values,
            course_slug=course.slug if course else None,
        ),
    )
    if not record:
        raise _bad_request("No diagnosis result is configured for this school")

    # --- instructors at the campus ---
    result = await db.execute(
        select(DiagnosisInstructor)
        .where(DiagnosisInstructor.school_id == school_id, DiagnosisInstructor.is_active == True)
        .order_by(DiagnosisInstructor.sort_order, DiagnosisInstructor.created_at)
    )
    active_instructors = result.scalars().all()
    at_campus = await _linked_instructor_ids(db, InstructorCampus, "campus_id", campus.id)

    allowed = set(at_campus)
    if genre:
        allowed &= await _linked_instructor_ids(db, InstructorGenre, "genre_id", genre.id)
    if course:
        allowed &= await _linked_instructor_ids(db, InstructorCourse, "course_id", course.id)
    instructors = [i for i in active_instructors if i.id in allowed]

    # --- course x instructor pairs ---
    result = await db.execute(
        select(InstructorCourse.course_id, InstructorCourse.instructor_id).where(
            InstructorCourse.course_id.in_([c.id for c in courses])
        )
    )
    teaching_by_course: dict[str, set[str]] = {}
    for course_id, instructor_id in result.all():
        teaching_by_course.setdefault(course_id, set()).add(instructor_id)

    pairs = []
    for candidate in courses:
        teaching = teaching_by_course.get(candidate.id, set())
        for instructor in active_instructors:
            if instructor.id in teaching and instructor.id in at_campus:
                pairs.append(Pair(clazz=_class_info(candidate), teacher=_teacher_info(instructor)))

    worst_match = None
    if pairs:
        view = build_result_view(answers, pairs)
        best = view.best
        pattern, score, headline = view.pattern, best.score, view.headline
        breakdown = [BreakdownOut(**b.to_dict()) for b in best.breakdown]
        best_match = MatchOut(
            class_id=best.clazz.id,
            class_name=best.clazz.name,
            genres=[genre.slug] if genre else [],
            levels=best.clazz.levels,
            targets=best.clazz.targets,
        )
        teacher = TeacherOut(
            id=best.teacher.id,
            name=best.teacher.name,
            photo_url=best.teacher.photo_url,
            styles=best.teacher.styles,
        )
        worst_match = WorstMatchOut(
            class_id=view.worst.clazz.id,
            class_name=view.worst.clazz.name,
            teacher_name=view.worst.teacher.name,
            score=view.worst.score,
            breakdown=[BreakdownOut(**b.to_dict()) for b in view.worst.breakdown],
        )
        user_messages = view.user_messages
    else:
        logger.info("No course x instructor pairs for %s at %s, skipping scoring", school_id, campus.slug)
        pattern, score, breakdown = "A", 100, []
        best_match = MatchOut(
            class_id=course.id if course else record.id,
            class_name=course.label if course else record.title,
            genres=[genre.slug] if genre else [],
            levels=list(course.level_tags or []) if course else [],
            targets=list(course.target_tags or []) if course else [],
        )
        first = instructors[0] if instructors else None
        teacher = TeacherOut(
            id=first.id if first else None,
            name=first.label if first else None,
            photo_url=first.photo_url if first else None,
            styles=list(first.style_tags or []) if first else [],
        )
        headline = headline_for(None)
        user_messages = build_user_messages(answers)

    logger.info("Diagnosis for %s: result=%s pattern=%s score=%s", school_id, record.id, pattern, score)
    return DiagnosisResponse(
        pattern=pattern,
        score=score,
        headline=headline,
        subline=SUBLINE,
        result=ResultRef(id=record.id, title=record.title, body=record.body),
        best_match=best_match,
        teacher=teacher,
        instructors=[
            InstructorRef(id=i.id, label=i.label, slug=i.slug, photo_url=i.photo_url) for i in instructors
        ],
        breakdown=breakdown,
        worst_match=worst_match,
        concern_message=CONCERN_MESSAGES[concern_key_for(answers["Q6"])],
        user_messages=user_messages,
        selected_campus=SelectedCampus(
            label=campus.label,
            slug=campus.slug,
            is_online=campus.is_online,
            address=campus.address,
            access=campus.access,
            google_map_url=campus.google_map_url,
        ),
        recommended_course=CourseRef(id=course.id, label=course.label, slug=course.slug) if course else None,
    )
