# services/diagnosis/engine/result_view.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

from services.diagnosis.engine.config import CONCERN_MESSAGES, get_option
from services.diagnosis.engine.result_copy import (
    AGE_RESULT_COPY,
    CONCERN_RESULT_COPY,
    DEFAULT_AGE_COPY,
    DEFAULT_CONCERN_COPY,
    DEFAULT_LEVEL_COPY,
    DEFAULT_TEACHER_COPY,
    FALLBACK_CLASS_NAME,
    FALLBACK_TEACHER_NAME,
    LEVEL_RESULT_COPY,
    SUBLINE,
    TEACHER_RESULT_COPY,
)
from services.diagnosis.engine.score import MatchContext, Pair, ScoredPair, select_matches

Answers = Mapping[str, str]


@dataclass
class ResultView:
    pattern: str
    best: ScoredPair
    worst: ScoredPair
    scored: list[ScoredPair]
    headline: str
    subline: str
    campus_option_id: Optional[str] = None
    user_messages: dict[str, dict[str, Any]] = field(default_factory=dict)


def build_match_context(answers: Answers) -> MatchContext:
    level = get_option("Q2", answers.get("Q2"))
    age = get_option("Q3", answers.get("Q3"))
    genre = get_option("Q4", answers.get("Q4"))
    style = get_option("Q5", answers.get("Q5"))

    return MatchContext(
        user_level=(level.tag if level else None) or "Lv1_入門",
        user_age=(age.tag if age else None) or "Age_Adult_Work",
        user_genre=(genre.tag if genre else None) or "Genre_All",
        user_teacher_style=(style.tag if style else None) or "Style_Healing",
    )


def headline_for(best: Optional[ScoredPair]) -> str:
    class_name = (best.clazz.name if best else None) or FALLBACK_CLASS_NAME
    teacher_name = (best.teacher.name if best else None) or FALLBACK_TEACHER_NAME
    return f"あなたにおすすめ：{class_name} × {teacher_name}"


def build_user_messages(answers: Answers) -> dict[str, dict[str, Any]]:
    messages: dict[str, dict[str, Any]] = {}

    level = get_option("Q2", answers.get("Q2"))
    if level:
        messages["level"] = {
            "selected_label": level.label,
            "message": LEVEL_RESULT_COPY.get(level.tag or "", DEFAULT_LEVEL_COPY),
        }

    age = get_option("Q3", answers.get("Q3"))
    if age:
        messages["age"] = {
            "selected_label": age.label,
            "message": AGE_RESULT_COPY.get(age.tag or "", DEFAULT_AGE_COPY),
        }

    teacher = get_option("Q5", answers.get("Q5"))
    if teacher:
        messages["teacher"] = {
            "selected_label": teacher.label,
            "message": TEACHER_RESULT_COPY.get(teacher.tag or "", DEFAULT_TEACHER_COPY),
        }

    concern = get_option("Q6", answers.get("Q6"))
    if concern:
        key = concern.message_key
        messages["concern"] = {
            "selected_label": concern.label,
            "message": CONCERN_RESULT_COPY.get(key, DEFAULT_CONCERN_COPY) if key else DEFAULT_CONCERN_COPY,
            "consult_message": CONCERN_MESSAGES.get(key) if key else None,
        }

    return messages


def build_result_view(answers: Answers, pairs: Iterable[Pair]) -> ResultView:
    """Score the pairs against the answers. Raises NoCandidatesError on no pairs."""
    selection = select_matches(pairs, build_match_context(answers))

    return ResultView(
        pattern=selection.pattern,
        best=selection.best,
        worst=selection.worst,
        scored=selection.scored,
        headline=headline_for(selection.best),
        subline=SUBLINE,
        campus_option_id=answers.get("Q1"),
        user_messages=build_user_messages(answers),
    )
