from __future__ import annotations

from types import SimpleNamespace

from services.diagnosis.engine.conditions import ResultConditions, ResultContext, matches, pick_result
from services.diagnosis.engine.config import concern_key_for, genre_slug_for, q2_values
from services.diagnosis.engine.result_view import build_match_context, build_result_view
from services.diagnosis.engine.score import ClassInfo, Pair, TeacherInfo

CTX = ResultContext(campus_slug="shibuya", genre_slug="kpop", q2_values=["Lv1_入門", "2-2"], course_slug="kpop-beginner")


def _result(title, conditions=None, is_fallback=False):
    return SimpleNamespace(title=title, conditions=conditions or {}, is_fallback=is_fallback)


def test_conditions_parse_accepts_camel_case() -> None:
    parsed = ResultConditions.parse({"q2Tags": ["Lv1_入門"], "courseSlug": ["a", " "], "campus": "bad"})
    assert parsed.q2_tags == ["Lv1_入門"]
    assert parsed.course_slug == ["a"]
    assert parsed.campus == []


def test_empty_conditions_match_anything() -> None:
    assert matches(ResultConditions(), CTX)


def test_each_condition_narrows() -> None:
    assert not matches(ResultConditions(campus=["shinjuku"]), CTX)
    assert not matches(ResultConditions(genre=["jazz"]), CTX)
    assert not matches(ResultConditions(q2_tags=["Lv4_中上級"]), CTX)
    assert not matches(ResultConditions(course_slug=["kpop-advanced"]), CTX)
    assert matches(ResultConditions(campus=["shibuya"], genre=["kpop"], q2_tags=["2-2"]), CTX)


def test_missing_genre_fails_a_genre_condition() -> None:
    ctx = ResultContext(campus_slug="shibuya", genre_slug=None, q2_values=[], course_slug=None)
    assert not matches(ResultConditions(genre=["kpop"]), ctx)
    assert not matches(ResultConditions(course_slug=["kpop-beginner"]), ctx)


def test_pick_result_order() -> None:
    first_match = _result("match", {"genre": ["kpop"]})
    fallback = _result("fallback", {"genre": ["jazz"]}, is_fallback=True)
    plain = _result("plain", {"campus": ["online"]})

    assert pick_result([plain, first_match, fallback], CTX).title == "match"
    assert pick_result([plain, fallback], CTX).title == "fallback"
    assert pick_result([plain], CTX).title == "plain"
    assert pick_result([], CTX) is None


def test_answer_mappings() -> None:
    assert genre_slug_for("4-1") == "kpop"
    assert genre_slug_for("4-5") is None
    assert genre_slug_for("unknown") is None
    assert concern_key_for("6-3") == "Msg_Sense"
    assert concern_key_for(None) == "Msg_Consult"
    assert q2_values("2-2") == ["Lv1_入門", "運動は普通にできるけど、ダンスは未経験", "2-2"]
    assert q2_values("custom") == ["custom"]


def test_match_context_defaults() -> None:
    ctx = build_match_context({})
    assert (ctx.user_level, ctx.user_age, ctx.user_genre, ctx.user_teacher_style) == (
        "Lv1_入門", "Age_Adult_Work", "Genre_All", "Style_Healing"
    )


def test_result_view_headline_and_messages() -> None:
    pair = Pair(
        clazz=ClassInfo(levels=["Lv1_入門"], targets=["Age_Adult_Work"], name="K-POP入門"),
        teacher=TeacherInfo(styles=["Style_Healing"], name="Aki"),
    )
    view = build_result_view({"Q1": "shibuya", "Q2": "2-2", "Q3": "3-5", "Q5": "5-1", "Q6": "6-1"}, [pair])

    assert view.pattern == "A"
    assert view.headline == "あなたにおすすめ：K-POP入門 × Aki"
    assert view.campus_option_id == "shibuya"
    assert set(view.user_messages) == {"level", "age", "teacher", "concern"}
    assert view.user_messages["concern"]["consult_message"]
