# services/diagnosis/engine/conditions.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence


def _as_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v).strip() for v in value if v is not None and str(v).strip()]


@dataclass
class ResultConditions:
    campus: list[str] = field(default_factory=list)
    genre: list[str] = field(default_factory=list)
    q2_tags: list[str] = field(default_factory=list)
    course_slug: list[str] = field(default_factory=list)

    @classmethod
    def parse(cls, raw: Any) -> "ResultConditions":
        if not isinstance(raw, dict):
            return cls()
        return cls(
            campus=_as_list(raw.get("campus")),
            genre=_as_list(raw.get("genre")),
            q2_tags=_as_list(raw.get("q2_tags", raw.get("q2Tags"))),
            course_slug=_as_list(raw.get("course_slug", raw.get("courseSlug"))),
        )

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "campus": self.campus,
            "genre": self.genre,
            "q2_tags": self.q2_tags,
            "course_slug": self.course_slug,
        }


@dataclass
class ResultContext:
    campus_slug: str
    genre_slug: Optional[str]
    q2_values: Sequence[str]
    course_slug: Optional[str]


def _includes_or_empty(values: list[str], value: Optional[str]) -> bool:
    if not values:
        return True
    return bool(value) and value in values


def matches(conditions: ResultConditions, ctx: ResultContext) -> bool:
    """Empty lists put no constraint on the result."""
    if not _includes_or_empty(conditions.campus, ctx.campus_slug):
        return False
    if not _includes_or_empty(conditions.genre, ctx.genre_slug):
        return False
    if conditions.q2_tags and not set(conditions.q2_tags) & set(ctx.q2_values):
        return False
    if not _includes_or_empty(conditions.course_slug, ctx.course_slug):
        return False
    return True


def pick_result(candidates: Sequence[Any], ctx: ResultContext):
    """
    Candidates come ordered by priority desc, sort_order asc. The first match
    wins, then the first fallback, then simply the first candidate.
    """
    for candidate in candidates:
        if matches(ResultConditions.parse(candidate.conditions), ctx):
            return candidate
    for candidate in candidates:
        if candidate.is_fallback:
            return candidate
    return candidates[0] if candidates else None
