# services/diagnosis/engine/score.py
"""
Deduction scoring for course x instructor pairs.

Every pair starts at 100 points and loses points where it fails the answers:

    level  : 0 (same level) / -10 (one step off) / -30 (further, or unknown)
    age    : -15 when the course does not target the user's age group
    teacher: -5 when the instructor's style differs from the preferred one

The best match skips pairs with the -30 level deduction unless every pair has
it. Ties on score go to the earliest pair in the input. Pattern "A" means the
best score is 80 or higher, "B" otherwise.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Generic, Iterable, Optional, TypeVar

from services.diagnosis.engine.config import LEVEL_ORDER

PATTERN_A_THRESHOLD = 80
LEVEL_FAR_DEDUCTION = -30


class NoCandidatesError(ValueError):
    pass


@dataclass
class MatchContext:
    user_level: str
    user_age: str
    user_genre: str
    user_teacher_style: str


@dataclass
class ClassInfo:
    levels: list[str] = field(default_factory=list)
    targets: list[str] = field(default_factory=list)
    id: Optional[str] = None
    name: Optional[str] = None
    slug: Optional[str] = None


@dataclass
class TeacherInfo:
    styles: list[str] = field(default_factory=list)
    id: Optional[str] = None
    name: Optional[str] = None
    photo_url: Optional[str] = None


@dataclass
class BreakdownItem:
    key: str  # "level" | "age" | "teacher"
    score_diff: int
    note: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


C = TypeVar("C", bound=ClassInfo)
T = TypeVar("T", bound=TeacherInfo)


@dataclass
class Pair(Generic[C, T]):
    clazz: C
    teacher: T


@dataclass
class ScoredPair(Generic[C, T]):
    clazz: C
    teacher: T
    score: int
    breakdown: list[BreakdownItem]

    @property
    def is_level_far(self) -> bool:
        return any(b.key == "level" and b.score_diff <= LEVEL_FAR_DEDUCTION for b in self.breakdown)


@dataclass
class MatchSelection(Generic[C, T]):
    pattern: str
    best: ScoredPair[C, T]
    worst: ScoredPair[C, T]
    scored: list[ScoredPair[C, T]]


def level_distance(user_level: str, class_levels: Iterable[str]) -> int:
    if user_level not in LEVEL_ORDER:
        return 2
    user_index = LEVEL_ORDER.index(user_level)
    distances = [abs(LEVEL_ORDER.index(lv) - user_index) for lv in class_levels or [] if lv in LEVEL_ORDER]
    if not distances:
        return 2
    return min(distances)


def score_pair(pair: Pair[C, T], ctx: MatchContext) -> ScoredPair[C, T]:
    score = 100
    breakdown: list[BreakdownItem] = []

    distance = level_distance(ctx.user_level, pair.clazz.levels)
    if distance == 1:
        score -= 10
        breakdown.append(BreakdownItem("level", -10, "レベルが少し高め/低めですが、ついていける範囲です。"))
    elif distance >= 2:
        score += LEVEL_FAR_DEDUCTION
        breakdown.append(BreakdownItem("level", LEVEL_FAR_DEDUCTION, "レベル差が大きく、受講難易度が高そうです。"))

    if ctx.user_age not in (pair.clazz.targets or []):
        score -= 15
        breakdown.append(BreakdownItem("age", -15, "対象年代と少しずれています。"))

    if ctx.user_teacher_style not in (pair.teacher.styles or []):
        score -= 5
        breakdown.append(BreakdownItem("teacher", -5, "先生の指導スタイルがご希望とは少し違います。"))

    return ScoredPair(clazz=pair.clazz, teacher=pair.teacher, score=score, breakdown=breakdown)


def select_matches(pairs: Iterable[Pair[C, T]], ctx: MatchContext) -> MatchSelection[C, T]:
    scored = [score_pair(pair, ctx) for pair in pairs]
    if not scored:
        raise NoCandidatesError("No pairs to score.")

    best_pool = [s for s in scored if not s.is_level_far] or scored
    # sorted() is stable, so equal scores keep input order
    best = sorted(best_pool, key=lambda s: -s.score)[0]
    worst = sorted(scored, key=lambda s: s.score)[0]

    pattern = "A" if best.score >= PATTERN_A_THRESHOLD else "B"
    return MatchSelection(pattern=pattern, best=best, worst=worst, scored=scored)
