# Request / response of the public result endpoint
from pydantic import BaseModel
from typing import Any, Optional

class DiagnosisRequest(BaseModel):
    school_id: Optional[str] = None
    answers: dict[str, str] = {}

class BreakdownOut(BaseModel):
    key: str
    score_diff: int
    note: str

class MatchOut(BaseModel):
    class_id: Optional[str] = None
    class_name: Optional[str] = None
    genres: list[str] = []
    levels: list[str] = []
    targets: list[str] = []

class TeacherOut(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    photo_url: Optional[str] = None
    styles: list[str] = []

class WorstMatchOut(BaseModel):
    class_id: Optional[str] = None
    class_name: Optional[str] = None
    teacher_name: Optional[str] = None
    score: int
    breakdown: list[BreakdownOut]

class InstructorRef(BaseModel):
    id: str
    label: str
    slug: str
    photo_url: Optional[str] = None

class SelectedCampus(BaseModel):
    label: str
    slug: str
    is_online: bool
    address: Optional[str] = None
    access: Optional[str] = None
    google_map_url: Optional[str] = None

class CourseRef(BaseModel):
    id: str
    label: str
    slug: str

class ResultRef(BaseModel):
    id: str
    title: str
    body: Optional[str] = None

class DiagnosisResponse(BaseModel):
    pattern: str
    score: int
    headline: str
    subline: str
    result: ResultRef
    best_match: MatchOut
    teacher: TeacherOut
    instructors: list[InstructorRef]
    breakdown: list[BreakdownOut]
    worst_match: Optional[WorstMatchOut] = None
    concern_message: str
    user_messages: dict[str, dict[str, Any]]
    selected_campus: SelectedCampus
    recommended_course: Optional[CourseRef] = None
