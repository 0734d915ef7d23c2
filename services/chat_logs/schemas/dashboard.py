from pydantic import BaseModel
from typing import Literal, Optional

class Kpi(BaseModel):
    label: str
    value: str
    note: Optional[str] = None
    delta: Optional[str] = None

class Activity(BaseModel):
    time: str
    text: str

class Task(BaseModel):
    kind: Literal["info", "warn", "error"]
    title: str
    count: Optional[int] = None
    href: Optional[str] = None

class SystemInfo(BaseModel):
    version: str
    env: str
    last_backup: str = "-"

class DashboardOut(BaseModel):
    kpis: list[Kpi]
    activities: list[Activity]
    tasks: list[Task]
    system: SystemInfo
    error: Optional[str] = None
