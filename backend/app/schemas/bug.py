from typing import Dict, List, Literal, Optional
from datetime import datetime

from pydantic import BaseModel, Field, UUID4

from app.schemas.project import ProjectRef, ProjectSummary

BugStatus = Literal["open", "in-progress", "resolved", "closed"]
BugPriority = Literal["low", "medium", "high", "critical"]
BugSeverity = Literal["minor", "major", "blocker"]


class BugEnvironment(BaseModel):
    os: Optional[str] = None
    browser: Optional[str] = None
    device: Optional[str] = None
    version: Optional[str] = None


class BugBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    status: BugStatus = "open"
    priority: BugPriority = "medium"
    severity: BugSeverity = "minor"
    type: Optional[str] = Field(None, max_length=50)
    steps_to_reproduce: List[str] = []
    expected_behavior: Optional[str] = None
    actual_behavior: Optional[str] = None
    assignee: Optional[str] = Field(None, max_length=100)
    due_date: Optional[datetime] = None
    estimated_hours: Optional[float] = Field(None, ge=0)
    actual_hours: Optional[float] = Field(None, ge=0)
    tags: List[str] = []
    environment: Optional[BugEnvironment] = None

    class Config:
        str_strip_whitespace = True


class BugCreate(BugBase):
    project_id: Optional[UUID4] = None
    reporter: Optional[str] = Field(None, max_length=100)


class BugUpdate(BugBase):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    status: Optional[BugStatus] = None
    priority: Optional[BugPriority] = None
    severity: Optional[BugSeverity] = None
    steps_to_reproduce: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    reporter: Optional[str] = Field(None, max_length=100)


class BugInDBBase(BugBase):
    id: UUID4
    bug_number: str
    project_id: Optional[UUID4] = None
    project_key: Optional[str] = None
    project: Optional[ProjectRef] = None
    reporter: str
    reported_by_id: Optional[UUID4] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class Bug(BugInDBBase):
    pass


class BugDeleted(BaseModel):
    message: str
    deleted_bug: Bug


class ProjectBugs(BaseModel):
    project: ProjectSummary
    bugs: List[Bug]
    total_count: int


class BugStats(BaseModel):
    status_stats: Dict[str, int]
    priority_stats: Dict[str, int]
    type_stats: Dict[str, int]
    total_bugs: int
