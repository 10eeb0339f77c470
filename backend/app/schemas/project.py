from typing import Dict, List, Literal, Optional
from datetime import datetime

from pydantic import BaseModel, Field, UUID4, field_validator

from app.schemas.user import UserSummary

ProjectStatus = Literal["active", "archived", "completed"]

PROJECT_KEY_PATTERN = r"^[A-Z][A-Z0-9]{1,9}$"
DEFAULT_BUG_TYPE_COLOR = "#6B7280"


class BugType(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=500)
    color: str = Field(DEFAULT_BUG_TYPE_COLOR, pattern=r"^#[0-9A-Fa-f]{6}$")

    class Config:
        str_strip_whitespace = True
        from_attributes = True


class ProjectBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)

    class Config:
        str_strip_whitespace = True


class ProjectCreate(ProjectBase):
    key: str = Field(..., pattern=PROJECT_KEY_PATTERN)
    team_members: List[UUID4] = []
    bug_types: List[BugType] = []

    @field_validator("key", mode="before")
    def normalize_key(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v


class ProjectUpdate(ProjectBase):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1)
    team_members: Optional[List[UUID4]] = None
    bug_types: Optional[List[BugType]] = None
    status: Optional[ProjectStatus] = None


class ProjectInDBBase(ProjectBase):
    id: UUID4
    key: str
    status: str
    creator: UserSummary
    team_members: List[UserSummary] = []
    bug_types: List[BugType] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class Project(ProjectInDBBase):
    pass


class ProjectWithCounts(Project):
    bug_count: int = 0
    open_bug_count: int = 0


class ProjectDetail(Project):
    bug_stats: Dict[str, int] = {}
    total_bugs: int = 0


class ProjectRef(BaseModel):
    id: UUID4
    name: str
    key: str

    class Config:
        from_attributes = True


class ProjectSummary(ProjectRef):
    description: str
    bug_types: List[BugType] = []
