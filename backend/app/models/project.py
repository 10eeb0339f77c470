from sqlalchemy import Column, Enum, ForeignKey, Integer, JSON, String, Table, Text, Uuid
from sqlalchemy.orm import relationship

from app.models.base import Base, BaseModel

PROJECT_STATUSES = ("active", "archived", "completed")

project_member = Table(
    "project_member",
    Base.metadata,
    Column(
        "project_id",
        Uuid(as_uuid=True),
        ForeignKey("project.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "user_id",
        Uuid(as_uuid=True),
        ForeignKey("user.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Project(BaseModel):
    """Project model grouping bugs under an owner and a team."""

    name = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=False)
    key = Column(String(10), unique=True, index=True, nullable=False)
    creator_id = Column(Uuid(as_uuid=True), ForeignKey("user.id"), nullable=False)
    bug_types = Column(JSON, nullable=False, default=list)
    status = Column(
        Enum(*PROJECT_STATUSES, name="project_status"),
        default="active",
        nullable=False,
    )
    # Last sequence number handed out for this project's bug numbers
    bug_sequence = Column(Integer, default=0, nullable=False)

    # Relationships
    creator = relationship("User", foreign_keys=[creator_id], lazy="selectin")
    team_members = relationship("User", secondary=project_member, lazy="selectin")

    @property
    def team_member_ids(self):
        return {member.id for member in self.team_members}

    def __repr__(self):
        return f"<Project {self.key}>"
