from sqlalchemy import Column, DateTime, Enum, Float, ForeignKey, Index, JSON, String, Text, Uuid
from sqlalchemy.orm import relationship

from app.models.base import BaseModel

BUG_STATUSES = ("open", "in-progress", "resolved", "closed")
BUG_PRIORITIES = ("low", "medium", "high", "critical")
BUG_SEVERITIES = ("minor", "major", "blocker")
OPEN_BUG_STATUSES = ("open", "in-progress")


class Bug(BaseModel):
    """Bug model for tracked issues, optionally scoped to a project."""

    __table_args__ = (Index("ix_bug_status_priority_created", "status", "priority", "created_at"),)

    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    project_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("project.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    project_key = Column(String(10), nullable=True)
    status = Column(Enum(*BUG_STATUSES, name="bug_status"), default="open", nullable=False)
    priority = Column(
        Enum(*BUG_PRIORITIES, name="bug_priority"), default="medium", nullable=False
    )
    severity = Column(
        Enum(*BUG_SEVERITIES, name="bug_severity"), default="minor", nullable=False
    )
    type = Column(String(50), nullable=True)
    steps_to_reproduce = Column(JSON, nullable=False, default=list)
    expected_behavior = Column(Text, nullable=True)
    actual_behavior = Column(Text, nullable=True)
    reporter = Column(String(100), nullable=False, default="Anonymous")
    reported_by_id = Column(
        Uuid(as_uuid=True), ForeignKey("user.id", ondelete="SET NULL"), nullable=True
    )
    assignee = Column(String(100), nullable=True)
    due_date = Column(DateTime, nullable=True)
    estimated_hours = Column(Float, nullable=True)
    actual_hours = Column(Float, nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    environment = Column(JSON, nullable=True)
    bug_number = Column(String(32), unique=True, index=True, nullable=False)

    # Relationships
    project = relationship("Project", lazy="selectin")

    def __repr__(self):
        return f"<Bug {self.bug_number}>"
