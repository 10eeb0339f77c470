from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy import and_, or_, true
from sqlalchemy.sql.elements import ColumnElement

from app.core.errors import InvalidFilterError
from app.models.bug import BUG_PRIORITIES, BUG_STATUSES, Bug

ALL = "all"


class BugFilterParams(BaseModel):
    """Query parameters accepted by the bug listing endpoints."""

    status: Optional[str] = None
    priority: Optional[str] = None
    project: Optional[str] = None
    type: Optional[str] = None
    search: Optional[str] = None


def _is_set(value: Optional[str]) -> bool:
    return bool(value) and value != ALL


def _parse_project_id(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as e:
        raise InvalidFilterError("Validation failed", [f"project: invalid project ID '{value}'"]) from e


def build_bug_filter(params: BugFilterParams) -> ColumnElement[bool]:
    """
    Translate listing parameters into a WHERE expression over ``Bug``.

    ``"all"`` disables the filter for status, priority, project and type.
    A search term matches title, description or bug number, ignoring case.
    All present filters are combined with AND.

    Raises:
        InvalidFilterError: if status or priority is outside its enum
    """
    clauses: List[ColumnElement[bool]] = []

    if _is_set(params.status):
        if params.status not in BUG_STATUSES:
            raise InvalidFilterError(
                "Validation failed",
                [f"status: must be one of {', '.join(BUG_STATUSES)}"],
            )
        clauses.append(Bug.status == params.status)

    if _is_set(params.priority):
        if params.priority not in BUG_PRIORITIES:
            raise InvalidFilterError(
                "Validation failed",
                [f"priority: must be one of {', '.join(BUG_PRIORITIES)}"],
            )
        clauses.append(Bug.priority == params.priority)

    if _is_set(params.project):
        clauses.append(Bug.project_id == _parse_project_id(params.project))

    if _is_set(params.type):
        clauses.append(Bug.type == params.type)

    search = (params.search or "").strip()
    if search:
        clauses.append(
            or_(
                Bug.title.icontains(search, autoescape=True),
                Bug.description.icontains(search, autoescape=True),
                Bug.bug_number.icontains(search, autoescape=True),
            )
        )

    if not clauses:
        return true()
    return and_(*clauses)
