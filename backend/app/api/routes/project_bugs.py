from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import and_
from sqlalchemy.ext.asyncio import AsyncSession

from app import crud, models, schemas
from app.api import deps
from app.models.bug import Bug
from app.services.bug_query import BugFilterParams, build_bug_filter

# Nested under /projects, shares the prefix with the projects router
router = APIRouter(prefix="/projects", tags=["Project Bugs"])


@router.get("/{project_id}/bugs", response_model=schemas.ProjectBugs)
async def read_project_bugs(
    status_filter: Optional[str] = Query(None, alias="status"),
    priority: Optional[str] = Query(None),
    bug_type: Optional[str] = Query(None, alias="type"),
    search: Optional[str] = Query(None),
    project: models.Project = Depends(deps.get_accessible_project),
    session: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Retrieve the bugs of a project the current user can access.
    """
    params = BugFilterParams(
        status=status_filter, priority=priority, type=bug_type, search=search
    )
    where = and_(Bug.project_id == project.id, build_bug_filter(params))
    bugs = await crud.bug.get_multi_filtered(session, where=where)
    return {"project": project, "bugs": bugs, "total_count": len(bugs)}


@router.get("/{project_id}/bugs/stats", response_model=schemas.BugStats)
async def read_project_bug_stats(
    project: models.Project = Depends(deps.get_accessible_project),
    session: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Bug counts of a project grouped by status, priority and type.
    """
    return {
        "status_stats": await crud.bug.count_by_field(session, project_id=project.id, field="status"),
        "priority_stats": await crud.bug.count_by_field(session, project_id=project.id, field="priority"),
        "type_stats": await crud.bug.count_by_field(session, project_id=project.id, field="type"),
        "total_bugs": await crud.bug.count_for_project(session, project_id=project.id),
    }
