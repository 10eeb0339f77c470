from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app import crud, models, schemas
from app.api import deps
from app.models.bug import OPEN_BUG_STATUSES

log = logger.bind(component="projects")

# Define the router with explicit prefix
router = APIRouter(prefix="/projects", tags=["Projects"])


@router.get("", response_model=List[schemas.ProjectWithCounts])
async def read_projects(
    session: AsyncSession = Depends(deps.get_db),
    current_user: models.User = Depends(deps.get_current_user),
) -> Any:
    """
    Retrieve active projects the current user created or is a member of.
    """
    projects = await crud.project.get_multi_accessible(session, user_id=current_user.id)
    counts = await crud.bug.count_by_project(
        session, project_ids=[project.id for project in projects]
    )

    results = []
    for project in projects:
        by_status = counts.get(project.id, {})
        item = schemas.ProjectWithCounts.model_validate(project)
        item.bug_count = sum(by_status.values())
        item.open_bug_count = sum(by_status.get(s, 0) for s in OPEN_BUG_STATUSES)
        results.append(item)
    log.debug(f"Fetched {len(results)} projects for user {current_user.id}")
    return results


@router.post("", response_model=schemas.Project, status_code=status.HTTP_201_CREATED)
async def create_project(
    *,
    project_in: schemas.ProjectCreate,
    session: AsyncSession = Depends(deps.get_db),
    current_user: models.User = Depends(deps.get_current_user),
) -> Any:
    """
    Create a new project owned by the current user.
    """
    if await crud.project.get_by_key(session, key=project_in.key):
        raise HTTPException(status_code=400, detail="Project key already exists")
    project = await crud.project.create_with_creator(
        session, obj_in=project_in, creator_id=current_user.id
    )
    log.info(f"Project {project.key} created by user {current_user.id}")
    return project


@router.get("/{project_id}", response_model=schemas.ProjectDetail)
async def read_project(
    project: models.Project = Depends(deps.get_accessible_project),
    session: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Get project by ID, with bug counts per status.
    """
    bug_stats = await crud.bug.count_by_field(session, project_id=project.id, field="status")
    detail = schemas.ProjectDetail.model_validate(project)
    detail.bug_stats = bug_stats
    detail.total_bugs = sum(bug_stats.values())
    return detail


@router.put("/{project_id}", response_model=schemas.Project)
async def update_project(
    *,
    project_in: schemas.ProjectUpdate,
    project: models.Project = Depends(deps.get_owned_project),
    session: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Update a project. Only its creator may do this.
    """
    return await crud.project.update_with_members(session, db_obj=project, obj_in=project_in)


@router.delete("/{project_id}")
async def delete_project(
    *,
    project: models.Project = Depends(deps.get_owned_project),
    session: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Delete a project together with all of its bugs.
    """
    removed = await crud.bug.remove_by_project(session, project_id=project.id)
    await crud.project.remove(session, id=project.id)
    log.info(f"Deleted project {project.key} and {removed} bugs")
    return {"message": "Project and associated bugs deleted successfully"}
