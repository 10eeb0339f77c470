from typing import Any, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app import crud, models, schemas
from app.api import deps
from app.services.bug_query import BugFilterParams, build_bug_filter

log = logger.bind(component="bugs")

router = APIRouter(prefix="/bugs", tags=["Bugs"])


@router.get("", response_model=List[schemas.Bug])
async def read_bugs(
    status_filter: Optional[str] = Query(None, alias="status"),
    priority: Optional[str] = Query(None),
    project: Optional[str] = Query(None, description="Project ID or 'all'"),
    search: Optional[str] = Query(None, description="Match title, description or bug number"),
    session: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Retrieve bugs, newest first.
    """
    params = BugFilterParams(
        status=status_filter, priority=priority, project=project, search=search
    )
    bugs = await crud.bug.get_multi_filtered(session, where=build_bug_filter(params))
    log.debug(f"Fetched {len(bugs)} bugs")
    return bugs


@router.get("/{bug_id}", response_model=schemas.Bug)
async def read_bug(
    bug_id: UUID,
    session: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Get bug by ID.
    """
    bug = await crud.bug.get(session, id=bug_id)
    if not bug:
        raise HTTPException(status_code=404, detail="Bug not found")
    return bug


@router.post("", response_model=schemas.Bug, status_code=status.HTTP_201_CREATED)
async def create_bug(
    *,
    bug_in: schemas.BugCreate,
    session: AsyncSession = Depends(deps.get_db),
    current_user: Optional[models.User] = Depends(deps.get_current_user_optional),
) -> Any:
    """
    File a new bug. The bug number is assigned by the server.
    """
    return await crud.bug.create_with_number(session, obj_in=bug_in, reported_by=current_user)


@router.put("/{bug_id}", response_model=schemas.Bug)
async def update_bug(
    *,
    bug_id: UUID,
    bug_in: schemas.BugUpdate,
    session: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Update a bug. Bug number and project cannot be changed.
    """
    bug = await crud.bug.get(session, id=bug_id)
    if not bug:
        raise HTTPException(status_code=404, detail="Bug not found")
    return await crud.bug.update_checked(session, db_obj=bug, obj_in=bug_in)


@router.delete("/{bug_id}", response_model=schemas.BugDeleted)
async def delete_bug(
    *,
    bug_id: UUID,
    session: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Delete a bug.
    """
    bug = await crud.bug.get(session, id=bug_id)
    if not bug:
        raise HTTPException(status_code=404, detail="Bug not found")
    # Serialize before the row goes away
    deleted = schemas.Bug.model_validate(bug)
    await crud.bug.remove(session, id=bug_id)
    log.info(f"Deleted bug {deleted.bug_number}")
    return {"message": "Bug deleted successfully", "deleted_bug": deleted}
