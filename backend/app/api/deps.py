from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app import crud, models
from app.db.session import get_db
from app.services.access import has_access, is_owner
from app.utils.security import TokenDecodeError, decode_access_token

log = logger.bind(component="auth")

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def _resolve_user(session: AsyncSession, token: str) -> models.User:
    try:
        token_data = decode_access_token(token)
    except TokenDecodeError as e:
        raise _unauthorized(str(e))

    user = await crud.user.get(session, id=token_data.sub)
    if not user:
        log.warning(f"User not found for token subject {token_data.sub}")
        raise _unauthorized("Token is not valid")
    if not user.is_active:
        raise _unauthorized("Account is deactivated")
    return user


async def get_current_user(
    session: AsyncSession = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> models.User:
    """
    Resolve the user behind the bearer token, or fail with 401.
    """
    if credentials is None or not credentials.credentials:
        raise _unauthorized("No token, authorization denied")
    return await _resolve_user(session, credentials.credentials)


async def get_current_user_optional(
    session: AsyncSession = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[models.User]:
    """
    Resolve the user behind the bearer token if there is a valid one.
    """
    if credentials is None or not credentials.credentials:
        return None
    try:
        return await _resolve_user(session, credentials.credentials)
    except HTTPException:
        log.debug("Ignoring invalid token on optional auth route")
        return None


async def get_accessible_project(
    project_id: UUID,
    session: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> models.Project:
    """
    Load a project the current user may read (creator or team member).
    """
    project = await crud.project.get(session, id=project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    if not has_access(current_user, project):
        log.info(f"Access denied for user {current_user.id} to project {project_id}")
        raise HTTPException(status_code=403, detail="Access denied")
    return project


async def get_owned_project(
    project_id: UUID,
    session: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> models.Project:
    """
    Load a project the current user owns.
    """
    project = await crud.project.get(session, id=project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    if not is_owner(current_user, project):
        raise HTTPException(
            status_code=403, detail="Only the project creator can modify the project"
        )
    return project
