from typing import Dict, List, Optional
from uuid import UUID

from loguru import logger
from sqlalchemy import ColumnElement, delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.base import CRUDBase
from app.models.bug import Bug
from app.models.project import Project
from app.models.user import User
from app.schemas.bug import BugCreate, BugUpdate
from app.services.bug_types import validate_bug_type
from app.services.numbering import fallback_bug_number, next_bug_number

log = logger.bind(component="bugs")

# Columns an update may not clear
REQUIRED_FIELDS = {
    "title",
    "description",
    "status",
    "priority",
    "severity",
    "steps_to_reproduce",
    "tags",
    "reporter",
}

# Inserts tried before a fallback bug number clash is reported
MAX_FALLBACK_ATTEMPTS = 5


def _is_bug_number_clash(exc: IntegrityError) -> bool:
    return "bug_number" in str(getattr(exc, "orig", exc))


class CRUDBug(CRUDBase[Bug, BugCreate, BugUpdate]):
    async def get_multi_filtered(
        self, db: AsyncSession, *, where: ColumnElement[bool]
    ) -> List[Bug]:
        """
        Get bugs matching a filter expression, newest first.
        """
        result = await db.execute(
            select(Bug).where(where).order_by(Bug.created_at.desc(), Bug.bug_number.desc())
        )
        return list(result.scalars().all())

    async def create_with_number(
        self,
        db: AsyncSession,
        *,
        obj_in: BugCreate,
        reported_by: Optional[User] = None,
    ) -> Bug:
        """
        Create a bug, validating its type and assigning its bug number.

        A reference to an unknown project is dropped and the bug gets a
        fallback number. A fallback number that another request inserted
        first is replaced by a later one and the insert is retried.
        """
        if obj_in.project_id is not None:
            project = await db.get(Project, obj_in.project_id)
            validate_bug_type(obj_in.type, project)

        bug_number, project = await next_bug_number(db, obj_in.project_id)

        bug_data = obj_in.model_dump(exclude={"project_id", "reporter"})
        reporter = obj_in.reporter or (reported_by.username if reported_by else None)
        reported_by_id = reported_by.id if reported_by else None

        for attempt in range(1, MAX_FALLBACK_ATTEMPTS + 1):
            db_obj = Bug(
                **bug_data,
                project_id=project.id if project else None,
                project_key=project.key if project else None,
                reporter=reporter or "Anonymous",
                reported_by_id=reported_by_id,
                bug_number=bug_number,
            )
            db.add(db_obj)
            try:
                await db.commit()
                break
            except IntegrityError as e:
                await db.rollback()
                retryable = project is None and _is_bug_number_clash(e)
                if not retryable or attempt == MAX_FALLBACK_ATTEMPTS:
                    raise
                log.warning(f"Bug number {bug_number} taken concurrently, retrying")
                bug_number = await fallback_bug_number(db, after=bug_number)

        log.info(f"Created bug {bug_number} (project={db_obj.project_key})")
        return await self.get(db, id=db_obj.id)

    async def update_checked(self, db: AsyncSession, *, db_obj: Bug, obj_in: BugUpdate) -> Bug:
        """
        Update a bug, validating a new type against the bug's project.
        """
        update_data = {
            field: value
            for field, value in obj_in.model_dump(exclude_unset=True).items()
            if value is not None or field not in REQUIRED_FIELDS
        }
        if update_data.get("type") and db_obj.project_id is not None:
            project = await db.get(Project, db_obj.project_id)
            validate_bug_type(update_data["type"], project)
        return await self.update(db, db_obj=db_obj, obj_in=update_data)

    async def remove_by_project(self, db: AsyncSession, *, project_id: UUID) -> int:
        result = await db.execute(delete(Bug).where(Bug.project_id == project_id))
        return result.rowcount or 0

    async def count_by_field(
        self, db: AsyncSession, *, project_id: UUID, field: str
    ) -> Dict[str, int]:
        """
        Count a project's bugs grouped by one column.
        """
        column = getattr(Bug, field)
        result = await db.execute(
            select(column, func.count(Bug.id))
            .where(Bug.project_id == project_id)
            .group_by(column)
        )
        return {value: count for value, count in result.all() if value is not None}

    async def count_by_project(
        self, db: AsyncSession, *, project_ids: List[UUID]
    ) -> Dict[UUID, Dict[str, int]]:
        """
        Count bugs per project, split by status, for many projects at once.
        """
        if not project_ids:
            return {}
        result = await db.execute(
            select(Bug.project_id, Bug.status, func.count(Bug.id))
            .where(Bug.project_id.in_(project_ids))
            .group_by(Bug.project_id, Bug.status)
        )
        counts: Dict[UUID, Dict[str, int]] = {}
        for project_id, status, count in result.all():
            counts.setdefault(project_id, {})[status] = count
        return counts

    async def count_for_project(self, db: AsyncSession, *, project_id: UUID) -> int:
        result = await db.execute(
            select(func.count(Bug.id)).where(Bug.project_id == project_id)
        )
        return result.scalar_one()


bug = CRUDBug(Bug)
