from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import BugTrackerError
from app.crud.base import CRUDBase
from app.crud.crud_user import user as crud_user
from app.models.project import Project, project_member
from app.models.user import User
from app.schemas.project import ProjectCreate, ProjectUpdate


class CRUDProject(CRUDBase[Project, ProjectCreate, ProjectUpdate]):
    async def get_by_key(self, db: AsyncSession, *, key: str) -> Optional[Project]:
        result = await db.execute(select(Project).filter(Project.key == key.upper()))
        return result.scalars().first()

    async def get_multi_accessible(
        self, db: AsyncSession, *, user_id: UUID, status: Optional[str] = "active"
    ) -> List[Project]:
        """
        Get projects the user created or is a team member of, newest first.
        """
        member_of = select(project_member.c.project_id).where(
            project_member.c.user_id == user_id
        )
        query = select(Project).filter(
            or_(Project.creator_id == user_id, Project.id.in_(member_of))
        )
        if status:
            query = query.filter(Project.status == status)
        result = await db.execute(query.order_by(Project.created_at.desc()))
        return list(result.scalars().all())

    async def _resolve_members(
        self, db: AsyncSession, member_ids: Sequence[UUID]
    ) -> List[User]:
        members = await crud_user.get_multi_by_ids(db, ids=member_ids)
        missing = set(member_ids) - {member.id for member in members}
        if missing:
            raise BugTrackerError(
                f"Unknown team members: {', '.join(sorted(str(m) for m in missing))}"
            )
        return members

    async def create_with_creator(
        self, db: AsyncSession, *, obj_in: ProjectCreate, creator_id: UUID
    ) -> Project:
        """
        Create a new project owned by ``creator_id``.
        """
        members = await self._resolve_members(db, obj_in.team_members)
        db_obj = Project(
            name=obj_in.name,
            description=obj_in.description,
            key=obj_in.key,
            creator_id=creator_id,
            bug_types=[bug_type.model_dump() for bug_type in obj_in.bug_types],
            team_members=members,
        )
        db.add(db_obj)
        await db.commit()
        return await self.get(db, id=db_obj.id)

    async def update_with_members(
        self, db: AsyncSession, *, db_obj: Project, obj_in: ProjectUpdate
    ) -> Project:
        update_data = obj_in.model_dump(exclude_unset=True, exclude_none=True)
        member_ids = update_data.pop("team_members", None)
        if member_ids is not None:
            db_obj.team_members = await self._resolve_members(db, member_ids)
        return await self.update(db, db_obj=db_obj, obj_in=update_data)


project = CRUDProject(Project)
