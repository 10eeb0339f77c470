from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.base import CRUDBase
from app.models.user import User
from app.schemas.user import UserCreate, UserUpdate
from app.utils.security import get_password_hash, verify_password


class CRUDUser(CRUDBase[User, UserCreate, UserUpdate]):
    async def get_by_email(self, db: AsyncSession, *, email: str) -> Optional[User]:
        result = await db.execute(select(User).filter(User.email == email.lower()))
        return result.scalars().first()

    async def get_by_username(self, db: AsyncSession, *, username: str) -> Optional[User]:
        result = await db.execute(select(User).filter(User.username == username))
        return result.scalars().first()

    async def get_by_email_or_username(
        self, db: AsyncSession, *, email: str, username: str
    ) -> Optional[User]:
        result = await db.execute(
            select(User).filter(or_(User.email == email.lower(), User.username == username))
        )
        return result.scalars().first()

    async def get_multi_by_ids(self, db: AsyncSession, *, ids: Sequence[UUID]) -> List[User]:
        """
        Get the users matching the given IDs; unknown IDs are skipped.
        """
        if not ids:
            return []
        result = await db.execute(select(User).filter(User.id.in_(set(ids))))
        return list(result.scalars().all())

    async def create(
        self, db: AsyncSession, *, obj_in: UserCreate, role: str = "user"
    ) -> User:
        db_obj = User(
            first_name=obj_in.first_name,
            last_name=obj_in.last_name,
            username=obj_in.username,
            email=obj_in.email.lower(),
            avatar=obj_in.avatar,
            hashed_password=get_password_hash(obj_in.password),
            role=role,
        )
        db.add(db_obj)
        await db.commit()
        return await self.get(db, id=db_obj.id)

    async def authenticate(
        self, db: AsyncSession, *, email: str, password: str
    ) -> Optional[User]:
        """
        Return the user owning ``email`` if ``password`` matches its hash.
        """
        user = await self.get_by_email(db, email=email)
        if not user:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user

    async def set_password(self, db: AsyncSession, *, db_obj: User, password: str) -> User:
        return await self.update(
            db, db_obj=db_obj, obj_in={"hashed_password": get_password_hash(password)}
        )


user = CRUDUser(User)
