import asyncio
from typing import Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.core.config import Settings, settings as default_settings
from app.core.logs import setup_logging
from app.db.session import AsyncSessionLocal
from app.models.user import User
from app.utils.security import get_password_hash


async def init_db(
    db: Optional[AsyncSession] = None, config: Settings = default_settings
) -> Optional[User]:
    """
    Initialize database with initial data.

    Creates the first admin account when no user exists yet and returns it.
    """
    owns_session = db is None
    if owns_session:
        db = AsyncSessionLocal()
    try:
        # Check if we already have users
        result = await db.execute(select(User).limit(1))
        user = result.scalars().first()

        # Create initial admin if no users exist
        if user:
            logger.info("Users already present, skipping admin creation")
            return None

        admin_user = User(
            first_name="System",
            last_name="Administrator",
            username=config.FIRST_ADMIN_USERNAME,
            email=config.FIRST_ADMIN_EMAIL.lower(),
            hashed_password=get_password_hash(config.FIRST_ADMIN_PASSWORD),
            role="admin",
        )
        db.add(admin_user)
        await db.commit()
        logger.info(f"Created initial admin user {admin_user.username}")
        return admin_user
    except Exception as e:
        logger.error(f"Error initializing database: {e}")
        raise
    finally:
        if owns_session:
            await db.close()


if __name__ == "__main__":
    setup_logging()
    asyncio.run(init_db())
