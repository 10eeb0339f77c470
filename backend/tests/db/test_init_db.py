import pytest

from app import crud
from app.core.config import Settings
from app.db.init_db import init_db


@pytest.mark.asyncio
async def test_init_db_creates_admin_once(db_session):
    config = Settings(FIRST_ADMIN_EMAIL="Root@Example.com", FIRST_ADMIN_PASSWORD="s3cret-admin")

    admin = await init_db(db_session, config=config)
    again = await init_db(db_session, config=config)

    assert admin is not None
    assert admin.role == "admin"
    assert admin.email == "root@example.com"
    assert again is None
    authenticated = await crud.user.authenticate(
        db_session, email="root@example.com", password="s3cret-admin"
    )
    assert authenticated is not None
    assert authenticated.id == admin.id


@pytest.mark.asyncio
async def test_init_db_skips_when_users_exist(register_user, db_session):
    await register_user("first")

    assert await init_db(db_session) is None
