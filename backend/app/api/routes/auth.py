from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app import crud, models, schemas
from app.api import deps
from app.utils.security import create_access_token, verify_password

log = logger.bind(component="auth")

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/register", response_model=schemas.AuthResponse, status_code=status.HTTP_201_CREATED
)
async def register(
    *,
    user_in: schemas.UserCreate,
    session: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Register a new user and return an access token.
    """
    existing_user = await crud.user.get_by_email_or_username(
        session, email=user_in.email, username=user_in.username
    )
    if existing_user:
        detail = (
            "Email already registered"
            if existing_user.email == user_in.email.lower()
            else "Username already taken"
        )
        raise HTTPException(status_code=400, detail=detail)

    user = await crud.user.create(session, obj_in=user_in)
    log.info(f"Registered user {user.id} ({user.username})")
    return {"token": create_access_token(user.id), "user": user}


@router.post("/login", response_model=schemas.AuthResponse)
async def login(
    *,
    credentials: schemas.UserLogin,
    session: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Exchange email and password for an access token.
    """
    user = await crud.user.authenticate(
        session, email=credentials.email, password=credentials.password
    )
    if not user:
        log.info(f"Failed login for {credentials.email}")
        raise HTTPException(status_code=400, detail="Invalid credentials")
    if not user.is_active:
        raise HTTPException(status_code=400, detail="Account is deactivated")
    return {"token": create_access_token(user.id), "user": user}


@router.get("/me", response_model=schemas.UserResponse)
async def read_current_user(
    current_user: models.User = Depends(deps.get_current_user),
) -> Any:
    """
    Get the authenticated user.
    """
    return {"user": current_user}


@router.put("/profile", response_model=schemas.UserResponse)
async def update_profile(
    *,
    user_in: schemas.UserUpdate,
    session: AsyncSession = Depends(deps.get_db),
    current_user: models.User = Depends(deps.get_current_user),
) -> Any:
    """
    Update names, username, email or avatar of the authenticated user.
    """
    update_data = user_in.model_dump(exclude_unset=True)

    username = update_data.get("username")
    if username and username != current_user.username:
        if await crud.user.get_by_username(session, username=username):
            raise HTTPException(status_code=400, detail="Username already taken")

    email = update_data.get("email")
    if email:
        update_data["email"] = email = email.lower()
        if email != current_user.email and await crud.user.get_by_email(session, email=email):
            raise HTTPException(status_code=400, detail="Email already registered")

    # Blank values leave the field unchanged; avatar may be cleared explicitly
    update_data = {
        field: value
        for field, value in update_data.items()
        if value or field == "avatar"
    }
    user = await crud.user.update(session, db_obj=current_user, obj_in=update_data)
    return {"user": user}


@router.put("/password")
async def change_password(
    *,
    password_in: schemas.PasswordChange,
    session: AsyncSession = Depends(deps.get_db),
    current_user: models.User = Depends(deps.get_current_user),
) -> Any:
    """
    Change the authenticated user's password.
    """
    if not verify_password(password_in.current_password, current_user.hashed_password):
        raise HTTPException(status_code=400, detail="Current password is incorrect")
    await crud.user.set_password(session, db_obj=current_user, password=password_in.new_password)
    log.info(f"Password changed for user {current_user.id}")
    return {"message": "Password updated successfully"}
