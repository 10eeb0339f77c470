from typing import Optional

from pydantic import BaseModel, UUID4

from app.schemas.user import User


class AuthResponse(BaseModel):
    token: str
    user: User


class TokenPayload(BaseModel):
    sub: Optional[UUID4] = None
    exp: Optional[int] = None
