from sqlalchemy import Boolean, Column, Enum, String

from app.models.base import BaseModel

USER_ROLES = ("user", "admin")


class User(BaseModel):
    """User model for authentication and authorization."""

    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    username = Column(String(30), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(Enum(*USER_ROLES, name="user_role"), default="user", nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    avatar = Column(String(2048), nullable=True)

    def __repr__(self):
        return f"<User {self.username}>"
