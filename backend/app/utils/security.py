from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union

import bcrypt
import jwt
from pydantic import ValidationError

from app.core.config import settings
from app.schemas.token import TokenPayload


class TokenDecodeError(Exception):
    """Raised when a bearer token cannot be decoded or has expired."""


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"), hashed_password.encode("utf-8")
        )
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(
    subject: Union[str, Any], expires_delta: Optional[timedelta] = None
) -> str:
    """
    Issue a signed JWT whose ``sub`` claim identifies the user.
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode = {"exp": expire, "sub": str(subject)}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> TokenPayload:
    """
    Verify signature and expiry of a token and return its payload.

    Raises:
        TokenDecodeError: if the token is malformed, forged or expired
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        token_data = TokenPayload(**payload)
    except jwt.ExpiredSignatureError as e:
        raise TokenDecodeError("Token has expired") from e
    except (jwt.InvalidTokenError, ValidationError) as e:
        raise TokenDecodeError("Token is not valid") from e
    if token_data.sub is None:
        raise TokenDecodeError("Token is not valid")
    return token_data
