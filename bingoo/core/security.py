from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from pydantic import BaseModel, EmailStr, ValidationError

from bingoo.config import settings
from bingoo.core.exceptions import AuthenticationError
from bingoo.models.user import UserRole


class Identity(BaseModel):
    """Caller identity taken from the auth service token."""

    user_id: int
    email: Optional[EmailStr] = None
    role: UserRole = UserRole.USER

    @property
    def is_admin(self) -> bool:
        return UserRole.is_admin(self.role)


class TokenPayload(BaseModel):
    sub: str  # user id
    email: Optional[EmailStr] = None
    role: UserRole = UserRole.USER


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    if "sub" in to_encode:
        to_encode["sub"] = str(to_encode["sub"])
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_identity(token: str) -> Identity:
    """Validate a bearer token and return the identity it carries."""
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
        token_data = TokenPayload.model_validate(payload)
        return Identity(
            user_id=int(token_data.sub),
            email=token_data.email,
            role=token_data.role,
        )
    except (JWTError, ValidationError, ValueError):
        raise AuthenticationError("Invalid authentication credentials")
