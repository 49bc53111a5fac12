from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from bingoo.core.exceptions import AuthenticationError, AuthorizationError, UserNotFoundError
from bingoo.core.security import Identity, decode_identity
from bingoo.database.session import get_db
from bingoo.repositories.user_repository import UserRepository
from bingoo.schemas.user import User as UserSchema

# Bearer token scheme; missing tokens are reported as AUTH_001, not 403
security = HTTPBearer(auto_error=False)


def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Identity:
    """Required authentication: a valid bearer token from the auth service."""
    if not credentials:
        raise AuthenticationError("Authentication required")
    return decode_identity(credentials.credentials)


def require_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    """Endpoints restricted to the ADMIN role."""
    if not identity.is_admin:
        raise AuthorizationError("Admin access required")
    return identity


def get_current_user(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> UserSchema:
    """Load the stored profile of the authenticated caller."""
    user = UserRepository(db).get_by_id(identity.user_id)
    if not user:
        raise UserNotFoundError(identity.user_id)
    if not user.is_active:
        raise AuthorizationError("Inactive user account")
    return user
