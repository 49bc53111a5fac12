import logging
from typing import Optional

from sqlalchemy.orm import Session

from bingoo.core.exceptions import UserNotFoundError
from bingoo.core.regions import resolve_region
from bingoo.database.session import atomic
from bingoo.models.user import UserRole
from bingoo.repositories.user_repository import UserRepository
from bingoo.schemas.user import User, UserListResponse

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)

    def get_user(self, user_id: int) -> User:
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise UserNotFoundError(user_id)
        return user

    def list_users(
        self, query: Optional[str] = None, limit: int = 20, offset: int = 0
    ) -> UserListResponse:
        users, total = self.user_repo.search(query=query, limit=limit, offset=offset)
        return UserListResponse(
            users=users, total_count=total, has_next=offset + len(users) < total
        )

    def create_user(
        self,
        email: str,
        name: Optional[str] = None,
        country: Optional[str] = None,
        role: UserRole = UserRole.USER,
    ) -> User:
        """Profile row for an identity issued by the auth service."""
        country = country.strip().upper() if country else None
        with atomic(self.db):
            user = self.user_repo.create(
                email=email,
                name=name,
                country=country,
                region_id=resolve_region(country).region_id if country else None,
                role=role.value,
            )
        logger.info(f"Created user {user.id} ({email})")
        return user

    def set_role(self, email: str, role: UserRole) -> User:
        user = self.user_repo.get_by_email(email)
        if not user:
            raise UserNotFoundError(email)
        with atomic(self.db):
            user = self.user_repo.update(user.id, role=role.value)
        logger.info(f"User {user.id} role set to {role.value}")
        return user
