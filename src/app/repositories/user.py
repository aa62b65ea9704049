"""User repository for credential lookups."""
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import DuplicateEmail
from app.models.user import User
from app.repositories.base import BaseRepository


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository(BaseRepository[User]):
    """Repository for User model with authentication queries.

    Emails are normalized to lowercase before every lookup and insert.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(db, User)

    async def get_by_email(self, email: str) -> User | None:
        """Find user by email address (used for login)."""
        result = await self.db.execute(select(User).where(User.email == normalize_email(email)))
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        """Check if email is already registered."""
        result = await self.db.execute(select(User.id).where(User.email == normalize_email(email)))
        return result.scalar_one_or_none() is not None

    async def create(self, obj: User) -> User:
        """Insert a user.

        Raises:
            DuplicateEmail: If the unique email constraint is violated
        """
        obj.email = normalize_email(obj.email)
        try:
            return await super().create(obj)
        except IntegrityError as exc:
            await self.db.rollback()
            raise DuplicateEmail("Email already registered") from exc
