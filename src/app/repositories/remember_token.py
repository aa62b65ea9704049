"""Remember-token repository."""
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.remember_token import RememberToken
from app.repositories.base import BaseRepository


class RememberTokenRepository(BaseRepository[RememberToken]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, RememberToken)

    async def get_by_hash(self, token_hash: str) -> RememberToken | None:
        result = await self.db.execute(
            select(RememberToken).where(RememberToken.token_hash == token_hash)
        )
        return result.scalar_one_or_none()

    async def delete_for_user(self, user_id: UUID) -> None:
        """Remove every token of a user (not committed)."""
        await self.db.execute(
            delete(RememberToken)
            .where(RememberToken.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
