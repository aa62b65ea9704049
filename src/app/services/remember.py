"""Remember-me tokens for re-establishing a session without credentials."""

import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

from app.core.exceptions import InvalidToken, TokenExpired
from app.core.security import generate_remember_token, hash_token
from app.core.store import Clock, utcnow
from app.models.remember_token import RememberToken
from app.models.user import User
from app.repositories.remember_token import RememberTokenRepository
from app.repositories.user import UserRepository

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


class RememberTokenService:
    """Issues and redeems remember tokens. One active token per user."""

    def __init__(
        self,
        token_repo: RememberTokenRepository,
        user_repo: UserRepository,
        lifetime: timedelta = timedelta(days=30),
        clock: Clock = utcnow,
    ):
        self.token_repo = token_repo
        self.user_repo = user_repo
        self.lifetime = lifetime
        self.clock = clock

    async def issue(self, user_id: UUID) -> str:
        """
        Replace any existing token for the user with a new one.

        Returns:
            The plaintext token; only its digest is stored
        """
        token = generate_remember_token()
        await self.token_repo.delete_for_user(user_id)
        await self.token_repo.create(
            RememberToken(
                user_id=user_id,
                token_hash=hash_token(token),
                expires_at=self.clock() + self.lifetime,
            )
        )
        logger.info("Remember token issued", extra={"user_id": str(user_id)})
        return token

    async def redeem(self, token: str) -> User:
        """
        Resolve a token to its user.

        Raises:
            InvalidToken: Unknown or superseded token
            TokenExpired: Token past its expiry (the record is deleted)
        """
        record = await self.token_repo.get_by_hash(hash_token(token))
        if record is None:
            raise InvalidToken()

        if _as_utc(record.expires_at) <= self.clock():
            await self.token_repo.delete(record.id)
            logger.info("Expired remember token removed", extra={"user_id": str(record.user_id)})
            raise TokenExpired()

        user = await self.user_repo.get_by_id(record.user_id)
        if user is None:
            raise InvalidToken()
        return user
