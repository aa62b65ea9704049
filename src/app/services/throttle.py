"""Failed-login throttling per (email, client origin).

After ``max_attempts`` consecutive failures the pair is locked until
``lockout`` has elapsed since the *last* failure (a sliding window). A
successful login clears the record.
"""

import logging
import math
from datetime import timedelta

from app.core.exceptions import TooManyAttempts
from app.core.store import Clock, KeyValueStore, utcnow

logger = logging.getLogger(__name__)

ATTEMPT_KEY_PREFIX = "login-attempts:"


class LoginThrottle:
    def __init__(
        self,
        store: KeyValueStore,
        max_attempts: int = 5,
        lockout: timedelta = timedelta(minutes=15),
        clock: Clock = utcnow,
    ):
        self.store = store
        self.max_attempts = max_attempts
        self.lockout = lockout
        self.clock = clock

    @staticmethod
    def key(email: str, origin: str | None) -> str:
        return f"{ATTEMPT_KEY_PREFIX}{email.strip().lower()}|{origin or 'unknown'}"

    async def record_failure(self, email: str, origin: str | None) -> int:
        """Count one failed attempt. Returns the consecutive failure count."""
        key = self.key(email, origin)
        while True:
            current = await self.store.get(key)
            now = self.clock().timestamp()
            count = 1
            if current is not None and now - current["last_attempt"] < self.lockout.total_seconds():
                count = current["count"] + 1
            # Records outlive the lockout window slightly so expiry never races the check.
            if await self.store.compare_and_set(
                key, current, {"count": count, "last_attempt": now}, ttl=self.lockout * 2
            ):
                break
        if count >= self.max_attempts:
            logger.warning("Login locked after repeated failures", extra={"attempts": count})
        return count

    async def check(self, email: str, origin: str | None) -> float | None:
        """Return remaining lockout seconds, or None when attempts are allowed."""
        key = self.key(email, origin)
        record = await self.store.get(key)
        if record is None:
            return None
        elapsed = self.clock().timestamp() - record["last_attempt"]
        window = self.lockout.total_seconds()
        if elapsed >= window:
            await self.store.delete(key)
            return None
        if record["count"] >= self.max_attempts:
            return window - elapsed
        return None

    async def ensure_allowed(self, email: str, origin: str | None) -> None:
        """
        Raises:
            TooManyAttempts: If the (email, origin) pair is locked out
        """
        remaining = await self.check(email, origin)
        if remaining is not None:
            minutes = max(1, math.ceil(remaining / 60))
            raise TooManyAttempts(
                retry_after=remaining,
                message=f"Too many login attempts. Please try again in {minutes} minutes.",
            )

    async def clear(self, email: str, origin: str | None) -> None:
        await self.store.delete(self.key(email, origin))
