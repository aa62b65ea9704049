"""Shared key-value state for sessions, login throttling and rate limits.

Values are JSON-compatible objects. Implementations must make
``compare_and_set`` and ``increment`` atomic so concurrent requests cannot
lose updates.
"""

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from sqlalchemy import delete, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models.kv_entry import KeyValueEntry

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _encode(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"))


class KeyValueStore(ABC):
    """Async key-value store with TTLs and atomic updates."""

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Return the value for key, or None when absent or expired."""

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: timedelta | None = None) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove key. Returns True if a live value was removed."""

    @abstractmethod
    async def compare_and_set(
        self, key: str, expected: Any | None, new: Any, ttl: timedelta | None = None
    ) -> bool:
        """Atomically replace ``expected`` with ``new``.

        ``expected=None`` means the key must be absent. Returns False when the
        current value differs, leaving the store unchanged.
        """

    @abstractmethod
    async def increment(self, key: str, amount: int = 1, ttl: timedelta | None = None) -> int:
        """Atomically add ``amount`` to an integer counter and return the total.

        ``ttl`` is applied only when the counter is created, so a counter
        describes a fixed window starting at its first increment.
        """


@dataclass
class _Entry:
    value: str
    expires_at: datetime | None


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store. Suitable for tests and single-process servers."""

    def __init__(self, clock: Clock = utcnow):
        self._entries: dict[str, _Entry] = {}
        self._lock = asyncio.Lock()
        self._clock = clock

    def _expiry(self, ttl: timedelta | None) -> datetime | None:
        return self._clock() + ttl if ttl is not None else None

    def _live(self, key: str) -> _Entry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at is not None and entry.expires_at <= self._clock():
            del self._entries[key]
            return None
        return entry

    async def get(self, key: str) -> Any | None:
        async with self._lock:
            entry = self._live(key)
            return json.loads(entry.value) if entry else None

    async def set(self, key: str, value: Any, ttl: timedelta | None = None) -> None:
        async with self._lock:
            self._entries[key] = _Entry(_encode(value), self._expiry(ttl))

    async def delete(self, key: str) -> bool:
        async with self._lock:
            entry = self._live(key)
            self._entries.pop(key, None)
            return entry is not None

    async def compare_and_set(
        self, key: str, expected: Any | None, new: Any, ttl: timedelta | None = None
    ) -> bool:
        async with self._lock:
            entry = self._live(key)
            if expected is None:
                if entry is not None:
                    return False
            elif entry is None or entry.value != _encode(expected):
                return False
            self._entries[key] = _Entry(_encode(new), self._expiry(ttl))
            return True

    async def increment(self, key: str, amount: int = 1, ttl: timedelta | None = None) -> int:
        async with self._lock:
            entry = self._live(key)
            if entry is None:
                self._entries[key] = _Entry(_encode(amount), self._expiry(ttl))
                return amount
            total = int(json.loads(entry.value)) + amount
            entry.value = _encode(total)
            return total


class DatabaseKeyValueStore(KeyValueStore):
    """Store backed by the ``kv_entries`` table.

    Shared by every process using the same database. Each call runs in its
    own short session so it never interferes with request transactions.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], clock: Clock = utcnow):
        self._session_factory = session_factory
        self._clock = clock

    def _expiry(self, ttl: timedelta | None) -> datetime | None:
        return self._clock() + ttl if ttl is not None else None

    def _is_live(self, now: datetime):
        return or_(KeyValueEntry.expires_at.is_(None), KeyValueEntry.expires_at > now)

    async def get(self, key: str) -> Any | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(KeyValueEntry.value).where(
                    KeyValueEntry.key == key, self._is_live(self._clock())
                )
            )
            raw = result.scalar_one_or_none()
        return json.loads(raw) if raw is not None else None

    async def set(self, key: str, value: Any, ttl: timedelta | None = None) -> None:
        encoded, expires_at = _encode(value), self._expiry(ttl)
        async with self._session_factory() as session:
            result = await session.execute(
                update(KeyValueEntry)
                .where(KeyValueEntry.key == key)
                .values(value=encoded, expires_at=expires_at)
            )
            if result.rowcount == 0:
                session.add(KeyValueEntry(key=key, value=encoded, expires_at=expires_at))
            try:
                await session.commit()
            except IntegrityError:
                # Another writer inserted the key first; last write wins.
                await session.rollback()
                await session.execute(
                    update(KeyValueEntry)
                    .where(KeyValueEntry.key == key)
                    .values(value=encoded, expires_at=expires_at)
                )
                await session.commit()

    async def delete(self, key: str) -> bool:
        now = self._clock()
        async with self._session_factory() as session:
            live = await session.execute(
                select(KeyValueEntry.key).where(KeyValueEntry.key == key, self._is_live(now))
            )
            existed = live.scalar_one_or_none() is not None
            await session.execute(delete(KeyValueEntry).where(KeyValueEntry.key == key))
            await session.commit()
        return existed

    async def compare_and_set(
        self, key: str, expected: Any | None, new: Any, ttl: timedelta | None = None
    ) -> bool:
        now = self._clock()
        encoded, expires_at = _encode(new), self._expiry(ttl)
        async with self._session_factory() as session:
            if expected is not None:
                result = await session.execute(
                    update(KeyValueEntry)
                    .where(
                        KeyValueEntry.key == key,
                        KeyValueEntry.value == _encode(expected),
                        self._is_live(now),
                    )
                    .values(value=encoded, expires_at=expires_at)
                )
                await session.commit()
                return result.rowcount == 1

            # Absent-only insert: clear an expired leftover, then rely on the
            # primary key to reject a concurrent insert.
            await session.execute(
                delete(KeyValueEntry).where(
                    KeyValueEntry.key == key,
                    KeyValueEntry.expires_at.is_not(None),
                    KeyValueEntry.expires_at <= now,
                )
            )
            session.add(KeyValueEntry(key=key, value=encoded, expires_at=expires_at))
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                return False
            return True

    async def increment(self, key: str, amount: int = 1, ttl: timedelta | None = None) -> int:
        while True:
            current = await self.get(key)
            if current is None:
                if await self.compare_and_set(key, None, amount, ttl):
                    return amount
                continue
            total = int(current) + amount
            if await self._replace_keep_ttl(key, current, total):
                return total

    async def _replace_keep_ttl(self, key: str, expected: Any, new: Any) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(
                update(KeyValueEntry)
                .where(
                    KeyValueEntry.key == key,
                    KeyValueEntry.value == _encode(expected),
                    self._is_live(self._clock()),
                )
                .values(value=_encode(new))
            )
            await session.commit()
            return result.rowcount == 1

    async def purge_expired(self) -> int:
        """Delete expired rows. Returns the number removed."""
        async with self._session_factory() as session:
            result = await session.execute(
                delete(KeyValueEntry).where(
                    KeyValueEntry.expires_at.is_not(None),
                    KeyValueEntry.expires_at <= self._clock(),
                )
            )
            await session.commit()
        if result.rowcount:
            logger.info("Purged expired state entries", extra={"count": result.rowcount})
        return result.rowcount
