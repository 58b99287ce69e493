"""
campus_gate.client.cache

Advisory role cache for optimistic UI paint.

Responsibilities:
- Remember the last resolved role for exactly one principal, with an expiry.
- Refuse (and clear) entries that are expired, bound to another principal, or
  unreadable.

The cache never grants anything: the edge gate and every destructive check read
the Role Store directly.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from pydantic import BaseModel, ConfigDict, ValidationError

from campus_gate.auth.roles import Role
from campus_gate.client.storage import JsonFileStorage, KeyValueStorage, MemoryStorage, StorageError
from campus_gate.observability.logging import get_logger
from campus_gate.settings import Settings

log = get_logger(__name__)

ROLE_CACHE_KEY = "auth_role_cache"
DEFAULT_TTL = timedelta(minutes=5)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class RoleCacheRecord(BaseModel):
    # Role, principal and expiry are stored together and invalidated together.
    model_config = ConfigDict(frozen=True, extra="forbid")

    principal_id: str
    role: Role
    expiry: datetime


class RoleCache:
    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._storage = storage
        self._ttl = ttl
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings) -> RoleCache:
        storage: KeyValueStorage
        if settings.role_cache_path:
            storage = JsonFileStorage(settings.role_cache_path)
        else:
            storage = MemoryStorage()
        return cls(storage, ttl=settings.role_cache_ttl)

    def get(self, principal_id: str) -> Role | None:
        record = self._read()
        if record is None:
            return None
        if record.principal_id != principal_id or self._clock() >= record.expiry:
            self.clear()
            return None
        return record.role

    def set(self, principal_id: str, role: Role) -> None:
        record = RoleCacheRecord(
            principal_id=principal_id,
            role=role,
            expiry=self._clock() + self._ttl,
        )
        try:
            self._storage.set(ROLE_CACHE_KEY, record.model_dump_json())
        except StorageError as e:
            log.warning("role_cache_write_failed", error=str(e))

    def clear(self) -> None:
        try:
            self._storage.delete(ROLE_CACHE_KEY)
        except StorageError as e:
            log.warning("role_cache_clear_failed", error=str(e))

    def _read(self) -> RoleCacheRecord | None:
        try:
            raw = self._storage.get(ROLE_CACHE_KEY)
        except StorageError as e:
            log.warning("role_cache_read_failed", error=str(e))
            return None
        if raw is None:
            return None
        try:
            record = RoleCacheRecord.model_validate_json(raw)
        except ValidationError:
            log.warning("role_cache_record_invalid")
            self.clear()
            return None
        if record.expiry.tzinfo is None:
            # Naive timestamps cannot be compared safely; treat as stale.
            self.clear()
            return None
        return record


# --- Module Notes -----------------------------------------------------------
# One key, one JSON record: a reader can never observe a role paired with another
# principal's id or expiry.
