"""Local profile cache with read-through reads and write-behind writes.

The cache holds a denormalized copy of the profile list plus the time it was
last refreshed from the API. It expires by age only: within the freshness
window it may serve data that has since changed or been deleted remotely.
"""

import time
from datetime import datetime
from typing import Any, Callable, Mapping

import structlog
from pydantic import TypeAdapter, ValidationError

from client.api_client import ApiError, NetworkError, ProfileApiClient
from client.models import LOCAL_ID_PREFIX, ApiResponse, FieldError, Profile
from client.storage import KeyValueStore
from domain.entities.profile import normalize_email
from domain.validation import normalize_profile, validate_profile

logger = structlog.get_logger()

PROFILES_KEY = "profiles_cache"
PROFILES_TIMESTAMP_KEY = "profiles_cache_timestamp"
PENDING_DELETES_KEY = "profiles_pending_deletes"

# Freshness window in milliseconds (five minutes).
CACHE_DURATION = 5 * 60 * 1000

_profile_list = TypeAdapter(list[Profile])


def is_unavailable(exc: Exception) -> bool:
    """True for failures that mean "the API is not answering right now"."""
    return isinstance(exc, NetworkError) or (isinstance(exc, ApiError) and exc.is_server_error)


class ProfileCache:
    """Profile list and refresh timestamp kept in a ``KeyValueStore``."""

    def __init__(
        self,
        store: KeyValueStore,
        clock: Callable[[], float] = time.time,
        ttl_ms: int = CACHE_DURATION,
    ) -> None:
        self._store = store
        self._clock = clock
        self._ttl_ms = ttl_ms

    def now_ms(self) -> int:
        return int(self._clock() * 1000)

    def profiles(self) -> list[Profile] | None:
        """Cached profiles regardless of age, or None if nothing is cached."""
        raw = self._store.get(PROFILES_KEY)
        if raw is None:
            return None
        try:
            return _profile_list.validate_python(raw)
        except ValidationError:
            logger.warning("cache_unreadable", key=PROFILES_KEY)
            return None

    def is_fresh(self) -> bool:
        timestamp = self._store.get(PROFILES_TIMESTAMP_KEY)
        if not isinstance(timestamp, (int, float)):
            return False
        return self.now_ms() - timestamp <= self._ttl_ms

    def fresh_profiles(self) -> list[Profile] | None:
        """Cached profiles if they are within the freshness window."""
        if not self.is_fresh():
            return None
        return self.profiles()

    def find(self, email: str, *, fresh_only: bool = False) -> Profile | None:
        profiles = self.fresh_profiles() if fresh_only else self.profiles()
        normalized = normalize_email(email)
        for profile in profiles or []:
            if profile.email == normalized:
                return profile
        return None

    def replace(self, profiles: list[Profile]) -> None:
        """Swap in a freshly fetched list and reset the refresh timestamp.

        Unsynced local records win over fetched records with the same email,
        and emails with a queued deletion are dropped, so a refresh cannot
        undo pending local changes.
        """
        pending_deletes = set(self.pending_deletes())
        unsynced = {p.email: p for p in self.pending_profiles()}
        merged = [
            unsynced.pop(p.email, p) for p in profiles if p.email not in pending_deletes
        ]
        self._write(merged + list(unsynced.values()))
        self._store.set(PROFILES_TIMESTAMP_KEY, self.now_ms())

    def upsert(self, profile: Profile) -> None:
        """Insert or replace one record by email, keeping the refresh timestamp."""
        profiles = self.profiles() or []
        for index, existing in enumerate(profiles):
            if existing.email == profile.email:
                profiles[index] = profile
                break
        else:
            profiles.append(profile)
        self._write(profiles)
        if self._store.get(PROFILES_TIMESTAMP_KEY) is None:
            # A partial list must not pass for a full refresh.
            self._store.set(PROFILES_TIMESTAMP_KEY, 0)

    def remove(self, email: str) -> None:
        normalized = normalize_email(email)
        profiles = self.profiles()
        if profiles is None:
            return
        self._write([p for p in profiles if p.email != normalized])

    def pending_profiles(self) -> list[Profile]:
        """Records created or edited while offline and not yet synced."""
        return [p for p in self.profiles() or [] if p.is_local]

    def pending_deletes(self) -> list[str]:
        raw = self._store.get(PENDING_DELETES_KEY)
        return [str(email) for email in raw] if isinstance(raw, list) else []

    def queue_delete(self, email: str) -> None:
        normalized = normalize_email(email)
        pending = self.pending_deletes()
        if normalized not in pending:
            pending.append(normalized)
            self._store.set(PENDING_DELETES_KEY, pending)

    def discard_pending_delete(self, email: str) -> None:
        normalized = normalize_email(email)
        pending = self.pending_deletes()
        if normalized in pending:
            pending.remove(normalized)
            self._store.set(PENDING_DELETES_KEY, pending)

    def clear(self) -> None:
        self._store.delete(PROFILES_KEY)
        self._store.delete(PROFILES_TIMESTAMP_KEY)
        self._store.delete(PENDING_DELETES_KEY)

    def _write(self, profiles: list[Profile]) -> None:
        self._store.set(PROFILES_KEY, [p.to_json() for p in profiles])


class CachedProfileService:
    """Profile operations that go through the local cache.

    Reads prefer a fresh cache and fall back to a stale one when the API is
    unavailable. Writes always try the API first; when it is unavailable the
    change is kept locally and reported as queued for sync.
    """

    def __init__(self, api: ProfileApiClient, cache: ProfileCache) -> None:
        self._api = api
        self._cache = cache

    @property
    def cache(self) -> ProfileCache:
        return self._cache

    async def get_all_profiles(self) -> ApiResponse[list[Profile]]:
        cached = self._cache.fresh_profiles()
        if cached is not None:
            logger.debug("profiles_from_cache", count=len(cached))
            return ApiResponse[list[Profile]](
                success=True,
                message="Profiles loaded from cache",
                data=cached,
                count=len(cached),
            )

        try:
            return await self.refresh()
        except (ApiError, NetworkError) as e:
            if not is_unavailable(e):
                raise
            stale = self._cache.profiles()
            if stale is None:
                raise
            logger.warning("profiles_from_stale_cache", count=len(stale), error=str(e))
            return ApiResponse[list[Profile]](
                success=True,
                message="Profiles loaded from cache (offline mode)",
                data=stale,
                count=len(stale),
            )

    async def refresh(self) -> ApiResponse[list[Profile]]:
        """Fetch every profile from the API and replace the cache."""
        response = await self._api.get_all_profiles()
        self._cache.replace(response.data or [])
        logger.debug("profiles_cached", count=len(response.data or []))
        profiles = self._cache.profiles() or []
        return response.model_copy(update={"data": profiles, "count": len(profiles)})

    async def get_profile_by_email(self, email: str) -> ApiResponse[Profile]:
        cached = self._cache.find(email, fresh_only=True)
        if cached:
            return ApiResponse[Profile](
                success=True, message="Profile loaded from cache", data=cached
            )

        try:
            response = await self._api.get_profile_by_email(normalize_email(email))
        except (ApiError, NetworkError) as e:
            if not is_unavailable(e):
                raise
            stale = self._cache.find(email)
            if stale is None:
                raise
            logger.warning("profile_from_stale_cache", email=stale.email, error=str(e))
            return ApiResponse[Profile](
                success=True, message="Profile loaded from cache (offline mode)", data=stale
            )

        if response.data:
            self._cache.upsert(response.data)
        return response

    async def create_or_update_profile(self, data: Mapping[str, Any]) -> ApiResponse[Profile]:
        try:
            response = await self._api.create_or_update_profile(dict(data))
        except (ApiError, NetworkError) as e:
            if not is_unavailable(e):
                raise
            logger.warning("profile_save_deferred", email=data.get("email"), error=str(e))
            return self._save_locally(data)

        if response.data:
            self._cache.upsert(response.data)
            self._cache.discard_pending_delete(response.data.email)
        return response

    async def delete_profile(self, email: str) -> ApiResponse[None]:
        normalized = normalize_email(email)
        cached = self._cache.find(normalized)

        try:
            response = await self._api.delete_profile(normalized)
        except (ApiError, NetworkError) as e:
            # Removal from the cache is unconditional.
            self._cache.remove(normalized)
            if isinstance(e, ApiError) and e.is_not_found and cached and cached.is_local:
                return ApiResponse[None](
                    success=True, message="Unsynced profile removed locally"
                )
            if not is_unavailable(e):
                raise
            self._cache.queue_delete(normalized)
            logger.warning("profile_delete_deferred", email=normalized, error=str(e))
            return ApiResponse[None](
                success=True, message="Profile removed locally (will sync when online)"
            )

        self._cache.remove(normalized)
        return response

    def clear_cache(self) -> None:
        self._cache.clear()
        logger.info("profile_cache_cleared")

    def _save_locally(self, data: Mapping[str, Any]) -> ApiResponse[Profile]:
        errors = validate_profile(data)
        if errors:
            raise ApiError(
                "Validation failed",
                400,
                [FieldError(field=e.field, message=e.message) for e in errors],
            )

        fields = normalize_profile(data)
        now = datetime.utcnow()
        existing = self._cache.find(fields["email"])
        profile = Profile(
            id=f"{LOCAL_ID_PREFIX}{self._cache.now_ms()}",
            created_at=existing.created_at if existing and existing.created_at else now,
            updated_at=now,
            **fields,
        )
        self._cache.upsert(profile)
        self._cache.discard_pending_delete(profile.email)
        return ApiResponse[Profile](
            success=True,
            message="Profile saved locally (will sync when online)",
            data=profile,
        )
