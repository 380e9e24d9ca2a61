"""Replays offline changes against the API once it is reachable again."""

import asyncio
from dataclasses import dataclass, field

import structlog

from client.api_client import ApiError, NetworkError, ProfileApiClient
from client.cache import CachedProfileService

logger = structlog.get_logger()


@dataclass
class SyncReport:
    """Outcome of one sync pass."""

    skipped: bool = False
    synced: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    refreshed: bool = False

    @property
    def message(self) -> str:
        if self.skipped:
            return "Offline, sync skipped"
        if not (self.synced or self.deleted or self.failed):
            return "No local changes to sync"
        parts = [f"{len(self.synced)} saved", f"{len(self.deleted)} deleted"]
        if self.failed:
            parts.append(f"{len(self.failed)} failed")
        return "Synced local changes: " + ", ".join(parts)


class SyncCoordinator:
    """Pushes queued local writes to the API and refreshes the cache.

    Replaying is safe to repeat: creates go through the API's upsert on
    email, and a queued delete that meets a 404 counts as done.
    """

    def __init__(self, api: ProfileApiClient, service: CachedProfileService) -> None:
        self._api = api
        self._service = service

    async def is_online(self) -> bool:
        try:
            await self._api.health()
        except (ApiError, NetworkError):
            return False
        return True

    async def sync(self) -> SyncReport:
        if not await self.is_online():
            logger.info("sync_skipped_offline")
            return SyncReport(skipped=True)

        report = SyncReport()
        cache = self._service.cache

        for email in cache.pending_deletes():
            try:
                await self._api.delete_profile(email)
            except ApiError as e:
                if not e.is_not_found:
                    logger.warning("sync_delete_failed", email=email, error=e.message)
                    report.failed.append(email)
                    continue
            except NetworkError as e:
                logger.warning("sync_delete_failed", email=email, error=e.message)
                report.failed.append(email)
                continue
            cache.discard_pending_delete(email)
            report.deleted.append(email)

        pending = cache.pending_profiles()
        if pending:
            logger.info("sync_started", pending=len(pending))
        for profile in pending:
            try:
                response = await self._api.create_or_update_profile(profile.to_input())
            except (ApiError, NetworkError) as e:
                logger.warning("sync_profile_failed", email=profile.email, error=str(e))
                report.failed.append(profile.email)
                continue
            if response.data:
                cache.upsert(response.data)
            report.synced.append(profile.email)
            logger.info("sync_profile_done", email=profile.email)

        try:
            await self._service.refresh()
            report.refreshed = True
        except (ApiError, NetworkError) as e:
            logger.warning("sync_refresh_failed", error=str(e))

        logger.info(
            "sync_completed",
            synced=len(report.synced),
            deleted=len(report.deleted),
            failed=len(report.failed),
        )
        return report

    async def watch(self, interval: float, stop: asyncio.Event | None = None) -> None:
        """Sync on start and on every offline-to-online transition.

        Runs until ``stop`` is set.
        """
        stop = stop or asyncio.Event()
        was_online: bool | None = None

        while not stop.is_set():
            online = await self.is_online()
            if online and was_online is not True:
                if was_online is False:
                    logger.info("connectivity_restored")
                await self.sync()
            elif not online and was_online is not False:
                logger.info("connectivity_lost")
            was_online = online

            try:
                await asyncio.wait_for(stop.wait(), timeout=interval)
            except asyncio.TimeoutError:
                pass
