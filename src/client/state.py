"""Application state, actions and the reducer that applies them.

State is an immutable ``ProfileState``. Views read it from a ``Store`` that is
passed to them explicitly; every change goes through ``Store.dispatch`` and
the pure ``reduce`` function. Async thunks call the cached service and
dispatch pending/fulfilled/rejected actions around each call.

In-flight requests are never cancelled: when two actions overlap, whichever
response arrives last wins.
"""

import asyncio
from dataclasses import dataclass, replace
from typing import Any, Callable, Mapping, Union

import structlog

from client.api_client import ApiError, NetworkError
from client.cache import CachedProfileService
from client.models import ApiResponse, FieldError, Profile
from client.sync import SyncCoordinator, SyncReport
from domain.entities.profile import normalize_email

logger = structlog.get_logger()

SUCCESS_DISMISS_SECONDS = 4.0
ERROR_DISMISS_SECONDS = 6.0


@dataclass(frozen=True)
class ProfileState:
    profile: Profile | None = None
    profiles: tuple[Profile, ...] = ()
    loading: bool = False
    error: str | None = None
    success: str | None = None
    field_errors: tuple[FieldError, ...] = ()
    last_sync: SyncReport | None = None


# --- Actions ---


@dataclass(frozen=True)
class SaveProfilePending:
    pass


@dataclass(frozen=True)
class SaveProfileFulfilled:
    response: ApiResponse[Profile]


@dataclass(frozen=True)
class SaveProfileRejected:
    message: str
    errors: tuple[FieldError, ...] = ()


@dataclass(frozen=True)
class FetchProfilePending:
    pass


@dataclass(frozen=True)
class FetchProfileFulfilled:
    response: ApiResponse[Profile]


@dataclass(frozen=True)
class FetchProfileRejected:
    message: str


@dataclass(frozen=True)
class FetchProfilesPending:
    pass


@dataclass(frozen=True)
class FetchProfilesFulfilled:
    response: ApiResponse[list[Profile]]


@dataclass(frozen=True)
class FetchProfilesRejected:
    message: str


@dataclass(frozen=True)
class DeleteProfilePending:
    email: str


@dataclass(frozen=True)
class DeleteProfileFulfilled:
    email: str
    message: str = "Profile deleted successfully"


@dataclass(frozen=True)
class DeleteProfileRejected:
    message: str


@dataclass(frozen=True)
class SyncPending:
    pass


@dataclass(frozen=True)
class SyncFulfilled:
    report: SyncReport


@dataclass(frozen=True)
class SyncRejected:
    message: str


@dataclass(frozen=True)
class ClearError:
    pass


@dataclass(frozen=True)
class ClearSuccess:
    pass


@dataclass(frozen=True)
class ClearProfile:
    pass


@dataclass(frozen=True)
class SetProfile:
    profile: Profile


@dataclass(frozen=True)
class ClearProfiles:
    pass


Action = Union[
    SaveProfilePending,
    SaveProfileFulfilled,
    SaveProfileRejected,
    FetchProfilePending,
    FetchProfileFulfilled,
    FetchProfileRejected,
    FetchProfilesPending,
    FetchProfilesFulfilled,
    FetchProfilesRejected,
    DeleteProfilePending,
    DeleteProfileFulfilled,
    DeleteProfileRejected,
    SyncPending,
    SyncFulfilled,
    SyncRejected,
    ClearError,
    ClearSuccess,
    ClearProfile,
    SetProfile,
    ClearProfiles,
]


def reduce(state: ProfileState, action: Action) -> ProfileState:
    """Return the state that results from applying ``action``."""
    # Save (create or update)
    if isinstance(action, SaveProfilePending):
        return replace(state, loading=True, error=None, success=None, field_errors=())
    if isinstance(action, SaveProfileFulfilled):
        saved = action.response.data
        profiles = _upsert(state.profiles, saved) if saved else state.profiles
        return replace(
            state,
            loading=False,
            profile=saved,
            profiles=profiles,
            success=action.response.message,
            error=None,
        )
    if isinstance(action, SaveProfileRejected):
        return replace(
            state,
            loading=False,
            error=action.message,
            success=None,
            field_errors=action.errors,
        )

    # Fetch one
    if isinstance(action, FetchProfilePending):
        return replace(state, loading=True, error=None)
    if isinstance(action, FetchProfileFulfilled):
        return replace(state, loading=False, profile=action.response.data, error=None)
    if isinstance(action, FetchProfileRejected):
        return replace(state, loading=False, error=action.message, profile=None)

    # Fetch all
    if isinstance(action, FetchProfilesPending):
        return replace(state, loading=True, error=None)
    if isinstance(action, FetchProfilesFulfilled):
        return replace(
            state, loading=False, profiles=tuple(action.response.data or ()), error=None
        )
    if isinstance(action, FetchProfilesRejected):
        return replace(state, loading=False, error=action.message, profiles=())

    # Delete
    if isinstance(action, DeleteProfilePending):
        return replace(state, loading=True, error=None, success=None)
    if isinstance(action, DeleteProfileFulfilled):
        return replace(
            state,
            loading=False,
            profile=None,
            profiles=tuple(p for p in state.profiles if p.email != action.email),
            success=action.message,
            error=None,
        )
    if isinstance(action, DeleteProfileRejected):
        return replace(state, loading=False, error=action.message, success=None)

    # Sync
    if isinstance(action, SyncPending):
        return replace(state, loading=True, error=None)
    if isinstance(action, SyncFulfilled):
        return replace(
            state, loading=False, last_sync=action.report, success=action.report.message
        )
    if isinstance(action, SyncRejected):
        return replace(state, loading=False, error=action.message)

    # Plain reducers
    if isinstance(action, ClearError):
        return replace(state, error=None, field_errors=())
    if isinstance(action, ClearSuccess):
        return replace(state, success=None)
    if isinstance(action, ClearProfile):
        return replace(state, profile=None, error=None, success=None, field_errors=())
    if isinstance(action, SetProfile):
        return replace(state, profile=action.profile)
    if isinstance(action, ClearProfiles):
        return replace(state, profiles=())

    raise TypeError(f"Unknown action: {action!r}")


def _upsert(profiles: tuple[Profile, ...], profile: Profile) -> tuple[Profile, ...]:
    for index, existing in enumerate(profiles):
        if existing.email == profile.email:
            return profiles[:index] + (profile,) + profiles[index + 1 :]
    return profiles + (profile,)


Listener = Callable[[ProfileState], None]


class Store:
    """Holds the current ``ProfileState`` and routes actions through the reducer.

    Success and error messages are transient: when an action sets one and an
    event loop is running, a matching clear action is scheduled after a fixed
    delay.
    """

    def __init__(
        self,
        initial: ProfileState | None = None,
        reducer: Callable[[ProfileState, Action], ProfileState] = reduce,
        success_dismiss: float = SUCCESS_DISMISS_SECONDS,
        error_dismiss: float = ERROR_DISMISS_SECONDS,
    ) -> None:
        self._state = initial or ProfileState()
        self._reducer = reducer
        self._listeners: list[Listener] = []
        self._success_dismiss = success_dismiss
        self._error_dismiss = error_dismiss
        self._timers: dict[type, asyncio.TimerHandle] = {}

    @property
    def state(self) -> ProfileState:
        return self._state

    def dispatch(self, action: Action) -> ProfileState:
        previous = self._state
        self._state = self._reducer(previous, action)
        if self._state is not previous:
            if self._state.success and self._state.success != previous.success:
                self._schedule(ClearSuccess, self._success_dismiss)
            if self._state.error and self._state.error != previous.error:
                self._schedule(ClearError, self._error_dismiss)
            for listener in list(self._listeners):
                listener(self._state)
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _schedule(self, action_type: type, delay: float) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        previous = self._timers.pop(action_type, None)
        if previous:
            previous.cancel()
        self._timers[action_type] = loop.call_later(delay, self.dispatch, action_type())


# --- Thunks ---


def _error_message(exc: Exception, default: str) -> str:
    return getattr(exc, "message", None) or str(exc) or default


async def save_profile(
    store: Store, service: CachedProfileService, data: Mapping[str, Any]
) -> ProfileState:
    store.dispatch(SaveProfilePending())
    try:
        response = await service.create_or_update_profile(data)
    except ApiError as e:
        return store.dispatch(
            SaveProfileRejected(_error_message(e, "Failed to save profile"), tuple(e.errors))
        )
    except NetworkError as e:
        return store.dispatch(SaveProfileRejected(_error_message(e, "Failed to save profile")))
    return store.dispatch(SaveProfileFulfilled(response))


async def fetch_profile(store: Store, service: CachedProfileService, email: str) -> ProfileState:
    store.dispatch(FetchProfilePending())
    try:
        response = await service.get_profile_by_email(email)
    except (ApiError, NetworkError) as e:
        return store.dispatch(FetchProfileRejected(_error_message(e, "Failed to fetch profile")))
    return store.dispatch(FetchProfileFulfilled(response))


async def fetch_profiles(store: Store, service: CachedProfileService) -> ProfileState:
    store.dispatch(FetchProfilesPending())
    try:
        response = await service.get_all_profiles()
    except (ApiError, NetworkError) as e:
        return store.dispatch(
            FetchProfilesRejected(_error_message(e, "Failed to fetch profiles"))
        )
    return store.dispatch(FetchProfilesFulfilled(response))


async def delete_profile(store: Store, service: CachedProfileService, email: str) -> ProfileState:
    store.dispatch(DeleteProfilePending(email))
    try:
        response = await service.delete_profile(email)
    except (ApiError, NetworkError) as e:
        return store.dispatch(DeleteProfileRejected(_error_message(e, "Failed to delete profile")))
    return store.dispatch(
        DeleteProfileFulfilled(
            email=normalize_email(email),
            message=response.message or "Profile deleted successfully",
        )
    )


async def sync_local_changes(store: Store, coordinator: SyncCoordinator) -> ProfileState:
    store.dispatch(SyncPending())
    try:
        report = await coordinator.sync()
    except (ApiError, NetworkError) as e:
        logger.error("sync_failed", error=str(e))
        return store.dispatch(SyncRejected(_error_message(e, "Failed to sync local changes")))
    return store.dispatch(SyncFulfilled(report))
