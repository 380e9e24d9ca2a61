"""HTTP client for the Profile API."""

from typing import Any
from urllib.parse import quote

import httpx
import structlog

from client.models import ApiResponse, FieldError, Profile

logger = structlog.get_logger()


class ApiError(Exception):
    """The API answered with a non-2xx envelope."""

    def __init__(
        self,
        message: str,
        status_code: int,
        errors: list[FieldError] | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.errors = errors or []
        super().__init__(message)

    @property
    def is_server_error(self) -> bool:
        return self.status_code >= 500

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class NetworkError(Exception):
    """The API could not be reached."""

    def __init__(self, message: str = "Unable to reach the server") -> None:
        self.message = message
        super().__init__(message)


class ProfileApiClient:
    """Thin async wrapper around the Profile API.

    Successful responses are parsed into ``ApiResponse`` envelopes. Error
    envelopes raise ``ApiError`` and transport failures raise ``NetworkError``.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> "ProfileApiClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def create_or_update_profile(self, profile: dict[str, Any]) -> ApiResponse[Profile]:
        payload = await self._request("POST", "/api/profiles", json=profile)
        return ApiResponse[Profile].model_validate(payload)

    async def get_profile_by_email(self, email: str) -> ApiResponse[Profile]:
        payload = await self._request("GET", f"/api/profiles/{quote(email, safe='')}")
        return ApiResponse[Profile].model_validate(payload)

    async def get_all_profiles(self) -> ApiResponse[list[Profile]]:
        payload = await self._request("GET", "/api/profiles")
        return ApiResponse[list[Profile]].model_validate(payload)

    async def delete_profile(self, email: str) -> ApiResponse[None]:
        payload = await self._request("DELETE", f"/api/profiles/{quote(email, safe='')}")
        return ApiResponse[None].model_validate(payload)

    async def health(self) -> ApiResponse[None]:
        payload = await self._request("GET", "/health")
        return ApiResponse[None].model_validate(payload)

    async def _request(
        self, method: str, path: str, json: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.TransportError as e:
            logger.debug("api_unreachable", method=method, path=path, error=str(e))
            raise NetworkError() from e

        try:
            payload = response.json()
        except ValueError:
            payload = None
        if not isinstance(payload, dict):
            payload = {}

        if response.is_error:
            raise ApiError(
                payload.get("message") or "Something went wrong",
                response.status_code,
                [FieldError.model_validate(e) for e in payload.get("errors") or []],
            )
        return payload
