"""Tool auth service client (OAuth backend)."""

import httpx
from pydantic import ValidationError

from toolgate_obs.logging import get_logger
from toolgate_tools.base import AuthCheckResult
from toolgate_tools.exceptions import CollaboratorCommunicationError
from toolgate_tools.schemas import OAuthProvider

logger = get_logger(__name__)


class ToolAuthServiceClient:
    """Implements the OAuthBackend protocol against ``POST /api/check-auth``.

    Accepts either the service envelope ``{"success", "data": {...}}`` or a
    bare ``{"hasAuth", "authUrl", "credentials"}`` body.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout_seconds: int = 30,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self._client = client

    def _get_headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.api_key:
            headers["X-API-KEY"] = self.api_key
        return headers

    async def _post(self, url: str, payload: dict) -> httpx.Response:
        if self._client is not None:
            return await self._client.post(
                url, json=payload, headers=self._get_headers(), timeout=self.timeout_seconds
            )
        async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
            return await client.post(url, json=payload, headers=self._get_headers())

    async def check_auth(
        self, user_id: str, provider: OAuthProvider, scopes: list[str]
    ) -> AuthCheckResult:
        """Ask the service whether the user authorized the scopes.

        Raises:
            CollaboratorCommunicationError: Not configured, unreachable, non-2xx
                or malformed answer
        """
        if not self.base_url:
            raise CollaboratorCommunicationError("Tool Auth Service URL is not configured.")

        logger.info("oauth_check_requested", provider=provider.value, scopes=scopes)
        try:
            response = await self._post(
                f"{self.base_url}/api/check-auth",
                {"userId": user_id, "provider": provider.value, "requiredScopes": scopes},
            )
        except httpx.HTTPError as e:
            raise CollaboratorCommunicationError(
                f"Tool Auth Service communication failed: {e}"
            ) from e

        if not response.is_success:
            raise CollaboratorCommunicationError(
                f"Tool Auth Service error ({response.status_code}): {response.text}"
            )

        try:
            body = response.json()
        except ValueError as e:
            raise CollaboratorCommunicationError(
                "Tool Auth Service returned a non-JSON response."
            ) from e

        if isinstance(body, dict) and "success" in body:
            if not body["success"]:
                raise CollaboratorCommunicationError(
                    f"Tool Auth Service check failed: {body.get('error', 'unknown error')}"
                )
            body = body.get("data")

        try:
            return AuthCheckResult.model_validate(body)
        except ValidationError as e:
            raise CollaboratorCommunicationError(
                f"Tool Auth Service returned an invalid answer: {e.error_count()} error(s)"
            ) from e
