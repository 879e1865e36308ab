"""Secret service client.

Implements the SecretStore protocol against the secret service's
``GET /api/get-secret`` endpoint.
"""

import json
from typing import Any

import httpx

from toolgate_obs.logging import get_logger
from toolgate_tools.exceptions import CollaboratorCommunicationError
from toolgate_tools.schemas import UtilityProvider

logger = get_logger(__name__)


class SecretServiceError(Exception):
    """A single secret lookup failed (non-2xx, bad payload or network error)."""

    pass


class SecretServiceClient:
    """Fetches per-user secrets from the secret service.

    Responses use the envelope ``{"success": bool, "data": {"value": ...}}``.
    A 404 or an unsuccessful envelope means the secret is not set.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout_seconds: int = 30,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the secret service client.

        Args:
            base_url: Service base URL; empty means not configured
            api_key: Sent as X-API-KEY when set
            timeout_seconds: Request timeout
            client: Shared client; a short-lived one is opened per call otherwise
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self._client = client

    def _get_headers(self, user_id: str) -> dict[str, str]:
        headers = {"x-user-id": user_id, "Accept": "application/json"}
        if self.api_key:
            headers["X-API-KEY"] = self.api_key
        return headers

    async def _get(self, url: str, params: dict[str, str], headers: dict[str, str]) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(
                url, params=params, headers=headers, timeout=self.timeout_seconds
            )
        async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
            return await client.get(url, params=params, headers=headers)

    async def get_secret(
        self, user_id: str, provider: UtilityProvider, secret_key: str
    ) -> str | None:
        """Fetch one secret.

        Args:
            user_id: Owner of the secret
            provider: Utility provider the secret belongs to
            secret_key: Secret identifier

        Returns:
            The secret value as a string, or None if not set

        Raises:
            CollaboratorCommunicationError: Service URL not configured
            SecretServiceError: The lookup itself failed
        """
        if not self.base_url:
            raise CollaboratorCommunicationError("Secret Service URL is not configured.")

        try:
            response = await self._get(
                f"{self.base_url}/api/get-secret",
                params={"secretType": secret_key, "provider": provider.value},
                headers=self._get_headers(user_id),
            )
        except httpx.HTTPError as e:
            raise SecretServiceError(f"Secret service request failed: {e}") from e

        if response.status_code == 404:
            logger.debug("secret_not_found", secret_key=secret_key)
            return None
        if response.status_code != 200:
            raise SecretServiceError(
                f"Secret service error ({response.status_code}): {response.text}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise SecretServiceError("Secret service returned a non-JSON response.") from e

        if not isinstance(payload, dict) or not payload.get("success"):
            logger.debug("secret_not_found", secret_key=secret_key)
            return None

        data = payload.get("data")
        if not isinstance(data, dict):
            return None
        return _secret_value_to_str(data.get("value"))


def _secret_value_to_str(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)
