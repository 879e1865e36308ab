"""Collaborator Interfaces.

The engine talks to three external collaborators through these protocols:
the secret store, the OAuth backend and the HTTP transport.
"""

from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field

from toolgate_tools.schemas import (
    HttpRequestDescriptor,
    HttpResponse,
    OAuthProvider,
    UtilityProvider,
)


class OAuthCredential(BaseModel):
    """A credential reported by the OAuth backend."""

    access_token: str | None = Field(None, alias="accessToken")
    scopes: list[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class AuthCheckResult(BaseModel):
    """Answer of the OAuth backend for one (user, provider, scopes) check."""

    has_auth: bool = Field(..., alias="hasAuth")
    authorization_url: str | None = Field(None, alias="authUrl")
    credentials: list[OAuthCredential] | None = None

    model_config = ConfigDict(populate_by_name=True)


class SecretStore(Protocol):
    """Per-user secret key/value store."""

    async def get_secret(
        self, user_id: str, provider: UtilityProvider, secret_key: str
    ) -> str | None:
        """Return the secret value, or None if not found."""
        ...


class OAuthBackend(Protocol):
    """Reports whether a user authorized a scope set with a provider."""

    async def check_auth(
        self, user_id: str, provider: OAuthProvider, scopes: list[str]
    ) -> AuthCheckResult:
        """Check authorization.

        Raises:
            CollaboratorCommunicationError: The backend could not answer
        """
        ...


class HttpTransport(Protocol):
    """Performs one HTTP request."""

    async def send(self, request: HttpRequestDescriptor, timeout: float) -> HttpResponse:
        """Send the request.

        Raises:
            UpstreamUnreachableError: No response was received
        """
        ...


def describe_request(request: HttpRequestDescriptor) -> dict[str, Any]:
    """Loggable view of a request: no header values, no body values."""
    return {
        "method": request.method.value,
        "url": request.url,
        "query_keys": sorted(request.query),
        "body_keys": sorted(request.body) if request.body else [],
        "header_names": sorted(request.headers),
    }
