"""OAuth authorization resolution."""

from collections.abc import Sequence

from pydantic import BaseModel, SecretStr

from toolgate_obs.logging import get_logger
from toolgate_tools.base import AuthCheckResult, OAuthBackend
from toolgate_tools.exceptions import (
    CollaboratorCommunicationError,
    UpstreamConfigurationError,
)
from toolgate_tools.schemas import OAuthProvider, UtilityProvider

logger = get_logger(__name__)

UTILITY_TO_OAUTH_PROVIDER: dict[UtilityProvider, OAuthProvider] = {
    UtilityProvider.GMAIL: OAuthProvider.GOOGLE,
}


def map_utility_provider_to_oauth_provider(provider: UtilityProvider) -> OAuthProvider:
    """Return the OAuth provider that authorizes calls to a utility provider.

    Raises:
        UpstreamConfigurationError: No mapping is defined for the provider
    """
    try:
        return UTILITY_TO_OAUTH_PROVIDER[provider]
    except KeyError:
        raise UpstreamConfigurationError(
            f"OAuthProvider mapping not defined for UtilityProvider: {provider.value}"
        ) from None


class AuthorizationStatus(BaseModel):
    """Outcome of an authorization check.

    Exactly one of ``access_token`` (authorized) or ``authorization_url``
    (not authorized) is set.
    """

    has_auth: bool
    oauth_provider: OAuthProvider
    access_token: SecretStr | None = None
    authorization_url: str | None = None


class AuthorizationResolver:
    """Checks whether a user holds usable OAuth credentials for a scope set."""

    def __init__(self, backend: OAuthBackend):
        self.backend = backend

    async def check_authorization(
        self,
        user_id: str,
        provider: UtilityProvider,
        required_scopes: Sequence[str],
    ) -> AuthorizationStatus:
        """Check authorization with the OAuth backend.

        Args:
            user_id: User the credentials belong to
            provider: Utility provider of the tool
            required_scopes: Scopes the tool needs

        Returns:
            AuthorizationStatus with either the access token or the URL the
            user must visit to authorize

        Raises:
            UpstreamConfigurationError: Provider has no OAuth mapping
            CollaboratorCommunicationError: Backend failed or broke its contract
        """
        oauth_provider = map_utility_provider_to_oauth_provider(provider)

        try:
            result: AuthCheckResult = await self.backend.check_auth(
                user_id, oauth_provider, list(required_scopes)
            )
        except CollaboratorCommunicationError:
            raise
        except Exception as e:
            raise CollaboratorCommunicationError(
                f"Tool Auth Service communication failed: {e}"
            ) from e

        if not result.has_auth:
            if not result.authorization_url:
                raise CollaboratorCommunicationError(
                    "OAuth setup required, but authorization URL is missing."
                )
            logger.info("oauth_not_authorized", oauth_provider=oauth_provider.value)
            return AuthorizationStatus(
                has_auth=False,
                oauth_provider=oauth_provider,
                authorization_url=result.authorization_url,
            )

        access_token = next(
            (cred.access_token for cred in result.credentials or [] if cred.access_token),
            None,
        )
        if not access_token:
            raise CollaboratorCommunicationError(
                "OAuth token missing despite successful auth check."
            )

        logger.info("oauth_authorized", oauth_provider=oauth_provider.value)
        return AuthorizationStatus(
            has_auth=True,
            oauth_provider=oauth_provider,
            access_token=SecretStr(access_token),
        )
