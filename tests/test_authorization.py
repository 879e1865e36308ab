"""Authorization resolver tests."""

import pytest

from factories import authorized, make_oauth_backend, unauthorized
from toolgate_tools.authorization import (
    AuthorizationResolver,
    map_utility_provider_to_oauth_provider,
)
from toolgate_tools.base import AuthCheckResult, OAuthCredential
from toolgate_tools.exceptions import CollaboratorCommunicationError, UpstreamConfigurationError
from toolgate_tools.schemas import OAuthProvider, UtilityProvider

SCOPES = ["https://www.googleapis.com/auth/gmail.readonly"]


def test_gmail_maps_to_google():
    assert map_utility_provider_to_oauth_provider(UtilityProvider.GMAIL) == OAuthProvider.GOOGLE


def test_unmapped_provider_is_configuration_error():
    with pytest.raises(UpstreamConfigurationError, match="stripe"):
        map_utility_provider_to_oauth_provider(UtilityProvider.STRIPE)


class TestCheckAuthorization:
    """Tests for AuthorizationResolver.check_authorization."""

    @pytest.mark.asyncio
    async def test_authorized_returns_token(self):
        backend = make_oauth_backend(authorized("tok-1"))

        status = await AuthorizationResolver(backend).check_authorization(
            "user-1", UtilityProvider.GMAIL, SCOPES
        )

        assert status.has_auth is True
        assert status.oauth_provider == OAuthProvider.GOOGLE
        assert status.access_token.get_secret_value() == "tok-1"
        backend.check_auth.assert_awaited_once_with("user-1", OAuthProvider.GOOGLE, SCOPES)

    @pytest.mark.asyncio
    async def test_uses_first_credential_with_token(self):
        result = AuthCheckResult(
            has_auth=True,
            credentials=[OAuthCredential(access_token=None), OAuthCredential(access_token="second")],
        )

        status = await AuthorizationResolver(make_oauth_backend(result)).check_authorization(
            "user-1", UtilityProvider.GMAIL, SCOPES
        )

        assert status.access_token.get_secret_value() == "second"

    @pytest.mark.asyncio
    async def test_unauthorized_returns_url(self):
        backend = make_oauth_backend(unauthorized("https://auth.example/go"))

        status = await AuthorizationResolver(backend).check_authorization(
            "user-1", UtilityProvider.GMAIL, SCOPES
        )

        assert status.has_auth is False
        assert status.authorization_url == "https://auth.example/go"
        assert status.access_token is None

    @pytest.mark.asyncio
    async def test_unauthorized_without_url_is_contract_violation(self):
        backend = make_oauth_backend(AuthCheckResult(has_auth=False))

        with pytest.raises(CollaboratorCommunicationError, match="authorization URL"):
            await AuthorizationResolver(backend).check_authorization(
                "user-1", UtilityProvider.GMAIL, SCOPES
            )

    @pytest.mark.asyncio
    async def test_authorized_without_token_is_contract_violation(self):
        backend = make_oauth_backend(AuthCheckResult(has_auth=True, credentials=[]))

        with pytest.raises(CollaboratorCommunicationError, match="token missing"):
            await AuthorizationResolver(backend).check_authorization(
                "user-1", UtilityProvider.GMAIL, SCOPES
            )

    @pytest.mark.asyncio
    async def test_backend_failure_is_wrapped(self):
        backend = make_oauth_backend(ConnectionError("refused"))

        with pytest.raises(CollaboratorCommunicationError, match="refused"):
            await AuthorizationResolver(backend).check_authorization(
                "user-1", UtilityProvider.GMAIL, SCOPES
            )

    def test_parses_backend_wire_format(self):
        result = AuthCheckResult.model_validate(
            {"hasAuth": True, "credentials": [{"accessToken": "abc", "scopes": SCOPES, "expiresAt": 1}]}
        )

        assert result.credentials[0].access_token == "abc"
