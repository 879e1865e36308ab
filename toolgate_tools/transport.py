"""httpx-backed HTTP transport for outbound tool calls."""

from typing import Any

import httpx

from toolgate_obs.logging import get_logger
from toolgate_tools.exceptions import UpstreamUnreachableError
from toolgate_tools.schemas import HttpRequestDescriptor, HttpResponse

logger = get_logger(__name__)


def parse_response_body(response: httpx.Response) -> Any:
    """JSON when the body parses as JSON, text otherwise, None when empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class HttpxTransport:
    """Sends HttpRequestDescriptors over a shared httpx.AsyncClient.

    Example:
        >>> async with HttpxTransport() as transport:
        ...     response = await transport.send(request, timeout=120)
    """

    def __init__(self, client: httpx.AsyncClient | None = None):
        self._client = client or httpx.AsyncClient()

    async def send(self, request: HttpRequestDescriptor, timeout: float) -> HttpResponse:
        """Perform the request.

        Redirects are followed. Non-2xx responses are returned, not raised.

        Raises:
            UpstreamUnreachableError: Connection failure, timeout or other
                transport-level error
        """
        try:
            response = await self._client.request(
                request.method.value,
                request.url,
                params=request.query or None,
                json=request.body,
                headers=request.headers,
                timeout=timeout,
                follow_redirects=True,
            )
        except httpx.TransportError as e:
            logger.warning(
                "upstream_unreachable",
                url=request.url,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise UpstreamUnreachableError(
                f"No response received from external API ({type(e).__name__})."
            ) from e

        return HttpResponse(
            status_code=response.status_code,
            body=parse_response_body(response),
            headers=dict(response.headers),
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
