"""Executes a built request and normalizes the response."""

from typing import Any

from toolgate_obs import metrics
from toolgate_obs.logging import get_logger
from toolgate_tools.base import HttpTransport, describe_request
from toolgate_tools.exceptions import UpstreamApiError, UpstreamUnreachableError
from toolgate_tools.schemas import HttpRequestDescriptor

logger = get_logger(__name__)


async def execute_api_call(
    transport: HttpTransport,
    request: HttpRequestDescriptor,
    timeout: float,
    tool_id: str,
) -> Any:
    """Perform exactly one HTTP call for a tool.

    Args:
        transport: Transport performing the call
        request: Assembled request
        timeout: Seconds before the call is abandoned
        tool_id: Tool the call is made for (metrics label)

    Returns:
        The parsed response body of a 2xx response

    Raises:
        UpstreamApiError: Non-2xx response, with status and body
        UpstreamUnreachableError: No response received
    """
    logger.info("upstream_request", tool_id=tool_id, **describe_request(request))

    try:
        response = await transport.send(request, timeout)
    except UpstreamUnreachableError:
        metrics.upstream_requests_total.labels(
            tool_id=tool_id, status_class=metrics.status_class(None)
        ).inc()
        raise

    metrics.upstream_requests_total.labels(
        tool_id=tool_id, status_class=metrics.status_class(response.status_code)
    ).inc()

    if not response.is_success:
        logger.warning(
            "upstream_api_error",
            tool_id=tool_id,
            status_code=response.status_code,
        )
        raise UpstreamApiError(response.status_code, response.body)

    logger.info("upstream_response", tool_id=tool_id, status_code=response.status_code)
    return response.body
