"""
Tool Catalog and Execution Endpoints.

- GET  /tools: List tools
- GET  /tools/{tool_id}: Tool details (input schema)
- POST /tools: Add a tool to the catalog
- POST /tools/{tool_id}/execute: Run a tool for a user
"""

from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import AliasChoices, BaseModel, Field

from toolgate_obs.logging import get_logger
from toolgate_tools.exceptions import DuplicateToolError, ToolNotFoundError
from toolgate_tools.outcomes import ErrorOutcome
from toolgate_tools.schemas import ToolConfig
from toolgate_tools.service import ToolService

from apps.core_api.deps import get_tool_service

router = APIRouter()
logger = get_logger(__name__)


class ExecuteToolRequest(BaseModel):
    """Body of POST /tools/{tool_id}/execute."""

    user_id: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("user_id", "userId")
    )
    conversation_id: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("conversation_id", "conversationId")
    )
    params: dict[str, Any] = Field(...)
    agent_id: str | None = Field(None, validation_alias=AliasChoices("agent_id", "agentId"))


def _ok(data: Any, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": True, "data": data})


def _fail(error: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


@router.get("")
async def list_tools(service: ToolService = Depends(get_tool_service)) -> JSONResponse:
    """List every tool in the catalog (id and description)."""
    tools = await service.list_available_tools()
    return _ok([tool.model_dump(mode="json") for tool in tools])


@router.get("/{tool_id}")
async def get_tool(tool_id: str, service: ToolService = Depends(get_tool_service)) -> JSONResponse:
    """Get a tool's description and input schema."""
    details = await service.get_tool_details(tool_id)
    if details is None:
        return _fail(str(ToolNotFoundError(tool_id)), status.HTTP_404_NOT_FOUND)
    return _ok(details.model_dump(mode="json", by_alias=True, exclude_none=True))


@router.post("")
async def add_tool(
    config: ToolConfig, service: ToolService = Depends(get_tool_service)
) -> JSONResponse:
    """
    Add a tool to the catalog.

    Returns:
        201 with the stored config, 409 if the id is taken. An invalid
        config is rejected with 422 before reaching this handler.
    """
    try:
        created = await service.add_new_tool(config)
    except DuplicateToolError as e:
        return _fail(str(e), status.HTTP_409_CONFLICT)
    return _ok(
        created.model_dump(mode="json", by_alias=True, exclude_none=True),
        status.HTTP_201_CREATED,
    )


@router.post("/{tool_id}/execute")
async def execute_tool(
    tool_id: str,
    body: ExecuteToolRequest,
    service: ToolService = Depends(get_tool_service),
) -> JSONResponse:
    """
    Execute a tool.

    Returns:
        200 {success: true, data: outcome} for success and setup_needed
        400 {success: false, data: outcome} for error outcomes
        404 if the tool does not exist
    """
    try:
        outcome = await service.run_tool(
            tool_id,
            body.user_id,
            body.params,
            conversation_id=body.conversation_id,
            agent_id=body.agent_id,
        )
    except ToolNotFoundError as e:
        return _fail(str(e), status.HTTP_404_NOT_FOUND)

    payload = outcome.model_dump(mode="json")
    if isinstance(outcome, ErrorOutcome):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "data": payload},
        )
    return _ok(payload)
