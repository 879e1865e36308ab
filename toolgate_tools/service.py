"""Tool service: catalog access plus execution for API callers."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from toolgate_obs.logging import get_logger
from toolgate_tools.catalog import ToolCatalog
from toolgate_tools.engine import ToolExecutionEngine
from toolgate_tools.exceptions import ToolNotFoundError
from toolgate_tools.outcomes import ExecutionOutcome
from toolgate_tools.schemas import ToolConfig, ToolInputSchema

logger = get_logger(__name__)


class ToolSummary(BaseModel):
    """Catalog listing entry."""

    id: str
    description: str


class ToolDetails(BaseModel):
    """What a caller needs to invoke a tool."""

    id: str
    description: str
    input_schema: ToolInputSchema = Field(..., alias="schema")

    model_config = ConfigDict(populate_by_name=True)


class ToolService:
    """Facade used by the HTTP API."""

    def __init__(self, catalog: ToolCatalog, engine: ToolExecutionEngine):
        self.catalog = catalog
        self.engine = engine

    async def list_available_tools(self) -> list[ToolSummary]:
        tools = await self.catalog.list_tools()
        return [ToolSummary(id=tool.id, description=tool.description) for tool in tools]

    async def get_tool_details(self, tool_id: str) -> ToolDetails | None:
        tool = await self.catalog.get_tool(tool_id)
        if tool is None:
            return None
        return ToolDetails(id=tool.id, description=tool.description, input_schema=tool.input_schema)

    async def add_new_tool(self, config: ToolConfig) -> ToolConfig:
        await self.catalog.add_tool(config)
        return config

    async def run_tool(
        self,
        tool_id: str,
        user_id: str,
        params: dict[str, Any] | None,
        conversation_id: str | None = None,
        agent_id: str | None = None,
    ) -> ExecutionOutcome:
        """Look up a tool and execute it.

        Raises:
            ToolNotFoundError: No tool with this id
        """
        tool = await self.catalog.get_tool(tool_id)
        if tool is None:
            raise ToolNotFoundError(tool_id)

        logger.info(
            "tool_run_requested",
            tool_id=tool_id,
            user_id=user_id,
            conversation_id=conversation_id,
            agent_id=agent_id,
        )
        return await self.engine.execute(tool, user_id, params)
