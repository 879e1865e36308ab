"""Tool catalog.

Stores ToolConfig entries. Configs are immutable: adding a tool is a
catalog operation, never a mutation of an existing config.
"""

import asyncio
import json
from pathlib import Path
from typing import Protocol

from toolgate_obs.logging import get_logger
from toolgate_tools.exceptions import DuplicateToolError, ToolCatalogError
from toolgate_tools.schemas import ToolConfig

logger = get_logger(__name__)


class ToolCatalog(Protocol):
    """Source of tool configurations."""

    async def list_tools(self) -> list[ToolConfig]:
        ...

    async def get_tool(self, tool_id: str) -> ToolConfig | None:
        ...

    async def add_tool(self, config: ToolConfig) -> None:
        """Add a tool.

        Raises:
            DuplicateToolError: A tool with the same id exists
        """
        ...


class InMemoryToolCatalog:
    """Catalog held in process memory, in insertion order."""

    def __init__(self, tools: list[ToolConfig] | None = None):
        self._tools: dict[str, ToolConfig] = {}
        self._lock = asyncio.Lock()
        for tool in tools or []:
            if tool.id in self._tools:
                raise DuplicateToolError(tool.id)
            self._tools[tool.id] = tool

    async def list_tools(self) -> list[ToolConfig]:
        return list(self._tools.values())

    async def get_tool(self, tool_id: str) -> ToolConfig | None:
        return self._tools.get(tool_id)

    async def add_tool(self, config: ToolConfig) -> None:
        async with self._lock:
            if config.id in self._tools:
                raise DuplicateToolError(config.id)
            self._tools[config.id] = config
        logger.info("tool_added", tool_id=config.id)


class JsonFileToolCatalog:
    """Catalog persisted as a JSON array of tool configs.

    A missing file is an empty catalog. Writes are serialized and file I/O
    runs in a worker thread.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    def _read(self) -> list[ToolConfig]:
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8") or "[]")
        except json.JSONDecodeError as e:
            raise ToolCatalogError(f"Tool catalog at {self.path} is not valid JSON: {e}") from e
        if not isinstance(raw, list):
            raise ToolCatalogError(f"Tool catalog at {self.path} must be a JSON array.")
        return [ToolConfig.model_validate(entry) for entry in raw]

    def _write(self, tools: list[ToolConfig]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [
            tool.model_dump(by_alias=True, mode="json", exclude_none=True) for tool in tools
        ]
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        tmp_path.replace(self.path)

    async def list_tools(self) -> list[ToolConfig]:
        return await asyncio.to_thread(self._read)

    async def get_tool(self, tool_id: str) -> ToolConfig | None:
        tools = await self.list_tools()
        return next((tool for tool in tools if tool.id == tool_id), None)

    async def add_tool(self, config: ToolConfig) -> None:
        async with self._lock:
            tools = await asyncio.to_thread(self._read)
            if any(tool.id == config.id for tool in tools):
                raise DuplicateToolError(config.id)
            tools.append(config)
            await asyncio.to_thread(self._write, tools)
        logger.info("tool_added", tool_id=config.id, path=str(self.path))
