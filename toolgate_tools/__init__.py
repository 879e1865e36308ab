"""Toolgate Tool Engine.

Declarative external-tool execution: validate input, check prerequisites,
build the request, call the API, return one of three outcomes.
"""

from toolgate_tools.catalog import InMemoryToolCatalog, JsonFileToolCatalog, ToolCatalog
from toolgate_tools.engine import ToolExecutionEngine
from toolgate_tools.outcomes import ErrorOutcome, ExecutionOutcome, SetupNeededOutcome, SuccessOutcome
from toolgate_tools.schemas import ToolConfig
from toolgate_tools.service import ToolService

__all__ = [
    "ErrorOutcome",
    "ExecutionOutcome",
    "InMemoryToolCatalog",
    "JsonFileToolCatalog",
    "SetupNeededOutcome",
    "SuccessOutcome",
    "ToolCatalog",
    "ToolConfig",
    "ToolExecutionEngine",
    "ToolService",
]
