"""Tool service tests."""

from unittest.mock import AsyncMock

import pytest

from toolgate_tools.catalog import InMemoryToolCatalog
from toolgate_tools.exceptions import ToolNotFoundError
from toolgate_tools.outcomes import SuccessOutcome
from toolgate_tools.service import ToolService


@pytest.fixture
def engine():
    mock = AsyncMock()
    mock.execute.return_value = SuccessOutcome(data={"ok": True})
    return mock


@pytest.fixture
def service(send_email_config, engine):
    return ToolService(InMemoryToolCatalog([send_email_config]), engine)


@pytest.mark.asyncio
async def test_list_available_tools(service):
    summaries = await service.list_available_tools()

    assert [(s.id, s.description) for s in summaries] == [("send_email", "Send an email")]


@pytest.mark.asyncio
async def test_get_tool_details_includes_schema(service):
    details = await service.get_tool_details("send_email")

    dumped = details.model_dump(by_alias=True, exclude_none=True)
    assert dumped["schema"]["required"] == ["to"]
    assert set(dumped["schema"]["properties"]) == {"to", "subject"}
    assert await service.get_tool_details("missing") is None


@pytest.mark.asyncio
async def test_add_new_tool(service, confirm_webhook_config):
    created = await service.add_new_tool(confirm_webhook_config)

    assert created == confirm_webhook_config
    assert await service.get_tool_details("crisp_confirm_webhook") is not None


@pytest.mark.asyncio
async def test_run_tool_delegates_to_engine(service, engine, send_email_config):
    outcome = await service.run_tool("send_email", "user-1", {"to": "a@b.com"}, conversation_id="c-1")

    assert outcome == SuccessOutcome(data={"ok": True})
    engine.execute.assert_awaited_once_with(send_email_config, "user-1", {"to": "a@b.com"})


@pytest.mark.asyncio
async def test_run_unknown_tool_raises(service, engine):
    with pytest.raises(ToolNotFoundError, match="not found"):
        await service.run_tool("missing", "user-1", {})

    engine.execute.assert_not_awaited()
