"""Tool catalog tests."""

import json
from pathlib import Path

import pytest

from factories import CONFIRM_WEBHOOK_TOOL, SEND_EMAIL_TOOL
from toolgate_tools.catalog import InMemoryToolCatalog, JsonFileToolCatalog
from toolgate_tools.exceptions import DuplicateToolError, ToolCatalogError
from toolgate_tools.schemas import ToolConfig

SAMPLE_CATALOG = Path(__file__).resolve().parent.parent / "data" / "tools.json"


class TestInMemoryToolCatalog:
    """Tests for InMemoryToolCatalog."""

    @pytest.mark.asyncio
    async def test_add_get_list(self, send_email_config, confirm_webhook_config):
        catalog = InMemoryToolCatalog([send_email_config])

        await catalog.add_tool(confirm_webhook_config)

        assert await catalog.get_tool("send_email") == send_email_config
        assert await catalog.get_tool("unknown") is None
        assert [tool.id for tool in await catalog.list_tools()] == ["send_email", "crisp_confirm_webhook"]

    @pytest.mark.asyncio
    async def test_duplicate_id_rejected(self, send_email_config):
        catalog = InMemoryToolCatalog([send_email_config])

        with pytest.raises(DuplicateToolError, match="send_email"):
            await catalog.add_tool(send_email_config)

    def test_duplicate_ids_in_seed_rejected(self, send_email_config):
        with pytest.raises(DuplicateToolError):
            InMemoryToolCatalog([send_email_config, send_email_config])


class TestJsonFileToolCatalog:
    """Tests for JsonFileToolCatalog."""

    @pytest.mark.asyncio
    async def test_missing_file_is_empty_catalog(self, tmp_path):
        catalog = JsonFileToolCatalog(tmp_path / "none.json")

        assert await catalog.list_tools() == []
        assert await catalog.get_tool("send_email") is None

    @pytest.mark.asyncio
    async def test_add_tool_persists_camel_case_json(self, tmp_path, send_email_config):
        path = tmp_path / "nested" / "tools.json"
        catalog = JsonFileToolCatalog(path)

        await catalog.add_tool(send_email_config)

        stored = json.loads(path.read_text())
        assert stored[0]["id"] == "send_email"
        assert stored[0]["apiKeyDetails"] == {"secretName": "api_key", "scheme": "Bearer"}
        assert await JsonFileToolCatalog(path).get_tool("send_email") == send_email_config

    @pytest.mark.asyncio
    async def test_duplicate_id_rejected(self, tmp_path):
        path = tmp_path / "tools.json"
        path.write_text(json.dumps([SEND_EMAIL_TOOL]))
        catalog = JsonFileToolCatalog(path)

        with pytest.raises(DuplicateToolError):
            await catalog.add_tool(ToolConfig.model_validate(SEND_EMAIL_TOOL))

        assert len(json.loads(path.read_text())) == 1

    @pytest.mark.asyncio
    async def test_reads_existing_entries(self, tmp_path):
        path = tmp_path / "tools.json"
        path.write_text(json.dumps([SEND_EMAIL_TOOL, CONFIRM_WEBHOOK_TOOL]))

        tools = await JsonFileToolCatalog(path).list_tools()

        assert [tool.id for tool in tools] == ["send_email", "crisp_confirm_webhook"]

    @pytest.mark.asyncio
    async def test_malformed_file_raises(self, tmp_path):
        path = tmp_path / "tools.json"
        path.write_text("{not json")

        with pytest.raises(ToolCatalogError):
            await JsonFileToolCatalog(path).list_tools()

    @pytest.mark.asyncio
    async def test_shipped_sample_catalog_loads(self):
        tools = await JsonFileToolCatalog(SAMPLE_CATALOG).list_tools()

        assert {tool.id for tool in tools} >= {"gmail_send_message", "crisp_confirm_webhook"}
