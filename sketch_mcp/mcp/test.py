"""Unit tests for MCP server module.

Tests cover:
- Server configuration
- Tool functions called directly
- Tool registration and calls over the MCP client protocol
"""

import pytest

from .lib import (
    ServerConfig,
    TransportType,
    get_server_version,
)
from .server import create_server, mcp
from .tools import export_sketch, generate_sketch, get_status, validate_sketch

ORDER_CONFIG = {
    "pageName": "Orders",
    "artboardSize": {"width": 393, "height": 852},
    "modules": [{"type": "header", "title": "我的订单"}],
}


# =============================================================================
# Configuration Tests
# =============================================================================


class TestServerConfig:
    """Tests for ServerConfig dataclass."""

    @pytest.mark.unit
    def test_default_config(self):
        config = ServerConfig()

        assert config.transport == TransportType.STDIO
        assert config.host == "0.0.0.0"
        assert config.port == 18080

    @pytest.mark.unit
    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("MCP_PORT", "9100")
        config = ServerConfig.from_env(transport=TransportType.HTTP)

        assert config.transport == TransportType.HTTP
        assert config.port == 9100

    @pytest.mark.unit
    def test_from_env_explicit_values_win(self, monkeypatch):
        monkeypatch.setenv("MCP_HOST", "10.0.0.1")
        monkeypatch.setenv("MCP_PORT", "9100")
        config = ServerConfig.from_env(host="127.0.0.1", port=9200)

        assert config.transport == TransportType.STDIO
        assert config.host == "127.0.0.1"
        assert config.port == 9200

    @pytest.mark.unit
    def test_transport_from_string(self):
        assert TransportType("stdio") == TransportType.STDIO
        assert TransportType("http") == TransportType.HTTP
        assert TransportType("sse") == TransportType.SSE


class TestServerUtilities:
    """Tests for server utility functions."""

    @pytest.mark.unit
    def test_get_server_version(self):
        assert len(get_server_version().split(".")) >= 2

    @pytest.mark.unit
    def test_create_server_returns_instance(self):
        assert create_server() is mcp
        assert mcp.name == "sketch-mcp"


# =============================================================================
# Tool Function Tests
# =============================================================================


class TestGenerateSketch:
    """Tests for generate_sketch tool."""

    @pytest.mark.unit
    def test_generate_returns_document_and_draft(self):
        result = generate_sketch(ORDER_CONFIG)

        assert result["valid"] is True
        assert result["errors"] == []
        assert result["document"]["_class"] == "document"
        assert result["document"]["pages"][0]["_class"] == "page"
        assert "我的订单 [text, 329x24]" in result["draft"]
        assert result["stats"]["module_types"] == ["header"]
        assert result["stats"]["layer_count"] == 4

    @pytest.mark.unit
    def test_unknown_module_reported(self):
        result = generate_sketch({"modules": [{"type": "carousel"}]})
        assert result["valid"] is True
        assert result["stats"]["unknown_module_types"] == ["carousel"]

    @pytest.mark.unit
    def test_invalid_config(self):
        with pytest.raises(ValueError, match="Invalid design config"):
            generate_sketch({"theme": "sepia"})


class TestExportSketch:
    """Tests for export_sketch tool."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_export_writes_archive(self, output_dir):
        result = await export_sketch(ORDER_CONFIG, filename="orders")

        assert result["success"] is True
        assert result["unique_name"].startswith("orders_")
        assert result["archive_path"].endswith(".sketch")
        assert result["size_bytes"] > 0

        report = validate_sketch(result["archive_path"])
        assert report["valid"] is True

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_export_explicit_output_dir(self, tmp_path):
        result = await export_sketch(ORDER_CONFIG, output_dir=str(tmp_path))
        assert result["directory_path"].startswith(str(tmp_path))

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_export_rejects_nested_filename(self, tmp_path):
        root = tmp_path / "out"
        with pytest.raises(ValueError, match="single path component"):
            await export_sketch(ORDER_CONFIG, output_dir=str(root), filename="../escaped")
        assert sorted(p.name for p in tmp_path.iterdir()) == []


class TestValidateSketch:
    """Tests for validate_sketch tool."""

    @pytest.mark.unit
    def test_missing_path(self, tmp_path):
        result = validate_sketch(str(tmp_path / "nope"))
        assert result["valid"] is False
        assert result["errors"][0]["error_type"] == "missing_file"
        assert "invalid" in result["summary"]

    @pytest.mark.unit
    def test_empty_directory(self, tmp_path):
        result = validate_sketch(str(tmp_path))
        types = {error["error_type"] for error in result["errors"]}
        assert types == {"missing_file"}
        assert {error["file"] for error in result["errors"]} >= {
            "document.json",
            "meta.json",
            "user.json",
        }


class TestStatus:
    """Tests for status tool."""

    @pytest.mark.unit
    def test_status_healthy(self, output_dir):
        result = get_status()
        assert result["status"] == "healthy"
        assert result["output_dir"]["path"] == str(output_dir)
        assert "header" in result["module_types"]
        assert "action_required" not in result


# =============================================================================
# MCP Protocol Integration Tests (require async)
# =============================================================================


@pytest.mark.mcp
class TestMCPProtocol:
    """Integration tests using MCP client protocol."""

    @pytest.mark.asyncio
    async def test_client_can_list_tools(self, mcp_client):
        tools = await mcp_client.list_tools()

        tool_names = {t.name for t in tools}
        assert {"generate_sketch", "export_sketch", "validate_sketch", "status"} <= tool_names

    @pytest.mark.asyncio
    async def test_client_can_call_status(self, mcp_client, output_dir):
        result = await mcp_client.call_tool("status", {})
        assert result is not None

    @pytest.mark.asyncio
    async def test_client_can_call_generate(self, mcp_client):
        result = await mcp_client.call_tool("generate_sketch", {"config": ORDER_CONFIG})
        assert result is not None

    @pytest.mark.asyncio
    async def test_client_invalid_config(self, mcp_client):
        with pytest.raises(Exception, match="Invalid design config"):
            await mcp_client.call_tool("generate_sketch", {"config": {"theme": "sepia"}})

    @pytest.mark.asyncio
    async def test_client_can_read_schema(self, mcp_client):
        contents = await mcp_client.read_resource("schema://design-config")
        assert "pageName" in contents[0].text
