"""
Tests for the Bear MCP server.

Covers tool definitions, input validation, the call_tool dispatcher,
error mapping and the server entry point.
"""

import json
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from mcp.types import CallToolRequest, CallToolRequestParams, CallToolResult, TextContent, Tool

from bear_mcp.config import BearConfig
from bear_mcp.mcp.server import (
    call_tool,
    get_bear,
    handle_tool_error,
    list_tools,
    main,
    run_server,
    set_bear,
    validate_tool_input,
)
from bear_mcp.mcp.tool_definitions import TOOLS
from bear_mcp.types import ActionResult, DatabaseConnectionError, QueryError

EXPECTED_TOOLS = {
    "create_note",
    "search_notes",
    "get_note",
    "open_note",
    "list_tags",
    "update_note",
    "append_to_note",
    "get_notes_by_tag",
    "trash_note",
    "archive_note",
    "delete_tag",
    "get_recent_notes",
    "get_note_backlinks",
}


@pytest.fixture
def served(bear):
    """Route call_tool to the fixture BearNotes."""
    with patch("bear_mcp.mcp.server.get_bear", return_value=bear):
        yield bear


def payload(result):
    assert isinstance(result, CallToolResult)
    assert len(result.content) == 1
    assert isinstance(result.content[0], TextContent)
    return json.loads(result.content[0].text)


class TestToolDefinitions:
    @pytest.mark.asyncio
    async def test_list_tools_returns_all_tools(self):
        tools = await list_tools()
        assert len(tools) == 13
        assert all(isinstance(tool, Tool) for tool in tools)
        assert {tool.name for tool in tools} == EXPECTED_TOOLS

    def test_tool_definitions_have_required_fields(self):
        for tool in TOOLS:
            assert tool.description
            assert tool.inputSchema["type"] == "object"
            assert "properties" in tool.inputSchema

    def test_limit_bounds(self):
        search = next(t for t in TOOLS if t.name == "search_notes")
        limit = search.inputSchema["properties"]["limit"]
        assert (limit["minimum"], limit["maximum"], limit["default"]) == (1, 100, 10)

        by_tag = next(t for t in TOOLS if t.name == "get_notes_by_tag")
        assert by_tag.inputSchema["properties"]["limit"]["default"] == 50

    def test_days_bounds(self):
        recent = next(t for t in TOOLS if t.name == "get_recent_notes")
        days = recent.inputSchema["properties"]["days"]
        assert (days["minimum"], days["maximum"], days["default"]) == (1, 365, 7)

    def test_create_note_requires_title_and_content(self):
        create = next(t for t in TOOLS if t.name == "create_note")
        assert create.inputSchema["required"] == ["title", "content"]


class TestValidateToolInput:
    def test_unknown_tool(self):
        with pytest.raises(ValueError, match="Invalid input: Unknown tool: nope"):
            validate_tool_input("nope", {})

    def test_tool_name_must_be_non_empty(self):
        with pytest.raises(ValueError, match="tool name must not be empty"):
            validate_tool_input("", {})

    def test_arguments_must_be_object(self):
        with pytest.raises(ValueError, match="arguments must be an object"):
            validate_tool_input("list_tags", [])

    def test_none_arguments_treated_as_empty(self):
        assert validate_tool_input("list_tags", None) == {}

    def test_missing_required_property(self):
        with pytest.raises(ValueError, match="'content' is a required property"):
            validate_tool_input("create_note", {"title": "x"})

    def test_limit_out_of_range_reports_path(self):
        with pytest.raises(ValueError, match="at limit"):
            validate_tool_input("search_notes", {"query": "x", "limit": 0})

    def test_type_mismatch(self):
        with pytest.raises(ValueError, match="Schema validation failed"):
            validate_tool_input("trash_note", {"identifier": "x", "show_window": "yes"})

    def test_defaults_applied(self):
        assert validate_tool_input("search_notes", {"query": "q"}) == {"query": "q", "limit": 10}
        assert validate_tool_input("get_recent_notes", {}) == {"days": 7, "limit": 50}

    def test_whitespace_only_identifier_rejected(self):
        with pytest.raises(ValueError, match="identifier cannot be empty"):
            validate_tool_input("get_note", {"identifier": "   "})

    def test_control_characters_stripped(self):
        sanitized = validate_tool_input("search_notes", {"query": "he\x00llo"})
        assert sanitized["query"] == "hello"

    def test_append_default_separator(self):
        sanitized = validate_tool_input("append_to_note", {"identifier": "a", "content": "b"})
        assert sanitized["separator"] == "\n\n"


class TestCallTool:
    @pytest.mark.asyncio
    async def test_create_note(self, served, mock_dispatcher):
        result = await call_tool(
            "create_note", {"title": "Test", "content": "Hello", "tags": ["a"]}
        )
        assert payload(result) == {
            "success": True,
            "data": {"message": 'Note "Test" created successfully'},
        }
        mock_dispatcher.dispatch.assert_awaited_once()
        assert result.isError is False

    @pytest.mark.asyncio
    async def test_search_notes(self, served, bear_store):
        bear_store.add_note(title="Meeting", identifier="M-1")
        data = payload(await call_tool("search_notes", {"query": "meeting"}))
        assert data["success"] is True
        assert data["data"]["count"] == 1
        assert data["data"]["notes"][0]["title"] == "Meeting"

    @pytest.mark.asyncio
    async def test_get_note_not_found(self, served):
        data = payload(await call_tool("get_note", {"identifier": "ghost"}))
        assert data == {"success": True, "data": {"found": False, "identifier": "ghost"}}

    @pytest.mark.asyncio
    async def test_list_tags(self, served, bear_store):
        bear_store.add_tag("zeta")
        bear_store.add_tag("alpha")
        data = payload(await call_tool("list_tags", {}))
        assert data["data"]["tags"] == ["alpha", "zeta"]

    @pytest.mark.asyncio
    async def test_get_note_backlinks(self, served, bear_store):
        target = bear_store.add_note(title="Hub")
        bear_store.link(bear_store.add_note(title="spoke"), target)
        data = payload(await call_tool("get_note_backlinks", {"identifier": "Hub"}))
        assert data["data"]["count"] == 1

    @pytest.mark.asyncio
    async def test_write_failure_is_a_result(self, served, mock_dispatcher):
        mock_dispatcher.dispatch.return_value = ActionResult(success=False, error="boom")
        result = await call_tool("trash_note", {"identifier": "x"})
        data = payload(result)
        assert data == {"success": False, "error": "Failed to trash note: boom"}
        assert result.isError is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "tool, arguments",
        [
            ("create_note", {"title": "T", "content": "c"}),
            ("update_note", {"identifier": "x", "content": "c"}),
            ("append_to_note", {"identifier": "x", "content": "c"}),
            ("open_note", {"identifier": "x"}),
            ("trash_note", {"identifier": "x"}),
            ("archive_note", {"identifier": "x"}),
            ("delete_tag", {"name": "x"}),
        ],
    )
    async def test_every_failed_write_sets_is_error(self, served, mock_dispatcher, tool, arguments):
        mock_dispatcher.dispatch.return_value = ActionResult(success=False, error="no handler")
        result = await call_tool(tool, arguments)
        assert result.isError is True
        assert payload(result)["success"] is False

    @pytest.mark.asyncio
    async def test_failed_write_is_error_over_protocol(self, served, mock_dispatcher):
        """The registered tools/call handler passes isError through to the client."""
        import bear_mcp.mcp.server as srv

        mock_dispatcher.dispatch.return_value = ActionResult(success=False, error="no handler")
        request = CallToolRequest(
            method="tools/call",
            params=CallToolRequestParams(name="trash_note", arguments={"identifier": "x"}),
        )
        response = await srv.mcp.request_handlers[CallToolRequest](request)

        result = response.root
        assert result.isError is True
        assert json.loads(result.content[0].text) == {
            "success": False,
            "error": "Failed to trash note: no handler",
        }

    @pytest.mark.asyncio
    async def test_invalid_input_is_text_not_exception(self, served):
        result = await call_tool("search_notes", {"query": ""})
        assert result.content[0].text.startswith("Invalid input:")
        assert result.isError is True

    @pytest.mark.asyncio
    async def test_unknown_tool(self, served):
        result = await call_tool("does_not_exist", {})
        assert "Unknown tool: does_not_exist" in result.content[0].text

    @pytest.mark.asyncio
    async def test_missing_store(self, tmp_path, mock_dispatcher):
        from bear_mcp.core import BearNotes

        bear = BearNotes(
            BearConfig(database_path=tmp_path / "absent.sqlite"), dispatcher=mock_dispatcher
        )
        with patch("bear_mcp.mcp.server.get_bear", return_value=bear):
            result = await call_tool("list_tags", {})
        assert result.content[0].text.startswith("Bear database unavailable:")

    @pytest.mark.asyncio
    async def test_unexpected_error_is_internal(self):
        broken = MagicMock()
        broken.list_tags = AsyncMock(side_effect=RuntimeError("kaboom"))
        with patch("bear_mcp.mcp.server.get_bear", return_value=broken):
            result = await call_tool("list_tags", {})
        assert result.content[0].text == "Internal server error"
        assert result.isError is True


class TestHandleToolError:
    def test_value_error(self):
        result = handle_tool_error(ValueError("bad"), "get_note", {})
        assert result[0].text == "Invalid input: bad"

    def test_connection_error(self):
        error = DatabaseConnectionError("Bear database not found at: /x", path="/x")
        result = handle_tool_error(error, "get_note", {})
        assert result[0].text == "Bear database unavailable: Bear database not found at: /x"

    def test_query_error_hides_details(self):
        result = handle_tool_error(QueryError("no such table: ZSFNOTE"), "get_note", {})
        assert result[0].text == "Bear query failed"

    def test_generic_exception_with_non_dict_arguments(self):
        result = handle_tool_error(RuntimeError("x"), "get_note", None)
        assert result[0].text == "Internal server error"


class TestBearInstance:
    def test_set_bear_replaces_and_closes(self, bear):
        previous = MagicMock()
        set_bear(previous)
        try:
            set_bear(bear)
            previous.close.assert_called_once()
            assert get_bear() is bear
        finally:
            set_bear(None)
        assert not hasattr(get_bear, "_instance")


class TestMain:
    def test_exits_when_store_missing(self, tmp_path, monkeypatch):
        """With no store file, main() exits 1 before serving."""
        fake_run = MagicMock()
        monkeypatch.setattr("asyncio.run", fake_run)

        with pytest.raises(SystemExit) as exc_info:
            main(BearConfig(database_path=tmp_path / "absent.sqlite"))

        assert exc_info.value.code == 1
        fake_run.assert_not_called()

    def test_runs_server_when_store_present(self, bear_store, monkeypatch):
        captured = {"called": False, "bear": None}

        def fake_run(coro):
            coro.close()
            captured["called"] = True
            captured["bear"] = get_bear()

        monkeypatch.setattr("asyncio.run", fake_run)

        main(BearConfig(database_path=bear_store.path))

        assert captured["called"]
        assert captured["bear"].database.db_path == bear_store.path
        assert not hasattr(get_bear, "_instance")


class TestRunServer:
    @pytest.mark.asyncio
    async def test_run_server_opens_stdio_and_runs_mcp(self):
        import bear_mcp.mcp.server as srv

        fake_read = MagicMock(name="read_stream")
        fake_write = MagicMock(name="write_stream")

        @asynccontextmanager
        async def fake_stdio_server():
            yield (fake_read, fake_write)

        fake_init_opts = {"server_name": "bear-mcp-server"}
        with patch.object(srv.mcp, "run", AsyncMock(return_value=None)) as fake_mcp_run, patch.object(
            srv.mcp, "create_initialization_options", MagicMock(return_value=fake_init_opts)
        ), patch("bear_mcp.mcp.server.stdio_server", fake_stdio_server):
            await run_server()

        fake_mcp_run.assert_called_once_with(fake_read, fake_write, fake_init_opts)
