"""Tests for tool call dispatch."""

import asyncio
import json
import logging

import pytest
from mcp.types import TextContent

from mcp_server_github.core.handlers import DispatchState, ToolDispatcher, ToolResponse, decode_arguments
from mcp_server_github.core.tools import ToolCategory, ToolDefinition, ToolRegistry
from mcp_server_github.error_handling import ErrorKind, GitHubToolError, InvalidParamsError
from mcp_server_github.github.models import GetLicenseInfo


class TestDecodeArguments:
    def test_missing_arguments_are_empty(self):
        assert decode_arguments("get-license-info", None) == {}
        assert decode_arguments("get-license-info", "") == {}
        assert decode_arguments("get-license-info", "   ") == {}

    def test_serialized_arguments(self):
        assert decode_arguments("get-issue", '{"owner": "acme", "issue_number": 7}') == {
            "owner": "acme",
            "issue_number": 7,
        }
        assert decode_arguments("get-issue", b'{"repo": "widgets"}') == {"repo": "widgets"}

    def test_invalid_json(self):
        with pytest.raises(InvalidParamsError) as exc_info:
            decode_arguments("get-issue", "{owner: acme")
        assert exc_info.value.message.startswith("Invalid JSON arguments for get-issue")

    @pytest.mark.parametrize("arguments", ["[1, 2]", '"text"', [("owner", "acme")], 42])
    def test_non_object_arguments(self, arguments):
        with pytest.raises(InvalidParamsError) as exc_info:
            decode_arguments("get-issue", arguments)
        assert "must be an object" in exc_info.value.message


class TestDispatch:
    @pytest.mark.asyncio
    async def test_unknown_tool(self, dispatcher, fake_client):
        response = await dispatcher.dispatch("make-coffee", "{not even json")

        assert response.error.kind is ErrorKind.METHOD_NOT_FOUND
        assert response.error.code == -32601
        assert response.error.message == "Unknown tool: make-coffee"
        assert fake_client.calls == []
        assert dispatcher.state is DispatchState.IDLE

    @pytest.mark.asyncio
    async def test_serialized_arguments_are_accepted(self, dispatcher, remote):
        response = await dispatcher.dispatch(
            "create-branch", json.dumps({"owner": "acme", "repo": "widgets", "branch": "from-text"})
        )

        assert response.ok
        assert "from-text" in remote.refs

    @pytest.mark.asyncio
    async def test_invalid_arguments_never_reach_the_remote(self, dispatcher, fake_client):
        response = await dispatcher.dispatch(
            "push-files",
            {"owner": "acme", "repo": "widgets", "branch": "main", "files": [], "message": "empty"},
        )

        assert response.error.kind is ErrorKind.INVALID_PARAMS
        assert response.error.message.startswith("Invalid arguments for push-files")
        assert fake_client.calls == []

    @pytest.mark.asyncio
    async def test_every_tool_rejects_missing_required_fields(self, registry, dispatcher, fake_client):
        checked = 0
        for tool in registry.list_tools():
            if not tool.inputSchema.get("required"):
                continue
            response = await dispatcher.dispatch(tool.name, {})
            assert response.error is not None, tool.name
            assert response.error.kind is ErrorKind.INVALID_PARAMS, tool.name
            for field in tool.inputSchema["required"]:
                assert field in response.error.message, (tool.name, field)
            checked += 1

        assert checked > 25
        assert fake_client.calls == []
        assert dispatcher.state is DispatchState.IDLE

    @pytest.mark.asyncio
    async def test_remote_errors_keep_their_kind(self, dispatcher):
        response = await dispatcher.dispatch("get-issue", {"owner": "acme", "repo": "widgets", "issue_number": 404})

        assert response.error.kind is ErrorKind.NOT_FOUND
        assert response.error.status == 404

    @pytest.mark.asyncio
    async def test_state_during_execution(self, fake_client):
        seen = []

        async def handler(client, args):
            seen.append(dispatcher.state)
            return {"ok": True}

        registry = ToolRegistry()
        registry.register(
            ToolDefinition("probe", ToolCategory.SEARCH, "Probe", GetLicenseInfo, handler)
        )
        dispatcher = ToolDispatcher(registry, fake_client)

        response = await dispatcher.dispatch("probe")

        assert response.result == {"ok": True}
        assert seen == [DispatchState.EXECUTING]
        assert dispatcher.state is DispatchState.IDLE

    @pytest.mark.asyncio
    async def test_unexpected_failures_become_internal(self, fake_client, caplog):
        async def handler(client, args):
            raise KeyError("sha")

        registry = ToolRegistry()
        registry.register(ToolDefinition("broken", ToolCategory.SEARCH, "Broken", GetLicenseInfo, handler))
        dispatcher = ToolDispatcher(registry, fake_client)

        with caplog.at_level(logging.WARNING):
            response = await dispatcher.dispatch("broken", {})

        assert response.error.kind is ErrorKind.INTERNAL
        assert response.error.message == "Error executing tool broken: 'sha'"
        assert dispatcher.state is DispatchState.IDLE
        failure = [r for r in caplog.records if "failed after" in r.getMessage()][0]
        assert failure.tool == "broken"
        assert failure.error_kind == "internal"
        assert len(failure.request_id) == 8

    @pytest.mark.asyncio
    async def test_calls_are_serialized(self, fake_client):
        active = []
        overlap = []

        async def handler(client, args):
            active.append(1)
            overlap.append(len(active))
            await asyncio.sleep(0)
            active.pop()
            return None

        registry = ToolRegistry()
        registry.register(ToolDefinition("slow", ToolCategory.SEARCH, "Slow", GetLicenseInfo, handler))
        dispatcher = ToolDispatcher(registry, fake_client)

        await asyncio.gather(*(dispatcher.dispatch("slow") for _ in range(5)))

        assert overlap == [1, 1, 1, 1, 1]


class TestRendering:
    def test_result_is_json_text(self):
        content = ToolResponse(result={"name": "snowman ☃"}).to_content()

        assert len(content) == 1
        assert isinstance(content[0], TextContent)
        assert json.loads(content[0].text) == {"name": "snowman ☃"}
        assert "☃" in content[0].text

    def test_error_is_json_text(self):
        error = GitHubToolError(ErrorKind.NOT_FOUND, "GitHub API error 404: Not Found", status=404)
        content = ToolResponse(error=error).to_content()

        assert json.loads(content[0].text) == {
            "error": {"kind": "not_found", "code": -32004, "message": "GitHub API error 404: Not Found", "status": 404}
        }

    @pytest.mark.asyncio
    async def test_call_tool_raises_classified_errors(self, dispatcher):
        with pytest.raises(GitHubToolError) as exc_info:
            await dispatcher.call_tool("make-coffee", {})
        assert exc_info.value.kind is ErrorKind.METHOD_NOT_FOUND

    @pytest.mark.asyncio
    async def test_call_tool_renders_results(self, dispatcher):
        content = await dispatcher.call_tool("create-branch", {"owner": "acme", "repo": "widgets", "branch": "main"})
        assert json.loads(content[0].text)["success"] is False
