"""Tests for the MCP server wiring and the command line entry point."""

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner
from mcp.shared.memory import create_connected_server_and_client_session

from fixtures.github_responses import TEST_TOKEN
from mcp_server_github import main
from mcp_server_github.server import SERVER_NAME, create_server


@pytest.mark.asyncio
async def test_tools_over_mcp_session(dispatcher, remote):
    server = create_server(dispatcher)
    assert server.name == SERVER_NAME == "github-enterprise"

    async with create_connected_server_and_client_session(server) as session:
        listed = await session.list_tools()
        assert len(listed.tools) == 33
        assert "push-files" in {tool.name for tool in listed.tools}

        result = await session.call_tool(
            "create-branch", {"owner": "acme", "repo": "widgets", "branch": "feature-x"}
        )
        assert result.isError is False
        payload = json.loads(result.content[0].text)
        assert payload["success"] is True
        assert remote.refs["feature-x"] == remote.head("main")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "tool,arguments,kind,code,status",
    [
        ("make-coffee", {}, "method_not_found", -32601, None),
        ("get-issue", {"owner": "acme", "repo": "widgets", "issue_number": 404}, "not_found", -32004, 404),
        ("list-issues", {"owner": "acme", "repo": "widgets", "state": "yolo"}, "invalid_params", -32602, None),
    ],
)
async def test_failed_calls_carry_the_error_kind(dispatcher, fake_client, tool, arguments, kind, code, status):
    async with create_connected_server_and_client_session(create_server(dispatcher)) as session:
        result = await session.call_tool(tool, arguments)

    assert result.isError is True
    error = json.loads(result.content[0].text)["error"]
    assert error["kind"] == kind
    assert error["code"] == code
    assert error.get("status") == status
    if kind != "not_found":
        assert fake_client.calls == []


@pytest.fixture
def cli():
    """Run the CLI with logging, .env loading and the server loop patched out."""
    with patch("mcp_server_github.configure_logging") as configure_logging, patch(
        "mcp_server_github.load_environment_variables", return_value=[]
    ) as load_env, patch("mcp_server_github.serve", new_callable=AsyncMock) as serve:
        yield {
            "runner": CliRunner(),
            "configure_logging": configure_logging,
            "load_environment_variables": load_env,
            "serve": serve,
        }


@pytest.mark.usefixtures("clean_github_env")
class TestCommandLine:
    def test_missing_token_exits_with_error(self, cli):
        result = cli["runner"].invoke(main, [], env={"GITHUB_PERSONAL_ACCESS_TOKEN": ""})

        assert result.exit_code == 1
        assert "GITHUB_PERSONAL_ACCESS_TOKEN environment variable is required" in result.output
        cli["serve"].assert_not_called()

    def test_starts_server_with_configuration(self, cli):
        result = cli["runner"].invoke(
            main,
            ["-vv"],
            env={
                "GITHUB_PERSONAL_ACCESS_TOKEN": TEST_TOKEN,
                "GITHUB_API_URL": "https://ghe.example.com/api/v3",
            },
        )

        assert result.exit_code == 0, result.output
        cli["configure_logging"].assert_called_once_with("DEBUG")
        cli["serve"].assert_awaited_once()
        config = cli["serve"].await_args.args[0]
        assert config.token == TEST_TOKEN
        assert config.is_enterprise is True

    @pytest.mark.parametrize(
        "args,env_level,expected",
        [([], None, "WARNING"), ([], "error", "error"), (["-v"], "error", "INFO")],
    )
    def test_log_level(self, cli, args, env_level, expected):
        env = {"GITHUB_PERSONAL_ACCESS_TOKEN": TEST_TOKEN, "LOG_LEVEL": env_level}
        result = cli["runner"].invoke(main, args, env=env)

        assert result.exit_code == 0, result.output
        cli["configure_logging"].assert_called_once_with(expected)

    def test_env_file_is_passed_through(self, cli, tmp_path):
        env_file = tmp_path / "github.env"

        cli["runner"].invoke(
            main, ["--env-file", str(env_file)], env={"GITHUB_PERSONAL_ACCESS_TOKEN": TEST_TOKEN}
        )

        cli["load_environment_variables"].assert_called_once_with(Path(env_file))
