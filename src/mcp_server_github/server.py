"""
MCP GitHub Server - stdio transport wiring.

The configuration is built once by the CLI and handed in explicitly; the
HTTP session, client, registry and dispatcher all live for exactly one
``serve`` call.
"""

import logging
from typing import Any, Dict, List, Optional

import aiohttp
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError
from mcp.types import TextContent, Tool

from .configuration import ServerConfig
from .core.handlers import ToolDispatcher
from .core.tools import build_default_registry
from .github.client import GitHubClient

logger = logging.getLogger(__name__)

SERVER_NAME = "github-enterprise"


def create_server(dispatcher: ToolDispatcher) -> Server:
    """Register the tool catalog and the call handler on a new MCP server"""
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> List[Tool]:
        return dispatcher.registry.list_tools()

    # Arguments are validated by the dispatcher so failures keep their error kind
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> List[TextContent]:
        response = await dispatcher.dispatch(name, arguments)
        if response.error is not None:
            # The SDK reports a raised error to the client as its text only
            error = response.error
            raise McpError(error.to_error_data(message=error.to_json()))
        return response.to_content()

    return server


async def serve(config: ServerConfig) -> None:
    """Run the server on stdio until the client disconnects"""
    logger.info(f"🚀 Starting MCP GitHub Server against {config.api_url}")
    if config.is_enterprise:
        logger.info("🏢 GitHub Enterprise endpoint configured")

    async with aiohttp.ClientSession() as session:
        client = GitHubClient(config, session)
        dispatcher = ToolDispatcher(build_default_registry(), client)
        server = create_server(dispatcher)

        options = server.create_initialization_options()
        async with stdio_server() as (read_stream, write_stream):
            logger.info("Server running. Waiting for requests...")
            await server.run(read_stream, write_stream, options)

    logger.info("MCP GitHub Server shutting down.")
