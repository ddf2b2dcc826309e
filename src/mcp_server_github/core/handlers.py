"""Tool call dispatch for MCP GitHub Server"""

import asyncio
import json
import logging
import os
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from mcp.types import TextContent

from ..error_handling import GitHubToolError, InvalidParamsError, MethodNotFoundError, ensure_classified
from ..github.client import GitHubClient
from ..github.models import validate_arguments
from .tools import ToolRegistry

logger = logging.getLogger(__name__)

RawArguments = Union[None, str, bytes, Mapping[str, Any]]


class DispatchState(str, Enum):
    IDLE = "idle"
    EXECUTING = "executing"
    RESPONDING = "responding"


@dataclass(frozen=True)
class ToolResponse:
    """Outcome of one tool call: a reshaped result or a classified error, never both."""

    result: Any = None
    error: Optional[GitHubToolError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_content(self) -> List[TextContent]:
        if self.error is not None:
            text = self.error.to_json()
        else:
            text = json.dumps(self.result, indent=2, ensure_ascii=False)
        return [TextContent(type="text", text=text)]


def decode_arguments(name: str, arguments: RawArguments) -> Dict[str, Any]:
    """Turn a structured or serialized argument bag into a mapping.

    Raises:
        InvalidParamsError: if the text is not JSON or not a JSON object
    """
    if arguments is None:
        return {}
    if isinstance(arguments, (str, bytes)):
        try:
            arguments = json.loads(arguments) if arguments.strip() else {}
        except ValueError as e:
            raise InvalidParamsError(f"Invalid JSON arguments for {name}: {e}") from e
    if not isinstance(arguments, Mapping):
        raise InvalidParamsError(
            f"Arguments for {name} must be an object, got {type(arguments).__name__}"
        )
    return dict(arguments)


class ToolDispatcher:
    """
    Resolve a tool by name, validate its arguments, run its handler and wrap
    the outcome.

    One call is executed at a time: IDLE -> EXECUTING -> RESPONDING -> IDLE.
    Unknown tool names go straight to RESPONDING without validation or any
    handler being invoked.
    """

    def __init__(self, registry: ToolRegistry, client: GitHubClient):
        self.registry = registry
        self.client = client
        self.state = DispatchState.IDLE
        self._lock = asyncio.Lock()

    def _transition(self, state: DispatchState, request_id: str):
        logger.debug(f"[{request_id}] {self.state.value} -> {state.value}")
        self.state = state

    async def _execute(self, name: str, arguments: RawArguments) -> Any:
        tool_def = self.registry.get_tool(name)
        if tool_def is None:
            raise MethodNotFoundError(name)

        args = validate_arguments(tool_def.schema, name, decode_arguments(name, arguments))
        if tool_def.mutates_files:
            logger.debug(f"{name} writes to {args.owner}/{args.repo}:{args.branch}")
        return await tool_def.handler(self.client, args)

    async def dispatch(self, name: str, arguments: RawArguments = None) -> ToolResponse:
        """Main tool call entry point"""
        async with self._lock:
            request_id = os.urandom(4).hex()
            context = {"request_id": request_id, "tool": name}
            self._transition(DispatchState.EXECUTING, request_id)
            logger.info(f"🔧 [{request_id}] Tool call: {name}", extra=context)

            start_time = time.monotonic()
            try:
                response = ToolResponse(result=await self._execute(name, arguments))
            except Exception as e:
                error = ensure_classified(e, name)
                response = ToolResponse(error=error)
            duration_ms = round((time.monotonic() - start_time) * 1000, 2)

            self._transition(DispatchState.RESPONDING, request_id)
            if response.ok:
                logger.info(
                    f"✅ [{request_id}] Tool '{name}' completed in {duration_ms}ms",
                    extra={**context, "duration_ms": duration_ms},
                )
            else:
                logger.warning(
                    f"❌ [{request_id}] Tool '{name}' failed after {duration_ms}ms: {response.error.message}",
                    extra={**context, "duration_ms": duration_ms, "error_kind": response.error.kind.value},
                )

            self._transition(DispatchState.IDLE, request_id)
            return response

    async def call_tool(self, name: str, arguments: RawArguments = None) -> List[TextContent]:
        """Dispatch and render a successful result; errors are raised classified."""
        response = await self.dispatch(name, arguments)
        if response.error is not None:
            raise response.error
        return response.to_content()
