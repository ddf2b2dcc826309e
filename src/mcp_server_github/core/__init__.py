"""MCP GitHub Server core components"""

from .handlers import DispatchState, ToolDispatcher, ToolResponse
from .tools import GitHubTools, ToolCategory, ToolDefinition, ToolRegistry, build_default_registry

__all__ = [
    "GitHubTools",
    "ToolCategory",
    "ToolDefinition",
    "ToolRegistry",
    "build_default_registry",
    "DispatchState",
    "ToolDispatcher",
    "ToolResponse",
]
