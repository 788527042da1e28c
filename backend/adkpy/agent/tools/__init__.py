"""
Agent tools package
"""

from .base_tool import BaseTool, FunctionTool, ToolResult, schema_from_signature
from .exit_loop_tool import ExitLoopTool
from .tool_registry import ToolRegistry
from .websearch_tools import GoogleSearchTool

__all__ = [
    "BaseTool",
    "FunctionTool",
    "ToolResult",
    "schema_from_signature",
    "ToolRegistry",
    "ExitLoopTool",
    "GoogleSearchTool",
]
