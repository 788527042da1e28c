"""
Tool registry for managing an agent's tools
"""

from typing import Dict, Iterable, List, Optional

from .base_tool import BaseTool
from ..core.runtime.models import FunctionDeclaration


class ToolRegistry:
    """Name-indexed, insertion-ordered collection of tools"""

    def __init__(self, tools: Optional[Iterable[BaseTool]] = None):
        """Initialize registry, optionally with tools"""
        self._tools: Dict[str, BaseTool] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: BaseTool) -> None:
        """Register a tool; names must be unique"""
        if tool.name in self._tools:
            raise ValueError(f"Tool {tool.name} is already registered")
        self._tools[tool.name] = tool

    def get(self, name: str) -> Optional[BaseTool]:
        """Get a tool by name"""
        return self._tools.get(name)

    def all(self) -> List[BaseTool]:
        """Get all registered tools"""
        return list(self._tools.values())

    def declarations(self) -> List[FunctionDeclaration]:
        return [tool.get_declaration() for tool in self._tools.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
