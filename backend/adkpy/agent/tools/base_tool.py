"""
Base tool interface for agent tools
"""

import inspect
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional, get_type_hints

from ..core.runtime.context import ToolContext
from ..core.runtime.models import FunctionDeclaration


@dataclass
class ToolResult:
    """Result of tool execution"""
    success: bool
    data: Any = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"success": self.success}
        if self.data is not None:
            result["data"] = self.data
        if self.error is not None:
            result["error"] = self.error
        return result


_TOOL_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_-]{0,63}$")


class BaseTool(ABC):
    """Base class for all agent tools"""

    def __init__(self, name: str, description: str = "", parameters: Optional[Dict[str, Any]] = None):
        """Initialize tool with required properties"""
        if not _TOOL_NAME_RE.match(name or ""):
            raise ValueError(f"Invalid tool name: {name!r}")
        self.name = name
        self.description = description
        self.parameters: Dict[str, Any] = parameters or {"type": "object", "properties": {}}

    def get_declaration(self) -> FunctionDeclaration:
        """Declaration offered to the model"""
        return FunctionDeclaration(name=self.name, description=self.description, parameters=self.parameters)

    @abstractmethod
    async def run_async(self, args: Dict[str, Any], tool_context: ToolContext) -> Any:
        """Execute the tool with parsed arguments"""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


# Python annotation -> JSON Schema type
TYPE_MAP = {
    str: "string",
    int: "integer",
    float: "number",
    bool: "boolean",
    list: "array",
    dict: "object",
}


def schema_from_signature(func) -> Dict[str, Any]:
    """Build a JSON-schema parameter object from a function signature"""
    properties: Dict[str, Any] = {}
    required = []
    try:
        hints = get_type_hints(func)
    except Exception:
        hints = {}
    for name, param in inspect.signature(func).parameters.items():
        if name in ("self", "cls", "tool_context"):
            continue
        annotation = hints.get(name, param.annotation)
        origin = getattr(annotation, "__origin__", None)
        json_type = TYPE_MAP.get(annotation) or TYPE_MAP.get(origin) or "string"
        properties[name] = {"type": json_type}
        if param.default is inspect.Parameter.empty:
            required.append(name)
        else:
            properties[name]["default"] = param.default
    schema: Dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


class FunctionTool(BaseTool):
    """Wrap a plain (sync or async) callable as a tool.

    The callable receives the parsed arguments as keyword arguments, plus
    ``tool_context`` when it declares that parameter.
    """

    def __init__(self, func, name: Optional[str] = None, description: Optional[str] = None,
                 parameters: Optional[Dict[str, Any]] = None):
        super().__init__(
            name=name or func.__name__,
            description=description if description is not None else (inspect.getdoc(func) or ""),
            parameters=parameters or schema_from_signature(func),
        )
        self.func = func
        self._is_async = inspect.iscoroutinefunction(func)
        self._wants_context = "tool_context" in inspect.signature(func).parameters

    async def run_async(self, args: Dict[str, Any], tool_context: ToolContext) -> Any:
        kwargs = dict(args)
        if self._wants_context:
            kwargs["tool_context"] = tool_context
        if self._is_async:
            return await self.func(**kwargs)
        return self.func(**kwargs)
